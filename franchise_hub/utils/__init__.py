"""Utility functions."""

from franchise_hub.utils.timezone import (
    UTC,
    utc_now,
    to_utc,
    seconds_until,
)

__all__ = [
    "UTC",
    "utc_now",
    "to_utc",
    "seconds_until",
]
