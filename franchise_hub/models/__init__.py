"""
Database models.
"""

from .base import (
    Base,
    TimestampMixin,
    UUIDMixin,
    StandardMixin,
)
from .user import User
from .franchise import Franchise, Task, Royalty

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "StandardMixin",
    # Models
    "User",
    "Franchise",
    "Task",
    "Royalty",
]
