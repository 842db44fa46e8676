"""
Request gates for users who have not finished setting up their account.
"""

from .decisions import GateDecision, GateRedirectRequired
from .gates import (
    GateContext,
    GatePipeline,
    default_pipeline,
    onboarding_gate,
    franchise_registration_gate,
    is_franchise_registration_request,
    ONBOARDING_ALLOWED_PATHS,
    FRANCHISE_ALLOWED_PATHS,
)

__all__ = [
    "GateDecision",
    "GateRedirectRequired",
    "GateContext",
    "GatePipeline",
    "default_pipeline",
    "onboarding_gate",
    "franchise_registration_gate",
    "is_franchise_registration_request",
    "ONBOARDING_ALLOWED_PATHS",
    "FRANCHISE_ALLOWED_PATHS",
]
