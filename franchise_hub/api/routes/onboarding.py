"""
Onboarding routes.

These stay reachable while the user is held at a gate.
"""

from fastapi import APIRouter, Depends

from franchise_hub.api.dependencies.services import get_franchise_service, get_onboarding_service
from franchise_hub.core.gates.dependencies import GatedUser
from franchise_hub.core.roles import Role
from franchise_hub.schemas.onboarding import (
    FranchiseStatus,
    OnboardingComplete,
    OnboardingStatus,
)
from franchise_hub.services.franchise import FranchiseService
from franchise_hub.services.onboarding import OnboardingService

router = APIRouter()


@router.get("/status", response_model=OnboardingStatus)
async def onboarding_status(
    current_user: GatedUser,
    onboarding: OnboardingService = Depends(get_onboarding_service),
):
    return onboarding.status(current_user)


@router.post("/complete", response_model=OnboardingStatus)
async def complete_onboarding(
    data: OnboardingComplete,
    current_user: GatedUser,
    onboarding: OnboardingService = Depends(get_onboarding_service),
):
    """Save the profile and lift the onboarding gate."""
    user = await onboarding.complete(current_user, data)
    return onboarding.status(user)


@router.get("/franchise-status", response_model=FranchiseStatus)
async def franchise_status(
    current_user: GatedUser,
    franchises: FranchiseService = Depends(get_franchise_service),
):
    franchise = await franchises.get_for_franchisor(current_user.id)
    return FranchiseStatus(
        has_franchise=franchise is not None,
        requires_franchise_registration=current_user.role == Role.FRANCHISOR.value and franchise is None,
        franchise_id=str(franchise.id) if franchise else None,
    )
