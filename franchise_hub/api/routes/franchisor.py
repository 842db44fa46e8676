"""
Franchisor routes.
"""

from fastapi import APIRouter, Depends, status

from franchise_hub.api.dependencies.services import get_franchise_service
from franchise_hub.core.auth import CurrentUser, require_ability, require_role
from franchise_hub.core.gates.dependencies import enforce_gates
from franchise_hub.core.roles import Role
from franchise_hub.schemas.franchise import (
    FranchiseCreate,
    FranchiseResponse,
    RoyaltySummary,
    TaskResponse,
)
from franchise_hub.services.franchise import FranchiseService

router = APIRouter(
    dependencies=[Depends(enforce_gates), Depends(require_role(Role.FRANCHISOR))],
)


@router.post(
    "/franchises",
    response_model=FranchiseResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[
        Depends(require_role(Role.FRANCHISOR, admin_bypass=False)),
        Depends(require_ability("manage", "Franchise")),
    ],
)
async def register_franchise(
    data: FranchiseCreate,
    current_user: CurrentUser,
    franchises: FranchiseService = Depends(get_franchise_service),
):
    """Register the caller's franchise. Lifts the registration gate."""
    return await franchises.register(current_user, data)


@router.get(
    "/franchise",
    response_model=FranchiseResponse,
    dependencies=[Depends(require_ability("read", "Franchise"))],
)
async def my_franchise(
    current_user: CurrentUser,
    franchises: FranchiseService = Depends(get_franchise_service),
):
    return await franchises.get_for_franchisor_or_404(current_user.id)


@router.get(
    "/tasks",
    response_model=list[TaskResponse],
    dependencies=[Depends(require_ability("manage", "Task"))],
)
async def franchise_tasks(
    current_user: CurrentUser,
    franchises: FranchiseService = Depends(get_franchise_service),
):
    franchise = await franchises.get_for_franchisor_or_404(current_user.id)
    return await franchises.tasks_for_franchise(franchise.id)


@router.get(
    "/royalty-management",
    response_model=RoyaltySummary,
    dependencies=[Depends(require_ability("manage", "Royalty"))],
)
async def royalty_management(
    current_user: CurrentUser,
    franchises: FranchiseService = Depends(get_franchise_service),
):
    franchise = await franchises.get_for_franchisor_or_404(current_user.id)
    royalties = await franchises.royalties_for_franchise(franchise.id)
    return franchises.summarize(royalties)
