"""
Franchisee routes.
"""

from fastapi import APIRouter, Depends

from franchise_hub.api.dependencies.services import get_franchise_service
from franchise_hub.core.auth import CurrentUser, require_ability, require_role
from franchise_hub.core.gates.dependencies import enforce_gates
from franchise_hub.core.roles import Role
from franchise_hub.schemas.franchise import RoyaltySummary, TaskResponse
from franchise_hub.services.franchise import FranchiseService

router = APIRouter(
    dependencies=[Depends(enforce_gates), Depends(require_role(Role.FRANCHISEE))],
)


@router.get(
    "/my-tasks",
    response_model=list[TaskResponse],
    dependencies=[Depends(require_ability("read", "Task"))],
)
async def my_tasks(
    current_user: CurrentUser,
    franchises: FranchiseService = Depends(get_franchise_service),
):
    return await franchises.tasks_assigned_to(current_user.id)


@router.get(
    "/royalties",
    response_model=RoyaltySummary,
    dependencies=[Depends(require_ability("read", "Royalty"))],
)
async def my_royalties(
    current_user: CurrentUser,
    franchises: FranchiseService = Depends(get_franchise_service),
):
    royalties = await franchises.royalties_for_franchisee(current_user.id)
    return franchises.summarize(royalties)
