"""
Task routes shared by every role that can read tasks.
"""

from fastapi import APIRouter, Depends

from franchise_hub.api.dependencies.services import get_franchise_service
from franchise_hub.core.auth import CurrentUser, require_ability
from franchise_hub.core.gates.dependencies import enforce_gates
from franchise_hub.schemas.franchise import TaskResponse
from franchise_hub.services.franchise import FranchiseService

router = APIRouter(dependencies=[Depends(enforce_gates)])


@router.get(
    "/mine",
    response_model=list[TaskResponse],
    dependencies=[Depends(require_ability("read", "Task"))],
)
async def my_tasks(
    current_user: CurrentUser,
    franchises: FranchiseService = Depends(get_franchise_service),
):
    """Tasks assigned to the caller."""
    return await franchises.tasks_assigned_to(current_user.id)
