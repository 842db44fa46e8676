"""
API routes aggregation.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .onboarding import router as onboarding_router
from .franchisee import router as franchisee_router
from .franchisor import router as franchisor_router
from .tasks import router as tasks_router
from .admin import router as admin_router

router = APIRouter()

router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(onboarding_router, prefix="/onboarding", tags=["onboarding"])
router.include_router(franchisee_router, prefix="/franchisee", tags=["franchisee"])
router.include_router(franchisor_router, prefix="/franchisor", tags=["franchisor"])
router.include_router(tasks_router, prefix="/tasks", tags=["tasks"])
router.include_router(admin_router, prefix="/admin", tags=["admin"])
