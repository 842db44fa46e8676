"""
Onboarding schemas.
"""

from pydantic import BaseModel, EmailStr, Field


class OnboardingUser(BaseModel):
    name: str
    email: EmailStr
    phone: str | None = None
    nationality: str | None = None
    state: str | None = None
    city: str | None = None
    address: str | None = None


class OnboardingStatus(BaseModel):
    requires_onboarding: bool
    profile_completed: bool
    user: OnboardingUser


class OnboardingComplete(BaseModel):
    """Profile fields a franchisee must supply before using the app."""
    name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=1, max_length=30)
    nationality: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    city: str = Field(min_length=1, max_length=100)
    address: str = Field(min_length=1, max_length=500)


class FranchiseStatus(BaseModel):
    has_franchise: bool
    requires_franchise_registration: bool
    franchise_id: str | None = None
