"""
Franchise, task and royalty schemas.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class FranchiseCreate(BaseModel):
    business_name: str = Field(min_length=1, max_length=255)
    brand_name: str = Field(min_length=1, max_length=255)
    industry: str | None = Field(None, max_length=100)
    description: str | None = None
    contact_email: EmailStr | None = None
    contact_phone: str | None = Field(None, max_length=30)
    royalty_percentage: Decimal | None = Field(None, ge=0, le=100)


class FranchiseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    franchisor_id: UUID
    business_name: str
    brand_name: str
    industry: str | None = None
    description: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    royalty_percentage: Decimal | None = None
    status: str
    created_at: datetime


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None
    status: str
    priority: str
    due_date: date | None = None
    assigned_to_id: UUID | None = None
    franchise_id: UUID | None = None


class RoyaltyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    franchise_id: UUID
    franchisee_id: UUID | None = None
    period: str
    amount: Decimal
    status: str


class RoyaltySummary(BaseModel):
    royalties: list[RoyaltyResponse]
    total_amount: Decimal
    outstanding_amount: Decimal
