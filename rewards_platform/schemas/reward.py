from datetime import datetime
from typing import Literal, Optional

from uuid import UUID

from pydantic import BaseModel, Field, field_validator


RewardSource = Literal["LOCAL_BUSINESS", "AFFILIATE_LINK", "PLATFORM_REWARD"]
RewardStatus = Literal["DRAFT", "PENDING_APPROVAL", "APPROVED", "ACTIVE", "PAUSED", "COMPLETED"]


class RewardCreate(BaseModel):
    business_id: Optional[UUID] = None
    reward_source: RewardSource = "LOCAL_BUSINESS"
    title: str = Field(min_length=1)
    description: Optional[str] = None
    redemption_instructions: Optional[str] = None
    point_cost: int = Field(gt=0)
    retail_value: Optional[float] = None
    status: RewardStatus = "DRAFT"
    is_active: bool = True
    total_available: Optional[int] = Field(default=None, ge=0)


class RewardUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    redemption_instructions: Optional[str] = None
    point_cost: Optional[int] = Field(default=None, gt=0)
    retail_value: Optional[float] = None
    status: Optional[RewardStatus] = None
    is_active: Optional[bool] = None
    total_available: Optional[int] = Field(default=None, ge=0)

    @field_validator("title", "point_cost", "status", "is_active")
    @classmethod
    def reject_null(cls, v, info):
        # omit the field to leave it unchanged; these columns are NOT NULL
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class RewardOut(BaseModel):
    id: UUID
    business_id: Optional[UUID] = None
    reward_source: str
    title: str
    description: Optional[str] = None
    redemption_instructions: Optional[str] = None
    point_cost: int
    retail_value: Optional[float] = None
    status: str
    is_active: bool
    total_available: Optional[int] = None
    current_redemptions: int
    redemptions: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
