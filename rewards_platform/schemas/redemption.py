from datetime import datetime
from typing import List, Optional

from uuid import UUID

from pydantic import BaseModel, Field

from rewards_platform.services.errors import ErrorCode


class RedemptionCreate(BaseModel):
    reward_id: UUID
    user_id: str = Field(min_length=1)
    user_name: Optional[str] = None
    family_id: str = Field(min_length=1)
    child_age: Optional[int] = Field(default=None, ge=0, le=25)
    job_ids: List[str] = Field(default_factory=list)
    points_to_spend: int
    city: Optional[str] = None
    zip_code: Optional[str] = None
    idempotency_key: Optional[str] = Field(default=None, max_length=150)


class RedemptionResult(BaseModel):
    success: bool
    redemption_id: Optional[UUID] = None
    redemption_code: Optional[str] = None
    qr_code_data: Optional[str] = None
    expires_at: Optional[datetime] = None
    business_name: Optional[str] = None
    reward_title: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    error: Optional[str] = None


class VerifyRequest(BaseModel):
    redemption_code: str = Field(min_length=1)
    business_id: UUID
    verified_by: Optional[str] = None


class CancelRequest(BaseModel):
    cancelled_by: Optional[str] = None
    reason: Optional[str] = Field(default=None, max_length=500)


class RedemptionOut(BaseModel):
    id: UUID
    reward_id: UUID
    business_id: Optional[UUID] = None

    user_id: str
    user_name: Optional[str] = None
    family_id: str
    child_age: Optional[int] = None

    points_spent: int
    jobs_used: List[str] = Field(default_factory=list)
    ledger_entry_ids: List[str] = Field(default_factory=list)

    redemption_code: str
    qr_code_data: Optional[str] = None

    status: str

    created_at: datetime
    expires_at: datetime
    fulfilled_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    cancelled_by: Optional[str] = None

    business_verified_at: Optional[datetime] = None
    business_verified_by: Optional[str] = None

    redemption_city: Optional[str] = None
    redemption_zip: Optional[str] = None

    class Config:
        from_attributes = True


class RedemptionOutcome(BaseModel):
    success: bool
    redemption: Optional[RedemptionOut] = None
    error_code: Optional[ErrorCode] = None
    error: Optional[str] = None


class VerificationResult(RedemptionOutcome):
    pass


class CancellationResult(RedemptionOutcome):
    pass
