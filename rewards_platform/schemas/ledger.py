from datetime import datetime
from typing import Literal, Optional

from uuid import UUID

from pydantic import BaseModel, Field


class EarnRequest(BaseModel):
    user_id: str = Field(min_length=1)
    family_id: str = Field(min_length=1)
    user_name: Optional[str] = None
    amount: int
    source_type: Literal["JOB", "SCHOOL"] = "JOB"
    source_id: Optional[str] = None
    description: Optional[str] = None


class AdjustmentRequest(BaseModel):
    user_id: str = Field(min_length=1)
    family_id: str = Field(min_length=1)
    amount: int
    description: Optional[str] = None
    adjusted_by: Optional[str] = None


class LedgerEntryOut(BaseModel):
    id: UUID
    user_id: str
    family_id: str
    user_name: Optional[str] = None

    amount: int
    entry_type: str

    source_type: str
    source_id: Optional[str] = None
    redemption_id: Optional[UUID] = None

    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class BalanceOut(BaseModel):
    user_id: Optional[str] = None
    family_id: Optional[str] = None
    points_balance: int
