from __future__ import annotations

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from rewards_platform.models.points_ledger_entry import PointsLedgerEntry
from rewards_platform.services.clock import utcnow
from rewards_platform.services.errors import InvalidAmount


logger = logging.getLogger(__name__)

EARNED = "EARNED"
SPENT = "SPENT"
ADJUSTED = "ADJUSTED"

SOURCE_JOB = "JOB"
SOURCE_REWARD_REDEMPTION = "REWARD_REDEMPTION"
SOURCE_SCHOOL = "SCHOOL"
SOURCE_ADMIN_ADJUSTMENT = "ADMIN_ADJUSTMENT"

SOURCE_TYPES = (SOURCE_JOB, SOURCE_REWARD_REDEMPTION, SOURCE_SCHOOL, SOURCE_ADMIN_ADJUSTMENT)


# ============================================================
# BALANCE
# ============================================================

def get_balance(db: Session, user_id: str) -> int:
    balance = (
        db.query(func.coalesce(func.sum(PointsLedgerEntry.amount), 0))
        .filter(PointsLedgerEntry.user_id == user_id)
        .scalar()
    )
    return int(balance or 0)


def get_family_balance(db: Session, family_id: str) -> int:
    balance = (
        db.query(func.coalesce(func.sum(PointsLedgerEntry.amount), 0))
        .filter(PointsLedgerEntry.family_id == family_id)
        .scalar()
    )
    return int(balance or 0)


def list_entries(
    db: Session,
    *,
    user_id: str | None = None,
    family_id: str | None = None,
    limit: int = 100,
) -> list[PointsLedgerEntry]:
    q = db.query(PointsLedgerEntry)
    if user_id:
        q = q.filter(PointsLedgerEntry.user_id == user_id)
    if family_id:
        q = q.filter(PointsLedgerEntry.family_id == family_id)
    return q.order_by(PointsLedgerEntry.created_at.desc()).limit(limit).all()


# ============================================================
# APPEND
# ============================================================

def _append(
    db: Session,
    *,
    user_id: str,
    family_id: str,
    amount: int,
    entry_type: str,
    source_type: str,
    source_id: str | None,
    description: str | None,
    user_name: str | None,
    redemption_id: UUID | None,
    now: datetime | None,
) -> PointsLedgerEntry:
    if source_type not in SOURCE_TYPES:
        raise ValueError(f"Unsupported ledger source type: {source_type}")

    entry = PointsLedgerEntry(
        user_id=user_id,
        family_id=family_id,
        user_name=user_name,
        amount=amount,
        entry_type=entry_type,
        source_type=source_type,
        source_id=source_id,
        redemption_id=redemption_id,
        description=description,
        created_at=now or utcnow(),
    )
    db.add(entry)
    db.flush()

    logger.info(
        "ledger entry recorded",
        extra={
            "entry_id": str(entry.id),
            "user_id": user_id,
            "amount": amount,
            "entry_type": entry_type,
            "source_type": source_type,
        },
    )
    return entry


def record_earn(
    db: Session,
    user_id: str,
    family_id: str,
    amount: int,
    *,
    source_type: str = SOURCE_JOB,
    source_id: str | None = None,
    description: str | None = None,
    user_name: str | None = None,
    now: datetime | None = None,
) -> PointsLedgerEntry:
    if amount is None or int(amount) <= 0:
        raise InvalidAmount()

    return _append(
        db,
        user_id=user_id,
        family_id=family_id,
        amount=int(amount),
        entry_type=EARNED,
        source_type=source_type,
        source_id=source_id,
        description=description,
        user_name=user_name,
        redemption_id=None,
        now=now,
    )


def record_spend(
    db: Session,
    user_id: str,
    family_id: str,
    amount: int,
    *,
    source_type: str = SOURCE_REWARD_REDEMPTION,
    source_id: str | None = None,
    description: str | None = None,
    user_name: str | None = None,
    redemption_id: UUID | None = None,
    now: datetime | None = None,
) -> PointsLedgerEntry:
    """Append a debit of ``amount`` points.

    The balance is not checked here; callers that must not overdraw do so
    before calling.
    """
    if amount is None or int(amount) <= 0:
        raise InvalidAmount()

    return _append(
        db,
        user_id=user_id,
        family_id=family_id,
        amount=-int(amount),
        entry_type=SPENT,
        source_type=source_type,
        source_id=source_id,
        description=description,
        user_name=user_name,
        redemption_id=redemption_id,
        now=now,
    )


def record_adjustment(
    db: Session,
    user_id: str,
    family_id: str,
    amount: int,
    *,
    source_type: str = SOURCE_ADMIN_ADJUSTMENT,
    source_id: str | None = None,
    description: str | None = None,
    user_name: str | None = None,
    redemption_id: UUID | None = None,
    now: datetime | None = None,
) -> PointsLedgerEntry:
    if amount is None or int(amount) == 0:
        raise InvalidAmount("Adjustment amount must be non-zero")

    return _append(
        db,
        user_id=user_id,
        family_id=family_id,
        amount=int(amount),
        entry_type=ADJUSTED,
        source_type=source_type,
        source_id=source_id,
        description=description,
        user_name=user_name,
        redemption_id=redemption_id,
        now=now,
    )
