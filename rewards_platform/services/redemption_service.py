from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rewards_platform.config import Settings, get_settings
from rewards_platform.models.redemption import Redemption
from rewards_platform.models.reward import Reward
from rewards_platform.schemas.redemption import (
    CancellationResult,
    RedemptionCreate,
    RedemptionOut,
    RedemptionResult,
)
from rewards_platform.services import ledger_service
from rewards_platform.services import reward_directory
from rewards_platform.services.clock import utcnow
from rewards_platform.services.code_service import generate_code, generate_payload
from rewards_platform.services.errors import (
    AlreadyFulfilled,
    CodeAllocationFailed,
    IdempotencyConflict,
    InsufficientPoints,
    InvalidTransition,
    PointsMismatch,
    RedemptionCancelled,
    RedemptionExpired,
    RedemptionNotFound,
    RewardInactive,
    RewardNotFound,
    RewardsError,
    RewardSoldOut,
)


logger = logging.getLogger(__name__)

PENDING = "PENDING"
REDEEMED = "REDEEMED"
EXPIRED = "EXPIRED"
CANCELLED = "CANCELLED"

TERMINAL_STATUSES = frozenset({REDEEMED, EXPIRED, CANCELLED})

ALLOWED_TRANSITIONS = {
    PENDING: frozenset({REDEEMED, EXPIRED, CANCELLED}),
}


# ============================================================
# STATE MACHINE
# ============================================================

def transition(redemption: Redemption, target: str, *, now: datetime) -> Redemption:
    current = redemption.status
    if target not in ALLOWED_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransition(f"Cannot move redemption from {current} to {target}")

    redemption.status = target
    redemption.updated_at = now

    logger.info(
        "redemption status changed",
        extra={
            "redemption_id": str(redemption.id),
            "from_status": current,
            "to_status": target,
        },
    )
    return redemption


def is_past_expiry(redemption: Redemption, now: datetime) -> bool:
    return now > redemption.expires_at


def compute_expires_at(reward: Reward, now: datetime, settings: Settings) -> datetime:
    if reward.reward_source == reward_directory.AFFILIATE_LINK:
        return now + timedelta(days=settings.affiliate_redemption_ttl_days)
    return now + timedelta(hours=settings.redemption_ttl_hours)


# ============================================================
# CREATE
# ============================================================

def _allocate_code(db: Session, settings: Settings) -> str:
    for _ in range(max(1, settings.code_generation_attempts)):
        code = generate_code()
        taken = db.query(Redemption.id).filter(Redemption.redemption_code == code).first()
        if not taken:
            return code
        logger.warning("redemption code collision, regenerating")
    raise CodeAllocationFailed()


def _success_result(redemption: Redemption, reward: Reward | None, business_name: str) -> RedemptionResult:
    return RedemptionResult(
        success=True,
        redemption_id=redemption.id,
        redemption_code=redemption.redemption_code,
        qr_code_data=redemption.qr_code_data,
        expires_at=redemption.expires_at,
        business_name=business_name,
        reward_title=reward.title if reward else None,
    )


def _find_by_idempotency_key(db: Session, user_id: str, key: str) -> Redemption | None:
    return (
        db.query(Redemption)
        .filter(
            Redemption.user_id == user_id,
            Redemption.idempotency_key == key,
        )
        .first()
    )


def _replay(
    db: Session,
    existing: Redemption,
    request: RedemptionCreate,
    now: datetime,
    settings: Settings,
) -> RedemptionResult:
    """Return the stored result for a retried request.

    A key reused for a different reward, cost or family is a conflict. A key
    whose redemption has left PENDING reports that state instead of handing
    back a code that can no longer be used.
    """
    if (
        existing.reward_id != request.reward_id
        or existing.points_spent != request.points_to_spend
        or existing.family_id != request.family_id
    ):
        raise IdempotencyConflict()

    if existing.status == REDEEMED:
        raise AlreadyFulfilled()
    if existing.status == CANCELLED:
        raise RedemptionCancelled()
    if existing.status == EXPIRED or is_past_expiry(existing, now):
        raise RedemptionExpired()

    logger.info(
        "redemption replayed for idempotency key",
        extra={"redemption_id": str(existing.id), "user_id": request.user_id},
    )
    reward = reward_directory.get_reward(db, existing.reward_id)
    business_name = reward_directory.get_business_name(db, existing.business_id, settings.default_business_name)
    return _success_result(existing, reward, business_name)


def _create(db: Session, request: RedemptionCreate, now: datetime, settings: Settings) -> RedemptionResult:
    if request.idempotency_key:
        existing = _find_by_idempotency_key(db, request.user_id, request.idempotency_key)
        if existing:
            return _replay(db, existing, request, now, settings)

    # 1-3: preconditions, nothing written yet
    reward = reward_directory.get_reward(db, request.reward_id)
    if not reward:
        raise RewardNotFound()

    if not reward_directory.is_redeemable(reward):
        raise RewardInactive()

    if request.points_to_spend != reward.point_cost:
        raise PointsMismatch(f"Points mismatch: reward costs {reward.point_cost} points")

    if reward_directory.is_sold_out(reward):
        raise RewardSoldOut()

    if settings.enforce_points_balance:
        balance = ledger_service.get_balance(db, request.user_id)
        if balance < reward.point_cost:
            raise InsufficientPoints(
                f"Not enough points: balance is {balance}, reward costs {reward.point_cost}"
            )

    business_name = reward_directory.get_business_name(db, reward.business_id, settings.default_business_name)

    code = _allocate_code(db, settings)
    redemption_id = uuid.uuid4()
    qr_code_data = generate_payload(
        redemption_id,
        code,
        reward.id,
        reward.business_id,
        request.user_id,
        request.points_to_spend,
        now,
    )

    redemption = Redemption(
        id=redemption_id,
        reward_id=reward.id,
        business_id=reward.business_id,
        user_id=request.user_id,
        user_name=request.user_name or settings.default_user_name,
        family_id=request.family_id,
        child_age=request.child_age,
        points_spent=request.points_to_spend,
        jobs_used=list(request.job_ids),
        ledger_entry_ids=[],
        redemption_code=code,
        qr_code_data=qr_code_data,
        status=PENDING,
        idempotency_key=request.idempotency_key,
        created_at=now,
        expires_at=compute_expires_at(reward, now, settings),
        redemption_city=request.city,
        redemption_zip=request.zip_code,
    )
    try:
        # a concurrent request with the same key may have inserted first
        with db.begin_nested():
            db.add(redemption)
            db.flush()
    except IntegrityError:
        if not request.idempotency_key:
            raise
        existing = _find_by_idempotency_key(db, request.user_id, request.idempotency_key)
        if not existing:
            raise
        return _replay(db, existing, request, now, settings)

    entry = ledger_service.record_spend(
        db,
        request.user_id,
        request.family_id,
        request.points_to_spend,
        source_type=ledger_service.SOURCE_REWARD_REDEMPTION,
        source_id=str(redemption.id),
        description=f"Spent {request.points_to_spend} points on {reward.title}",
        user_name=redemption.user_name,
        redemption_id=redemption.id,
        now=now,
    )
    redemption.ledger_entry_ids = [str(entry.id)]

    if request.job_ids:
        logger.info(
            "jobs used for redemption",
            extra={"redemption_id": str(redemption.id), "job_ids": list(request.job_ids)},
        )

    reward_directory.increment_redemption_counters(db, reward.id)
    db.flush()

    logger.info(
        "reward redeemed",
        extra={
            "redemption_id": str(redemption.id),
            "reward_id": str(reward.id),
            "user_id": request.user_id,
            "points_spent": request.points_to_spend,
            "expires_at": redemption.expires_at.isoformat(),
        },
    )
    return _success_result(redemption, reward, business_name)


def create_redemption(
    db: Session,
    request: RedemptionCreate,
    *,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> RedemptionResult:
    """Exchange a user's points for a reward and issue a PENDING redemption code.

    Reward lookup, activity and point-cost checks run before anything is
    written; a failure there leaves no trace. The business name lookup and the
    reward counter increment are best-effort. The caller owns the commit.
    """
    now = now or utcnow()
    settings = settings or get_settings()

    try:
        return _create(db, request, now, settings)
    except RewardsError as e:
        logger.info(
            "redemption rejected",
            extra={
                "reward_id": str(request.reward_id),
                "user_id": request.user_id,
                "error_code": e.code.value,
            },
        )
        return RedemptionResult(success=False, error_code=e.code, error=e.message)


# ============================================================
# CANCEL
# ============================================================

def _cancel(
    db: Session,
    redemption_id,
    now: datetime,
    cancelled_by: str | None,
    reason: str | None,
) -> Redemption:
    redemption = (
        db.query(Redemption)
        .filter(Redemption.id == redemption_id)
        .with_for_update()
        .first()
    )
    if not redemption:
        raise RedemptionNotFound()

    if redemption.status == PENDING and is_past_expiry(redemption, now):
        transition(redemption, EXPIRED, now=now)
        db.flush()
        raise RedemptionExpired()

    transition(redemption, CANCELLED, now=now)
    redemption.cancelled_at = now
    redemption.cancelled_by = cancelled_by
    redemption.cancellation_reason = reason

    # compensating entries for the debit and the inventory slot
    refund = ledger_service.record_adjustment(
        db,
        redemption.user_id,
        redemption.family_id,
        redemption.points_spent,
        source_type=ledger_service.SOURCE_REWARD_REDEMPTION,
        source_id=str(redemption.id),
        description=f"Refund for cancelled redemption {redemption.redemption_code}",
        user_name=redemption.user_name,
        redemption_id=redemption.id,
        now=now,
    )
    redemption.ledger_entry_ids = [*(redemption.ledger_entry_ids or []), str(refund.id)]
    reward_directory.release_inventory(db, redemption.reward_id)

    db.flush()
    return redemption


def cancel_redemption(
    db: Session,
    redemption_id,
    *,
    cancelled_by: str | None = None,
    reason: str | None = None,
    now: datetime | None = None,
) -> CancellationResult:
    now = now or utcnow()
    try:
        redemption = _cancel(db, redemption_id, now, cancelled_by, reason)
    except RewardsError as e:
        logger.info(
            "redemption cancellation rejected",
            extra={"redemption_id": str(redemption_id), "error_code": e.code.value},
        )
        return CancellationResult(success=False, error_code=e.code, error=e.message)

    return CancellationResult(success=True, redemption=RedemptionOut.model_validate(redemption))


# ============================================================
# EXPIRE (sweep)
# ============================================================

def expire_redemptions(db: Session, *, now: datetime | None = None) -> int:
    now = now or utcnow()

    expired = (
        db.query(Redemption)
        .filter(Redemption.status == PENDING)
        .filter(Redemption.expires_at < now)
        .with_for_update()
        .all()
    )

    for redemption in expired:
        transition(redemption, EXPIRED, now=now)

    db.flush()
    return len(expired)


# ============================================================
# READ
# ============================================================

def get_redemption(db: Session, redemption_id) -> Redemption | None:
    return db.query(Redemption).filter(Redemption.id == redemption_id).first()


def list_redemptions(
    db: Session,
    *,
    user_id: str | None = None,
    family_id: str | None = None,
    business_id=None,
    status: str | None = None,
    limit: int = 100,
) -> list[Redemption]:
    q = db.query(Redemption)
    if user_id:
        q = q.filter(Redemption.user_id == user_id)
    if family_id:
        q = q.filter(Redemption.family_id == family_id)
    if business_id:
        q = q.filter(Redemption.business_id == business_id)
    if status:
        q = q.filter(Redemption.status == status)
    return q.order_by(Redemption.created_at.desc()).limit(limit).all()
