from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from rewards_platform.config import Settings, get_settings
from rewards_platform.models.redemption import Redemption
from rewards_platform.schemas.redemption import RedemptionOut, VerificationResult
from rewards_platform.services.clock import utcnow
from rewards_platform.services.code_service import normalize_code
from rewards_platform.services.errors import (
    AlreadyFulfilled,
    BusinessMismatch,
    CodeNotFound,
    RedemptionCancelled,
    RedemptionExpired,
    RewardsError,
)
from rewards_platform.services.redemption_service import (
    CANCELLED,
    EXPIRED,
    REDEEMED,
    is_past_expiry,
    transition,
)


logger = logging.getLogger(__name__)


def find_by_code(db: Session, code: str, *, for_update: bool = False) -> Redemption | None:
    q = db.query(Redemption).filter(Redemption.redemption_code == normalize_code(code))
    if for_update:
        q = q.with_for_update()
    return q.first()


def _verify(
    db: Session,
    code: str,
    business_id,
    verified_by: str | None,
    now: datetime,
    settings: Settings,
) -> Redemption:
    # Only stored state is authoritative; the QR payload is never consulted.
    redemption = find_by_code(db, code, for_update=True)
    if not redemption:
        raise CodeNotFound()

    if str(redemption.business_id) != str(business_id):
        raise BusinessMismatch()

    if redemption.status == REDEEMED:
        raise AlreadyFulfilled()
    if redemption.status == CANCELLED:
        raise RedemptionCancelled()
    if redemption.status == EXPIRED:
        raise RedemptionExpired()

    if is_past_expiry(redemption, now):
        transition(redemption, EXPIRED, now=now)
        db.flush()
        raise RedemptionExpired()

    transition(redemption, REDEEMED, now=now)
    redemption.fulfilled_at = now
    redemption.business_verified_at = now
    redemption.business_verified_by = verified_by or settings.default_verifier
    db.flush()

    logger.info(
        "redemption verified and fulfilled",
        extra={
            "redemption_id": str(redemption.id),
            "business_id": str(business_id),
            "verified_by": redemption.business_verified_by,
        },
    )
    return redemption


def verify(
    db: Session,
    code: str,
    business_id,
    *,
    verified_by: str | None = None,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> VerificationResult:
    """Fulfil a redemption code on behalf of a business operator.

    A code past its expiry is moved to EXPIRED even though the call fails, so
    the caller must commit the session on failure as well as on success.
    """
    now = now or utcnow()
    settings = settings or get_settings()

    try:
        redemption = _verify(db, code, business_id, verified_by, now, settings)
    except RewardsError as e:
        logger.info(
            "redemption verification rejected",
            extra={"business_id": str(business_id), "error_code": e.code.value},
        )
        return VerificationResult(success=False, error_code=e.code, error=e.message)

    return VerificationResult(success=True, redemption=RedemptionOut.model_validate(redemption))
