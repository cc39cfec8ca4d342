from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from rewards_platform.db import get_db
from rewards_platform.deps.errors import http_error
from rewards_platform.deps.operator import get_operator_identity
from rewards_platform.schemas.redemption import (
    CancellationResult,
    CancelRequest,
    RedemptionCreate,
    RedemptionOut,
    RedemptionResult,
    VerificationResult,
    VerifyRequest,
)
from rewards_platform.services import redemption_service
from rewards_platform.services.verification_service import verify


router = APIRouter(prefix="/redemptions", tags=["redemptions"])


@router.post("", response_model=RedemptionResult)
def create_redemption(payload: RedemptionCreate, db: Session = Depends(get_db)):
    result = redemption_service.create_redemption(db, payload)
    if not result.success:
        db.rollback()
        raise http_error(result.error_code, result.error)

    db.commit()
    return result


@router.post("/verify", response_model=VerificationResult)
def verify_redemption(
    payload: VerifyRequest,
    operator: str | None = Depends(get_operator_identity),
    db: Session = Depends(get_db),
):
    result = verify(
        db,
        payload.redemption_code,
        payload.business_id,
        verified_by=payload.verified_by or operator,
    )
    # an expired code is persisted as EXPIRED even though verification fails
    db.commit()
    if not result.success:
        raise http_error(result.error_code, result.error)
    return result


@router.get("", response_model=list[RedemptionOut])
def list_redemptions(
    user_id: str | None = None,
    family_id: str | None = None,
    business_id: UUID | None = None,
    status: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    if not (user_id or family_id or business_id):
        raise HTTPException(status_code=400, detail="Provide user_id, family_id or business_id")
    return redemption_service.list_redemptions(
        db,
        user_id=user_id,
        family_id=family_id,
        business_id=business_id,
        status=status,
        limit=limit,
    )


@router.get("/{redemption_id}", response_model=RedemptionOut)
def get_redemption(redemption_id: UUID, db: Session = Depends(get_db)):
    redemption = redemption_service.get_redemption(db, redemption_id)
    if not redemption:
        raise HTTPException(status_code=404, detail="Redemption not found")
    return redemption


@router.post("/{redemption_id}/cancel", response_model=CancellationResult)
def cancel_redemption(
    redemption_id: UUID,
    payload: CancelRequest | None = None,
    operator: str | None = Depends(get_operator_identity),
    db: Session = Depends(get_db),
):
    payload = payload or CancelRequest()
    result = redemption_service.cancel_redemption(
        db,
        redemption_id,
        cancelled_by=payload.cancelled_by or operator,
        reason=payload.reason,
    )
    db.commit()
    if not result.success:
        raise http_error(result.error_code, result.error)
    return result
