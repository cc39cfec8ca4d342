from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from rewards_platform.db import get_db
from rewards_platform.deps.errors import http_error
from rewards_platform.deps.operator import get_operator_identity
from rewards_platform.schemas.ledger import AdjustmentRequest, BalanceOut, EarnRequest, LedgerEntryOut
from rewards_platform.services import ledger_service
from rewards_platform.services.errors import InvalidAmount


router = APIRouter(prefix="/ledger", tags=["ledger"])


@router.get("/users/{user_id}/balance", response_model=BalanceOut)
def read_user_balance(user_id: str, db: Session = Depends(get_db)):
    return BalanceOut(user_id=user_id, points_balance=ledger_service.get_balance(db, user_id))


@router.get("/families/{family_id}/balance", response_model=BalanceOut)
def read_family_balance(family_id: str, db: Session = Depends(get_db)):
    return BalanceOut(family_id=family_id, points_balance=ledger_service.get_family_balance(db, family_id))


@router.get("/users/{user_id}/entries", response_model=list[LedgerEntryOut])
def list_user_entries(
    user_id: str,
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return ledger_service.list_entries(db, user_id=user_id, limit=limit)


@router.post("/earn", response_model=LedgerEntryOut)
def earn_points(payload: EarnRequest, db: Session = Depends(get_db)):
    try:
        entry = ledger_service.record_earn(
            db,
            payload.user_id,
            payload.family_id,
            payload.amount,
            source_type=payload.source_type,
            source_id=payload.source_id,
            description=payload.description,
            user_name=payload.user_name,
        )
    except InvalidAmount as e:
        db.rollback()
        raise http_error(e.code, e.message)

    db.commit()
    db.refresh(entry)
    return entry


@router.post("/adjust", response_model=LedgerEntryOut)
def adjust_points(
    payload: AdjustmentRequest,
    operator: str | None = Depends(get_operator_identity),
    db: Session = Depends(get_db),
):
    adjusted_by = payload.adjusted_by or operator
    try:
        entry = ledger_service.record_adjustment(
            db,
            payload.user_id,
            payload.family_id,
            payload.amount,
            source_id=adjusted_by,
            description=payload.description,
        )
    except InvalidAmount as e:
        db.rollback()
        raise http_error(e.code, e.message)

    db.commit()
    db.refresh(entry)
    return entry
