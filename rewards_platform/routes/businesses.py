from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from rewards_platform.db import get_db
from rewards_platform.models.business import Business
from rewards_platform.schemas.business import BusinessCreate, BusinessOut


router = APIRouter(prefix="/businesses", tags=["businesses"])


@router.get("", response_model=list[BusinessOut])
def list_businesses(
    active: bool | None = None,
    db: Session = Depends(get_db),
):
    q = db.query(Business)
    if active is not None:
        q = q.filter(Business.is_active.is_(active))
    return q.order_by(Business.name.asc()).all()


@router.post("", response_model=BusinessOut)
def create_business(payload: BusinessCreate, db: Session = Depends(get_db)):
    business = Business(**payload.model_dump())
    db.add(business)
    db.commit()
    db.refresh(business)
    return business


@router.get("/{business_id}", response_model=BusinessOut)
def get_business(business_id: UUID, db: Session = Depends(get_db)):
    business = db.query(Business).filter(Business.id == business_id).first()
    if not business:
        raise HTTPException(status_code=404, detail="Business not found")
    return business
