from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from rewards_platform.db import get_db
from rewards_platform.services.redemption_service import expire_redemptions


router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/redemptions/expire")
def admin_expire_redemptions(db: Session = Depends(get_db)):
    expired_count = expire_redemptions(db)
    db.commit()
    return {"expired": expired_count}
