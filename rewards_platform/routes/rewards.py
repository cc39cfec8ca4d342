from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from rewards_platform.db import get_db
from rewards_platform.models.business import Business
from rewards_platform.models.reward import Reward
from rewards_platform.schemas.reward import RewardCreate, RewardUpdate, RewardOut
from rewards_platform.services.reward_directory import LOCAL_BUSINESS


router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.get("", response_model=list[RewardOut])
def list_rewards(
    business_id: UUID | None = None,
    status: str | None = None,
    active: bool | None = None,
    db: Session = Depends(get_db),
):
    q = db.query(Reward)
    if business_id is not None:
        q = q.filter(Reward.business_id == business_id)
    if status:
        q = q.filter(Reward.status == status)
    if active is not None:
        q = q.filter(Reward.is_active.is_(active))
    return q.order_by(Reward.created_at.desc()).all()


@router.post("", response_model=RewardOut)
def create_reward(payload: RewardCreate, db: Session = Depends(get_db)):
    if payload.reward_source == LOCAL_BUSINESS:
        if payload.business_id is None:
            raise HTTPException(status_code=400, detail="business_id is required for local business rewards")
        exists = db.query(Business.id).filter(Business.id == payload.business_id).first()
        if not exists:
            raise HTTPException(status_code=404, detail="Business not found")

    reward = Reward(**payload.model_dump(), current_redemptions=0, redemptions=0)
    db.add(reward)
    db.commit()
    db.refresh(reward)
    return reward


@router.get("/{reward_id}", response_model=RewardOut)
def get_reward(reward_id: UUID, db: Session = Depends(get_db)):
    reward = db.query(Reward).filter(Reward.id == reward_id).first()
    if not reward:
        raise HTTPException(status_code=404, detail="Reward not found")
    return reward


@router.patch("/{reward_id}", response_model=RewardOut)
def update_reward(
    reward_id: UUID,
    payload: RewardUpdate,
    db: Session = Depends(get_db),
):
    reward = db.query(Reward).filter(Reward.id == reward_id).first()
    if not reward:
        raise HTTPException(status_code=404, detail="Reward not found")

    data = payload.model_dump(exclude_unset=True)
    for k, v in data.items():
        setattr(reward, k, v)

    db.commit()
    db.refresh(reward)
    return reward
