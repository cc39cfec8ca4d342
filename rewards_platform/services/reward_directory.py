from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rewards_platform.models.business import Business
from rewards_platform.models.reward import Reward


logger = logging.getLogger(__name__)

LOCAL_BUSINESS = "LOCAL_BUSINESS"
AFFILIATE_LINK = "AFFILIATE_LINK"
PLATFORM_REWARD = "PLATFORM_REWARD"

ACTIVE = "ACTIVE"


def get_reward(db: Session, reward_id) -> Reward | None:
    return db.query(Reward).filter(Reward.id == reward_id).first()


def get_business_name(db: Session, business_id, default: str) -> str:
    """Best-effort display name; any lookup failure falls back to ``default``."""
    if not business_id:
        return default
    try:
        # savepoint: a failed statement must not abort the request transaction
        with db.begin_nested():
            name = db.query(Business.name).filter(Business.id == business_id).scalar()
    except SQLAlchemyError:
        logger.warning(
            "could not fetch business name, using default",
            extra={"business_id": str(business_id)},
            exc_info=True,
        )
        return default
    return name or default


def is_redeemable(reward: Reward) -> bool:
    return reward.status == ACTIVE and bool(reward.is_active)


def is_sold_out(reward: Reward) -> bool:
    if reward.total_available is None:
        return False
    return (reward.current_redemptions or 0) >= reward.total_available


def increment_redemption_counters(db: Session, reward_id) -> bool:
    # atomic in-database increment
    try:
        with db.begin_nested():
            updated = (
                db.query(Reward)
                .filter(Reward.id == reward_id)
                .update(
                    {
                        Reward.redemptions: Reward.redemptions + 1,
                        Reward.current_redemptions: Reward.current_redemptions + 1,
                    },
                    synchronize_session="fetch",
                )
            )
    except SQLAlchemyError:
        logger.warning(
            "reward counter increment failed",
            extra={"reward_id": str(reward_id)},
            exc_info=True,
        )
        return False
    return bool(updated)


def release_inventory(db: Session, reward_id) -> bool:
    try:
        with db.begin_nested():
            updated = (
                db.query(Reward)
                .filter(Reward.id == reward_id, Reward.current_redemptions > 0)
                .update(
                    {Reward.current_redemptions: Reward.current_redemptions - 1},
                    synchronize_session="fetch",
                )
            )
    except SQLAlchemyError:
        logger.warning(
            "reward inventory release failed",
            extra={"reward_id": str(reward_id)},
            exc_info=True,
        )
        return False
    return bool(updated)
