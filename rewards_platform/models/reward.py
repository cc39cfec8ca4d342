import uuid
from sqlalchemy import Column, String, Integer, Boolean, Float, TIMESTAMP, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from rewards_platform.db import Base


class Reward(Base):
    __tablename__ = "rewards"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # NULL for affiliate / platform rewards
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id"), nullable=True)

    # LOCAL_BUSINESS | AFFILIATE_LINK | PLATFORM_REWARD
    reward_source = Column(String(30), nullable=False, default="LOCAL_BUSINESS")

    title = Column(String(150), nullable=False)
    description = Column(String(1000))
    redemption_instructions = Column(String(1000))

    point_cost = Column(Integer, nullable=False)
    retail_value = Column(Float, nullable=True)

    # DRAFT | PENDING_APPROVAL | APPROVED | ACTIVE | PAUSED | COMPLETED
    status = Column(String(30), nullable=False, default="DRAFT")
    is_active = Column(Boolean, nullable=False, default=True)

    # NULL = unlimited inventory
    total_available = Column(Integer, nullable=True)
    current_redemptions = Column(Integer, nullable=False, default=0)
    redemptions = Column(Integer, nullable=False, default=0)

    created_at = Column(TIMESTAMP, server_default=func.now())
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
