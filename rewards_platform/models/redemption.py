import uuid
from sqlalchemy import Column, String, Integer, JSON, Text, TIMESTAMP, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from rewards_platform.db import Base


class Redemption(Base):
    __tablename__ = "redemptions"

    __table_args__ = (
        UniqueConstraint("user_id", "idempotency_key", name="uq_redemptions_user_id_idempotency_key"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    reward_id = Column(UUID(as_uuid=True), ForeignKey("rewards.id"), nullable=False)
    business_id = Column(UUID(as_uuid=True), ForeignKey("businesses.id"), nullable=True)

    user_id = Column(String(100), nullable=False, index=True)
    user_name = Column(String(150))
    family_id = Column(String(100), nullable=False, index=True)
    child_age = Column(Integer)

    points_spent = Column(Integer, nullable=False)
    jobs_used = Column(JSON, nullable=False, default=list)
    ledger_entry_ids = Column(JSON, nullable=False, default=list)

    # exact-match lookup key for verification
    redemption_code = Column(String(14), nullable=False, unique=True, index=True)
    qr_code_data = Column(Text)

    status = Column(String(20), nullable=False, default="PENDING")
    # PENDING | REDEEMED | EXPIRED | CANCELLED

    idempotency_key = Column(String(150), nullable=True)

    created_at = Column(TIMESTAMP, nullable=False)
    expires_at = Column(TIMESTAMP, nullable=False)
    fulfilled_at = Column(TIMESTAMP)
    cancelled_at = Column(TIMESTAMP)
    cancellation_reason = Column(String(500))
    cancelled_by = Column(String(150))

    business_verified_at = Column(TIMESTAMP)
    business_verified_by = Column(String(150))

    # privacy-safe location hints only
    redemption_city = Column(String(100))
    redemption_zip = Column(String(20))

    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
