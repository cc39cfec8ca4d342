import uuid
from sqlalchemy import Column, Integer, String, TIMESTAMP, Index
from sqlalchemy.dialects.postgresql import UUID
from rewards_platform.db import Base


class PointsLedgerEntry(Base):
    """Append-only: rows are inserted by the ledger service and never updated or deleted."""

    __tablename__ = "points_ledger_entries"

    __table_args__ = (
        Index("ix_points_ledger_entries_user_id_created_at", "user_id", "created_at"),
        Index("ix_points_ledger_entries_family_id_created_at", "family_id", "created_at"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id = Column(String(100), nullable=False)
    family_id = Column(String(100), nullable=False)
    user_name = Column(String(150))

    # positive = earned, negative = spent
    amount = Column(Integer, nullable=False)
    entry_type = Column(String(20), nullable=False)  # EARNED / SPENT / ADJUSTED

    source_type = Column(String(30), nullable=False)  # JOB / REWARD_REDEMPTION / SCHOOL / ADMIN_ADJUSTMENT
    source_id = Column(String(100))

    redemption_id = Column(UUID(as_uuid=True), nullable=True)

    description = Column(String(500))

    created_at = Column(TIMESTAMP, nullable=False)
