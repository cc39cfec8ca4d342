from __future__ import annotations

import logging

from rewards_platform.db import SessionLocal
from rewards_platform.services.clock import utcnow
from rewards_platform.services.redemption_service import expire_redemptions


logger = logging.getLogger(__name__)


def run_expiry_sweep_once(session_factory=SessionLocal) -> int:
    now = utcnow()
    db = session_factory()
    try:
        expired = expire_redemptions(db, now=now)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("redemption expiry sweep failed", extra={"now": now.isoformat()})
        raise
    finally:
        db.close()

    logger.info("redemption expiry sweep finished", extra={"expired": expired, "now": now.isoformat()})
    return expired


def main():
    logging.basicConfig(level=logging.INFO)
    run_expiry_sweep_once()


if __name__ == "__main__":
    main()
