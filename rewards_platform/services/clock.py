from datetime import datetime, timezone


def utcnow() -> datetime:
    # Keep naive UTC timestamps to match the TIMESTAMP column semantics.
    return datetime.now(timezone.utc).replace(tzinfo=None)
