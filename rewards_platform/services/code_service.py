import base64
import json
import secrets
import string
from datetime import datetime

# A-Z and 2-9 without the look-alikes I, L, O (and 0, 1)
CODE_ALPHABET = "".join(c for c in string.ascii_uppercase + "23456789" if c not in "ILO")
CODE_LENGTH = 12
CODE_GROUP_SIZE = 4
CODE_SEPARATOR = "-"


def generate_code() -> str:
    """Return a code like ``ABCD-EFGH-JKMN`` drawn from the OS CSPRNG."""
    raw = "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))
    return CODE_SEPARATOR.join(raw[i:i + CODE_GROUP_SIZE] for i in range(0, CODE_LENGTH, CODE_GROUP_SIZE))


def normalize_code(raw: str) -> str:
    """Canonicalize operator input: trim, uppercase, regroup bare 12-char codes."""
    code = (raw or "").strip().upper().replace(" ", "")
    bare = code.replace(CODE_SEPARATOR, "")
    if len(bare) == CODE_LENGTH:
        return CODE_SEPARATOR.join(bare[i:i + CODE_GROUP_SIZE] for i in range(0, CODE_LENGTH, CODE_GROUP_SIZE))
    return code


def generate_payload(
    redemption_id,
    code: str,
    reward_id,
    business_id,
    user_id: str,
    points_spent: int,
    timestamp: datetime,
) -> str:
    # Display-only blob for the QR code; never trusted by verification.
    payload = {
        "redemptionId": str(redemption_id),
        "redemptionCode": code,
        "rewardId": str(reward_id),
        "businessId": str(business_id) if business_id else None,
        "userId": user_id,
        "pointsSpent": points_spent,
        "timestamp": timestamp.isoformat(),
    }
    encoded = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.b64encode(encoded).decode("ascii")


def decode_payload(blob: str) -> dict:
    return json.loads(base64.b64decode(blob.encode("ascii")).decode("utf-8"))
