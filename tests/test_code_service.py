import re
from datetime import datetime
from uuid import uuid4

from rewards_platform.services.code_service import (
    CODE_ALPHABET,
    decode_payload,
    generate_code,
    generate_payload,
    normalize_code,
)


CODE_PATTERN = re.compile(r"^[A-Z2-9]{4}-[A-Z2-9]{4}-[A-Z2-9]{4}$")


def test_alphabet_excludes_ambiguous_characters():
    for ch in "IO01L":
        assert ch not in CODE_ALPHABET
    assert len(set(CODE_ALPHABET)) == len(CODE_ALPHABET) == 31


def test_generate_code_format():
    code = generate_code()
    assert len(code) == 14
    assert CODE_PATTERN.match(code)


def test_generate_code_10k_unique_and_unambiguous():
    codes = [generate_code() for _ in range(10_000)]
    assert len(set(codes)) == len(codes)
    forbidden = set("IO01L")
    for code in codes:
        assert not forbidden & set(code)


def test_normalize_code_regroups_typed_input():
    assert normalize_code(" abcd efgh jkmn ") == "ABCD-EFGH-JKMN"
    assert normalize_code("abcdefghjkmn") == "ABCD-EFGH-JKMN"
    assert normalize_code("ABCD-EFGH-JKMN") == "ABCD-EFGH-JKMN"
    # unknown shapes are passed through for an exact-match miss
    assert normalize_code("abc") == "ABC"


def test_payload_carries_redemption_fields():
    redemption_id = uuid4()
    reward_id = uuid4()
    business_id = uuid4()
    ts = datetime(2026, 3, 1, 12, 0, 0)

    blob = generate_payload(redemption_id, "ABCD-EFGH-JKMN", reward_id, business_id, "kid-1", 100, ts)

    assert isinstance(blob, str)
    assert decode_payload(blob) == {
        "redemptionId": str(redemption_id),
        "redemptionCode": "ABCD-EFGH-JKMN",
        "rewardId": str(reward_id),
        "businessId": str(business_id),
        "userId": "kid-1",
        "pointsSpent": 100,
        "timestamp": "2026-03-01T12:00:00",
    }


def test_payload_without_business():
    blob = generate_payload(uuid4(), "ABCD-EFGH-JKMN", uuid4(), None, "kid-1", 50, datetime(2026, 1, 1))
    assert decode_payload(blob)["businessId"] is None
