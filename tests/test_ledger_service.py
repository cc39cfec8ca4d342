from datetime import timedelta

import pytest

from rewards_platform.models.points_ledger_entry import PointsLedgerEntry
from rewards_platform.services import ledger_service
from rewards_platform.services.errors import ErrorCode, InvalidAmount

from conftest import T0


def test_balance_is_zero_without_entries(db):
    assert ledger_service.get_balance(db, "nobody") == 0


def test_earn_and_spend_sum_into_balance(db):
    earned = ledger_service.record_earn(db, "kid-1", "family-1", 150, source_id="job-7", now=T0)
    spent = ledger_service.record_spend(db, "kid-1", "family-1", 40, source_id="redemption-1", now=T0)
    db.commit()

    assert earned.amount == 150
    assert earned.entry_type == "EARNED"
    assert earned.source_type == "JOB"
    assert spent.amount == -40
    assert spent.entry_type == "SPENT"
    assert spent.source_type == "REWARD_REDEMPTION"
    assert ledger_service.get_balance(db, "kid-1") == 110


@pytest.mark.parametrize("amount", [0, -5])
def test_earn_rejects_non_positive_amount(db, amount):
    with pytest.raises(InvalidAmount) as exc:
        ledger_service.record_earn(db, "kid-1", "family-1", amount)

    assert exc.value.code == ErrorCode.INVALID_AMOUNT
    assert db.query(PointsLedgerEntry).count() == 0


@pytest.mark.parametrize("amount", [0, -5])
def test_spend_rejects_non_positive_amount(db, amount):
    with pytest.raises(InvalidAmount):
        ledger_service.record_spend(db, "kid-1", "family-1", amount)

    assert db.query(PointsLedgerEntry).count() == 0


def test_spend_does_not_check_balance(db):
    ledger_service.record_spend(db, "kid-1", "family-1", 30)
    db.commit()

    assert ledger_service.get_balance(db, "kid-1") == -30


def test_adjustments_are_signed_and_reject_zero(db):
    ledger_service.record_earn(db, "kid-1", "family-1", 20)
    entry = ledger_service.record_adjustment(db, "kid-1", "family-1", -5, description="typo fix")
    db.commit()

    assert entry.entry_type == "ADJUSTED"
    assert entry.source_type == "ADMIN_ADJUSTMENT"
    assert ledger_service.get_balance(db, "kid-1") == 15

    with pytest.raises(InvalidAmount):
        ledger_service.record_adjustment(db, "kid-1", "family-1", 0)


def test_family_balance_spans_members(db):
    ledger_service.record_earn(db, "kid-1", "family-1", 10)
    ledger_service.record_earn(db, "kid-2", "family-1", 25, source_type="SCHOOL")
    ledger_service.record_earn(db, "kid-3", "family-2", 99)
    db.commit()

    assert ledger_service.get_family_balance(db, "family-1") == 35
    assert ledger_service.get_balance(db, "kid-2") == 25


def test_list_entries_newest_first(db):
    ledger_service.record_earn(db, "kid-1", "family-1", 10, now=T0)
    ledger_service.record_earn(db, "kid-1", "family-1", 20, now=T0 + timedelta(hours=1))
    db.commit()

    entries = ledger_service.list_entries(db, user_id="kid-1")
    assert [e.amount for e in entries] == [20, 10]


def test_unknown_source_type_is_rejected(db):
    with pytest.raises(ValueError):
        ledger_service.record_earn(db, "kid-1", "family-1", 10, source_type="LOTTERY")
