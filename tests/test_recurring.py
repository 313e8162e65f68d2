"""Tests for recurring bills."""

from datetime import date
from decimal import Decimal

import pytest

from famfin.domain.entities import BillStatus, Category, RecurringBill, TransactionType
from famfin.domain.recurring import bill_matches_category


@pytest.fixture
def rent(ledger, bill_service):
    return bill_service.save_bill(
        RecurringBill(id="", name="Rent", due_day=10, value=Decimal("1200"), category_id="housing")
    )


def test_save_bill_assigns_id(rent, bill_service):
    assert rent.id
    assert bill_service.get_bill(rent.id) == rent


def test_list_bills_sorted_by_due_day_then_name(ledger, bill_service):
    for name, day in [("Water", 20), ("internet", 5), ("Gym", 5)]:
        bill_service.save_bill(RecurringBill(id="", name=name, due_day=day))

    assert [b.name for b in bill_service.list_bills()] == ["Gym", "internet", "Water"]


def test_delete_bill(rent, bill_service):
    assert bill_service.delete_bill(rent.id)
    assert bill_service.get_bill(rent.id) is None
    assert bill_service.delete_bill(rent.id) is False


def test_toggle_payment_uses_zero_based_key(rent, bill_service):
    assert bill_service.toggle_payment(rent.id, 2025, 1) is True
    assert bill_service.get_bill(rent.id).payments == {"2025-0": True}

    assert bill_service.toggle_payment(rent.id, 2025, 1) is False
    assert bill_service.toggle_payment("missing", 2025, 1) is None


def test_set_payment_unknown_bill(ledger, bill_service):
    assert bill_service.set_payment("missing", 2025, 1, True) is False


def test_category_link_takes_precedence_over_name():
    housing = Category(id="housing", name="Housing", type=TransactionType.EXPENSE)
    linked = RecurringBill(id="b1", name="Something else", due_day=1, category_id="housing")
    named = RecurringBill(id="b2", name="  HOUSING ", due_day=1)
    mislinked = RecurringBill(id="b3", name="Housing", due_day=1, category_id="food")

    assert bill_matches_category(linked, housing)
    assert bill_matches_category(named, housing)
    assert not bill_matches_category(mislinked, housing)


def test_mark_paid_flags_every_matching_bill(ledger, bill_service):
    first = bill_service.save_bill(RecurringBill(id="", name="Housing", due_day=1))
    second = bill_service.save_bill(RecurringBill(id="", name="Condo", due_day=2, category_id="housing"))
    other = bill_service.save_bill(RecurringBill(id="", name="Gym", due_day=3))

    assert bill_service.mark_paid_for_category("housing", 2025, 5) == 2

    assert bill_service.is_paid(bill_service.get_bill(first.id), 2025, 5)
    assert bill_service.is_paid(bill_service.get_bill(second.id), 2025, 5)
    assert bill_service.get_bill(other.id).payments == {}


def test_clear_paid_only_touches_first_match(ledger, bill_service):
    first = bill_service.save_bill(RecurringBill(id="", name="Housing", due_day=1))
    second = bill_service.save_bill(RecurringBill(id="", name="Condo", due_day=2, category_id="housing"))
    bill_service.mark_paid_for_category("housing", 2025, 5)

    assert bill_service.clear_paid_for_category("housing", 2025, 5) == 1

    assert not bill_service.is_paid(bill_service.get_bill(first.id), 2025, 5)
    assert bill_service.is_paid(bill_service.get_bill(second.id), 2025, 5)


def test_flags_for_unknown_category_are_ignored(ledger, bill_service, rent):
    assert bill_service.mark_paid_for_category("missing", 2025, 5) == 0
    assert bill_service.get_bill(rent.id).payments == {}


@pytest.mark.parametrize(
    "year,today,expected",
    [
        (2025, date(2025, 6, 5), BillStatus.UPCOMING),
        (2025, date(2025, 6, 10), BillStatus.DUE_TODAY),
        (2025, date(2025, 6, 15), BillStatus.OVERDUE),
        (2024, date(2025, 6, 5), BillStatus.OVERDUE),
        (2026, date(2025, 6, 15), BillStatus.UPCOMING),
    ],
)
def test_bill_status(rent, bill_service, year, today, expected):
    assert bill_service.bill_status(rent, year, today=today) == expected


def test_paid_bill_status(rent, bill_service):
    bill_service.set_payment(rent.id, 2025, 6, True)
    bill = bill_service.get_bill(rent.id)
    assert bill_service.bill_status(bill, 2025, today=date(2025, 6, 15)) == BillStatus.PAID


def test_due_today_skips_paid_bills(rent, bill_service):
    today = date(2025, 6, 10)
    assert [b.id for b in bill_service.due_today(today)] == [rent.id]

    bill_service.set_payment(rent.id, 2025, 6, True)
    assert bill_service.due_today(today) == []
    assert bill_service.due_today(date(2025, 6, 11)) == []


def test_assign_categories_by_name(ledger, bill_service, rent):
    named = bill_service.save_bill(RecurringBill(id="", name="food", due_day=3))
    orphan = bill_service.save_bill(RecurringBill(id="", name="Gym", due_day=4))

    assert bill_service.assign_categories_by_name() == 1

    assert bill_service.get_bill(named.id).category_id == "food"
    assert bill_service.get_bill(orphan.id).category_id is None
    assert bill_service.get_bill(rent.id).category_id == "housing"
    assert bill_service.assign_categories_by_name() == 0
