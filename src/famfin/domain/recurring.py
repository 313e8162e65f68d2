"""Recurring bill domain service."""

import logging
from dataclasses import replace
from datetime import date
from typing import Optional
from uuid import uuid4

from famfin.database.repository import LedgerRepository
from famfin.domain.entities import BillStatus, Category, RecurringBill
from famfin.utils.date_parser import month_key

logger = logging.getLogger(__name__)


def bill_matches_category(bill: RecurringBill, category: Category) -> bool:
    """True if a bill tracks a category.

    Bills with an explicit category link match by ID. Bills without one fall
    back to a case-insensitive comparison of the bill and category names.
    """
    if bill.category_id is not None:
        return bill.category_id == category.id
    return bill.name.strip().lower() == category.name.strip().lower()


class RecurringBillService:
    """Service for recurring bills and their monthly paid flags."""

    def __init__(self, repo: LedgerRepository):
        """Initialize recurring bill service.

        Args:
            repo: Ledger repository
        """
        self.repo = repo

    def list_bills(self) -> list[RecurringBill]:
        """List bills ordered by due day, then name."""
        return sorted(self.repo.get_recurring_bills(), key=lambda b: (b.due_day, b.name.lower()))

    def get_bill(self, bill_id: str) -> Optional[RecurringBill]:
        for bill in self.repo.get_recurring_bills():
            if bill.id == bill_id:
                return bill
        return None

    def save_bill(self, bill: RecurringBill) -> RecurringBill:
        """Create or update a bill; an empty ID creates a new one."""
        if not bill.id:
            bill = replace(bill, id=uuid4().hex)
        bills = self.repo.get_recurring_bills()
        for i, existing in enumerate(bills):
            if existing.id == bill.id:
                bills[i] = bill
                break
        else:
            bills.append(bill)
        self.repo.save_recurring_bills(bills)
        return bill

    def delete_bill(self, bill_id: str) -> bool:
        bills = self.repo.get_recurring_bills()
        remaining = [b for b in bills if b.id != bill_id]
        if len(remaining) == len(bills):
            return False
        self.repo.save_recurring_bills(remaining)
        return True

    def is_paid(self, bill: RecurringBill, year: int, month: int) -> bool:
        return bool(bill.payments.get(month_key(year, month)))

    def set_payment(self, bill_id: str, year: int, month: int, paid: bool) -> bool:
        """Set the paid flag of a bill for a month. Returns False for an unknown bill."""
        bills = self.repo.get_recurring_bills()
        for i, bill in enumerate(bills):
            if bill.id == bill_id:
                payments = dict(bill.payments)
                payments[month_key(year, month)] = paid
                bills[i] = replace(bill, payments=payments)
                self.repo.save_recurring_bills(bills)
                return True
        return False

    def toggle_payment(self, bill_id: str, year: int, month: int) -> Optional[bool]:
        """Flip the paid flag of a bill for a month.

        Returns:
            The new flag, or None for an unknown bill
        """
        bill = self.get_bill(bill_id)
        if bill is None:
            return None
        paid = not self.is_paid(bill, year, month)
        self.set_payment(bill_id, year, month, paid)
        return paid

    def mark_paid_for_category(self, category_id: str, year: int, month: int) -> int:
        """Flag every bill tracking a category as paid for a month."""
        return self._flag_for_category(category_id, year, month, True, first_only=False)

    def clear_paid_for_category(self, category_id: str, year: int, month: int) -> int:
        """Clear the paid flag of the first bill tracking a category for a month."""
        return self._flag_for_category(category_id, year, month, False, first_only=True)

    def assign_categories_by_name(self) -> int:
        """Store the category link of every bill still matched by name.

        Bills whose name matches no category are left unlinked.

        Returns:
            Number of bills linked
        """
        categories = self.repo.get_categories()
        bills = self.repo.get_recurring_bills()
        linked = 0
        for i, bill in enumerate(bills):
            if bill.category_id is not None:
                continue
            match = next((c for c in categories if bill_matches_category(bill, c)), None)
            if match is not None:
                bills[i] = replace(bill, category_id=match.id)
                linked += 1
        if linked:
            self.repo.save_recurring_bills(bills)
            logger.info("Linked %d recurring bill(s) to their categories", linked)
        return linked

    def bill_status(self, bill: RecurringBill, year: int, today: Optional[date] = None) -> BillStatus:
        """Status of a bill for the current month of a given year.

        Unpaid bills of past years are overdue and those of future years are
        upcoming; in the current year the due day is compared with today.
        """
        today = today or date.today()
        if self.is_paid(bill, year, today.month):
            return BillStatus.PAID
        if year < today.year:
            return BillStatus.OVERDUE
        if year > today.year:
            return BillStatus.UPCOMING
        if bill.due_day < today.day:
            return BillStatus.OVERDUE
        if bill.due_day == today.day:
            return BillStatus.DUE_TODAY
        return BillStatus.UPCOMING

    def due_today(self, today: Optional[date] = None) -> list[RecurringBill]:
        """Unpaid bills whose due day is today."""
        today = today or date.today()
        return [
            bill
            for bill in self.list_bills()
            if bill.due_day == today.day and not self.is_paid(bill, today.year, today.month)
        ]

    def _flag_for_category(
        self, category_id: str, year: int, month: int, paid: bool, first_only: bool
    ) -> int:
        category = next((c for c in self.repo.get_categories() if c.id == category_id), None)
        if category is None:
            return 0

        bills = self.repo.get_recurring_bills()
        key = month_key(year, month)
        changed = 0
        for i, bill in enumerate(bills):
            if not bill_matches_category(bill, category):
                continue
            payments = dict(bill.payments)
            payments[key] = paid
            bills[i] = replace(bill, payments=payments)
            changed += 1
            if first_only:
                break

        if changed:
            self.repo.save_recurring_bills(bills)
            logger.debug("Set %d bill flag(s) for %s in %s to %s", changed, category.name, key, paid)
        return changed
