"""Credit-card billing cycle resolution.

A purchase on a credit card counts toward a later billing month than the one
it was made in. The closing day configured for the purchase month decides
which one: purchases up to and including the closing day land in the next
month's invoice, later purchases in the one after.

The closing-day map is keyed by purchase month, so editing it re-dates
purchases that were already made. Views computed before and after such an
edit can disagree; the invoices are re-synchronized whenever it changes.
"""

import logging
from datetime import date
from typing import Mapping, Optional, TYPE_CHECKING

from famfin.database.repository import LedgerRepository
from famfin.domain.entities import PaymentMethod, Transaction
from famfin.domain.errors import ValidationError
from famfin.utils.date_parser import add_months, month_key

if TYPE_CHECKING:
    from famfin.domain.invoice import InvoiceService

logger = logging.getLogger(__name__)

DEFAULT_CLOSING_DAY = 25


def closing_day_for(closing_days: Mapping[str, int], year: int, month: int) -> int:
    """Closing day configured for a purchase month, falling back to the default."""
    return closing_days.get(month_key(year, month)) or DEFAULT_CLOSING_DAY


def is_credit_card_method(
    payment_method_id: str, methods_by_id: Mapping[str, PaymentMethod]
) -> bool:
    method = methods_by_id.get(payment_method_id)
    return method is not None and method.is_credit_card


def effective_date(
    txn: Transaction,
    methods_by_id: Mapping[str, PaymentMethod],
    closing_days: Mapping[str, int],
) -> date:
    """Date of the billing period a transaction counts toward.

    Args:
        txn: Transaction to resolve
        methods_by_id: Payment methods indexed by id
        closing_days: Closing-day map keyed by "<year>-<month index>"

    Returns:
        The purchase date for anything not paid by credit card, otherwise
        the purchase date moved one or two months ahead.
    """
    if not is_credit_card_method(txn.payment_method_id, methods_by_id):
        return txn.date

    closing_day = closing_day_for(closing_days, txn.date.year, txn.date.month)
    if txn.date.day <= closing_day:
        return add_months(txn.date, 1)
    return add_months(txn.date, 2)


def in_month(value: date, month: int, year: int) -> bool:
    return value.month == month and value.year == year


class EffectiveDateResolver:
    """Effective-date resolution bound to a snapshot of methods and closing days."""

    def __init__(self, methods: list[PaymentMethod], closing_days: Mapping[str, int]):
        self.methods_by_id = {method.id: method for method in methods}
        self.closing_days = dict(closing_days)

    @classmethod
    def from_repository(cls, repo: LedgerRepository) -> "EffectiveDateResolver":
        return cls(repo.get_payment_methods(), repo.get_closing_days())

    def is_credit_card(self, payment_method_id: str) -> bool:
        return is_credit_card_method(payment_method_id, self.methods_by_id)

    def resolve(self, txn: Transaction) -> date:
        return effective_date(txn, self.methods_by_id, self.closing_days)

    def falls_in(self, txn: Transaction, month: int, year: int) -> bool:
        return in_month(self.resolve(txn), month, year)


class BillingService:
    """Service for the credit-card closing-day configuration."""

    def __init__(self, repo: LedgerRepository, invoices: Optional["InvoiceService"] = None):
        """Initialize billing service.

        Args:
            repo: Ledger repository
            invoices: Invoice service to resynchronize after edits
        """
        self.repo = repo
        if invoices is None:
            from famfin.domain.invoice import InvoiceService

            invoices = InvoiceService(repo)
        self.invoices = invoices

    def get_closing_days(self) -> dict[str, int]:
        return self.repo.get_closing_days()

    def get_closing_day(self, year: int, month: int) -> int:
        """Get the closing day for a purchase month (1-based month)."""
        return closing_day_for(self.repo.get_closing_days(), year, month)

    def set_closing_day(self, year: int, month: int, day: int) -> None:
        """Set the closing day for a purchase month and resync invoices.

        Raises:
            ValidationError: If month or day is out of range
        """
        if not 1 <= month <= 12:
            raise ValidationError(f"Invalid month {month}")
        if not 1 <= day <= 31:
            raise ValidationError(f"Invalid closing day {day}")

        closing_days = self.repo.get_closing_days()
        closing_days[month_key(year, month)] = day
        self.repo.save_closing_days(closing_days)
        logger.debug("Closing day for %d-%02d set to %d", year, month, day)
        self.invoices.sync_all_linked_invoices()

    def effective_date(self, txn: Transaction) -> date:
        """Resolve a transaction against the stored configuration."""
        return EffectiveDateResolver.from_repository(self.repo).resolve(txn)
