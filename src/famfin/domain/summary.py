"""Summary and balance domain service."""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from famfin.config import get_settings
from famfin.database.repository import LedgerRepository
from famfin.domain.billing import EffectiveDateResolver
from famfin.domain.invoice import issues_invoices
from famfin.domain.entities import (
    BankAccountSummary,
    CardInvoiceProjection,
    CategorySummary,
    MonthlySummary,
    Transaction,
    TransactionStatus,
    TransactionType,
    YearlyHistoryPoint,
)
from famfin.utils.date_parser import month_abbreviation

ZERO = Decimal("0")
UNKNOWN_CATEGORY_NAME = "Others"


def _total(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.value for t in transactions), ZERO)


class SummaryService:
    """Read-side projections over the transaction collection.

    Monthly and category views place each transaction in the month of its
    effective date and leave synthetic invoices out, since the purchases they
    aggregate are already counted. Bank balances work on booking data and
    include the invoices instead of the card purchases behind them.
    """

    def __init__(self, repo: LedgerRepository):
        """Initialize summary service.

        Args:
            repo: Ledger repository
        """
        self.repo = repo

    def get_month_transactions(self, month: int, year: int) -> list[Transaction]:
        """User transactions whose effective date falls in a month."""
        resolver = EffectiveDateResolver.from_repository(self.repo)
        return self._month_transactions(self.repo.get_transactions(), resolver, month, year)

    def monthly_summary(self, month: int, year: int) -> MonthlySummary:
        """Income and expense totals for a month.

        Args:
            month: Month (1-12)
            year: Year

        Returns:
            MonthlySummary with confirmed (Paid) and total figures
        """
        return self.build_monthly_summary(self.get_month_transactions(month, year), month, year)

    def build_monthly_summary(
        self, transactions: Sequence[Transaction], month: int, year: int
    ) -> MonthlySummary:
        income = [t for t in transactions if t.type == TransactionType.INCOME]
        expense = [t for t in transactions if t.type == TransactionType.EXPENSE]
        total_income = _total(income)
        confirmed_income = _total(t for t in income if t.status == TransactionStatus.PAID)
        total_expense = _total(expense)
        confirmed_expense = _total(t for t in expense if t.status == TransactionStatus.PAID)
        return MonthlySummary(
            month=month,
            year=year,
            total_income=total_income,
            confirmed_income=confirmed_income,
            total_expense=total_expense,
            confirmed_expense=confirmed_expense,
            balance=total_income - total_expense,
            confirmed_balance=confirmed_income - confirmed_expense,
        )

    def category_summary(self, month: int, year: int) -> list[CategorySummary]:
        """Expense totals per category for a month, largest first."""
        expenses = [
            t
            for t in self.get_month_transactions(month, year)
            if t.type == TransactionType.EXPENSE
        ]
        names = {c.id: c.name for c in self.repo.get_categories()}
        month_total = _total(expenses)

        totals: dict[str, dict[str, Decimal]] = defaultdict(
            lambda: {"total": ZERO, "confirmed": ZERO}
        )
        for txn in expenses:
            totals[txn.category_id]["total"] += txn.value
            if txn.status == TransactionStatus.PAID:
                totals[txn.category_id]["confirmed"] += txn.value

        results = [
            CategorySummary(
                category_id=category_id,
                category_name=names.get(category_id, UNKNOWN_CATEGORY_NAME),
                total=data["total"],
                confirmed_total=data["confirmed"],
                percentage=float(data["total"] / month_total * 100) if month_total > 0 else 0.0,
            )
            for category_id, data in totals.items()
        ]
        return sorted(results, key=lambda s: s.total, reverse=True)

    def bank_account_summaries(self) -> list[BankAccountSummary]:
        """Confirmed and current balance of every bank account.

        Purchases on a card linked to an account are paid through the card's
        invoice, so they are counted once, as part of the invoice, and not
        against the account they were booked to.
        """
        transactions = self.repo.get_transactions()
        methods = {m.id: m for m in self.repo.get_payment_methods()}

        def counts_toward_account(txn: Transaction) -> bool:
            if txn.is_auto_invoice:
                return True
            return not issues_invoices(methods.get(txn.payment_method_id))

        by_account: dict[str, list[Transaction]] = defaultdict(list)
        for txn in transactions:
            if counts_toward_account(txn):
                by_account[txn.bank_account_id].append(txn)

        summaries = []
        for account in self.repo.get_bank_accounts():
            booked = by_account.get(account.id, [])
            paid = [t for t in booked if t.status == TransactionStatus.PAID]
            summaries.append(
                BankAccountSummary(
                    account=account,
                    confirmed_balance=account.initial_balance + sum((t.signed_value for t in paid), ZERO),
                    current_balance=account.initial_balance + sum((t.signed_value for t in booked), ZERO),
                )
            )
        return summaries

    def yearly_history(self, year: int, locale: Optional[str] = None) -> list[YearlyHistoryPoint]:
        """Twelve monthly summaries of a year, labeled for charting."""
        locale = locale or get_settings().locale
        resolver = EffectiveDateResolver.from_repository(self.repo)
        transactions = self.repo.get_transactions()

        history = []
        for month in range(1, 13):
            summary = self.build_monthly_summary(
                self._month_transactions(transactions, resolver, month, year), month, year
            )
            history.append(
                YearlyHistoryPoint(
                    month=month,
                    label=month_abbreviation(month, locale),
                    income=summary.total_income,
                    expense=summary.total_expense,
                    confirmed_income=summary.confirmed_income,
                    confirmed_expense=summary.confirmed_expense,
                    balance=summary.balance,
                )
            )
        return history

    def card_invoice_projection(
        self,
        year: int,
        card_id: Optional[str] = None,
        bank_account_id: Optional[str] = None,
    ) -> list[CardInvoiceProjection]:
        """Credit-card purchases grouped by billing month for a year.

        Args:
            year: Billing year
            card_id: Optional card to restrict to
            bank_account_id: Optional bank account the purchases were booked to

        Returns:
            One projection per billing month that has purchases, in month order
        """
        resolver = EffectiveDateResolver.from_repository(self.repo)
        grouped: dict[int, list[Transaction]] = defaultdict(list)
        for txn in self.repo.get_transactions():
            if txn.is_auto_invoice or not resolver.is_credit_card(txn.payment_method_id):
                continue
            if card_id is not None and txn.payment_method_id != card_id:
                continue
            if bank_account_id is not None and txn.bank_account_id != bank_account_id:
                continue
            effective = resolver.resolve(txn)
            if effective.year == year:
                grouped[effective.month].append(txn)

        return [
            CardInvoiceProjection(
                month=month,
                year=year,
                total=_total(items),
                count=len(items),
                items=tuple(items),
            )
            for month, items in sorted(grouped.items())
        ]

    def _month_transactions(
        self,
        transactions: Iterable[Transaction],
        resolver: EffectiveDateResolver,
        month: int,
        year: int,
    ) -> list[Transaction]:
        return [
            t
            for t in transactions
            if not t.is_auto_invoice and resolver.falls_in(t, month, year)
        ]
