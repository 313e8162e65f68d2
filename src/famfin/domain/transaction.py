"""Transaction domain service."""

import logging
from dataclasses import replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional
from uuid import uuid4

from famfin.database.repository import LedgerRepository
from famfin.domain.billing import EffectiveDateResolver
from famfin.domain.entities import (
    Transaction as TransactionEntity,
    TransactionStatus,
    TransactionType,
)
from famfin.domain.errors import ValidationError
from famfin.domain.invoice import InvoiceService
from famfin.domain.recurring import RecurringBillService
from famfin.utils.date_parser import add_months

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def new_id() -> str:
    return uuid4().hex


class TransactionService:
    """Service for creating, updating and deleting transactions.

    Every mutation is written to the store before its side effects run:
    recurring-bill flags follow Expense transactions of a matching category,
    and credit-card purchases resynchronize the invoices they feed.
    """

    def __init__(
        self,
        repo: LedgerRepository,
        invoices: Optional[InvoiceService] = None,
        bills: Optional[RecurringBillService] = None,
    ):
        """Initialize transaction service.

        Args:
            repo: Ledger repository
            invoices: Invoice service (created from repo if omitted)
            bills: Recurring bill service (created from repo if omitted)
        """
        self.repo = repo
        self.invoices = invoices or InvoiceService(repo)
        self.bills = bills or RecurringBillService(repo)

    def get_transaction(self, transaction_id: str) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        for txn in self.repo.get_transactions():
            if txn.id == transaction_id:
                return txn
        return None

    def list_transactions(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
        type: Optional[TransactionType] = None,
        bank_account_id: Optional[str] = None,
        status: Optional[TransactionStatus] = None,
        include_auto_invoices: bool = True,
    ) -> list[TransactionEntity]:
        """List transactions with filters, newest first.

        Args:
            month: Optional month filter (1-12) on the booking date
            year: Optional year filter on the booking date
            type: Optional Income/Expense filter
            bank_account_id: Optional bank account filter
            status: Optional Paid/Projected filter
            include_auto_invoices: If False, leave out synthetic invoices

        Returns:
            List of transaction entities
        """
        results = []
        for txn in self.repo.get_transactions():
            if month is not None and txn.date.month != month:
                continue
            if year is not None and txn.date.year != year:
                continue
            if type is not None and txn.type != type:
                continue
            if bank_account_id is not None and txn.bank_account_id != bank_account_id:
                continue
            if status is not None and txn.status != status:
                continue
            if not include_auto_invoices and txn.is_auto_invoice:
                continue
            results.append(txn)
        return sorted(results, key=lambda t: t.date, reverse=True)

    def search_transactions(self, term: str) -> list[TransactionEntity]:
        """Find user transactions whose description or notes contain term."""
        term = term.strip().lower()
        if not term:
            return []
        matches = [
            txn
            for txn in self.repo.get_transactions()
            if not txn.is_auto_invoice
            and (term in txn.description.lower() or term in (txn.notes or "").lower())
        ]
        return sorted(matches, key=lambda t: t.date, reverse=True)

    def validate_transaction(self, txn: TransactionEntity) -> None:
        """Check the fields a caller must fill in before saving.

        The lifecycle methods accept whatever they are given; callers run
        this first to reject incomplete input.

        Raises:
            ValidationError: If category, account or payment method is missing,
                or the value is not positive
        """
        missing = [
            label
            for label, value in (
                ("category", txn.category_id),
                ("bank account", txn.bank_account_id),
                ("payment method", txn.payment_method_id),
            )
            if not value
        ]
        if missing:
            raise ValidationError(f"Missing {', '.join(missing)}")
        if txn.value is None or txn.value <= 0:
            raise ValidationError("Value must be greater than zero")
        if txn.installments is not None and txn.installments < 1:
            raise ValidationError("Installments must be at least 1")

    def save_transaction(self, txn: TransactionEntity) -> list[TransactionEntity]:
        """Create or update a transaction.

        A new credit-card purchase with more than one installment is expanded
        into one transaction per installment, a month apart, each carrying an
        equal share of the value.

        Args:
            txn: Transaction to store; an empty ID creates a new one

        Returns:
            The stored transactions (several for an installment purchase)
        """
        transactions = self.repo.get_transactions()
        resolver = EffectiveDateResolver.from_repository(self.repo)
        position = next(
            (i for i, existing in enumerate(transactions) if txn.id and existing.id == txn.id),
            None,
        )
        previous = transactions[position] if position is not None else None

        if (
            previous is None
            and txn.installments is not None
            and txn.installments > 1
            and resolver.is_credit_card(txn.payment_method_id)
        ):
            saved = self.expand_installments(txn)
            transactions.extend(saved)
        else:
            if not txn.id:
                txn = replace(txn, id=new_id())
            saved = [txn]
            if position is not None:
                transactions[position] = txn
            else:
                transactions.append(txn)

        self.repo.save_transactions(transactions)
        logger.debug("Saved %d transaction(s) starting with %s", len(saved), saved[0].id)

        for stored in saved:
            if stored.type == TransactionType.EXPENSE:
                self.bills.mark_paid_for_category(
                    stored.category_id, stored.date.year, stored.date.month
                )

        targets = [self._invoice_target(stored, resolver) for stored in saved]
        if previous is not None:
            # An edit may have moved the purchase off its old invoice
            targets.insert(0, self._invoice_target(previous, resolver))
        targets = [target for target in targets if target is not None]
        if targets:
            self.invoices.sync_invoices(targets)

        return saved

    def expand_installments(self, txn: TransactionEntity) -> list[TransactionEntity]:
        """Split a purchase into its installment transactions.

        Shares are rounded to cents; the last one takes the remainder so the
        installments add up to the purchase value.
        """
        count = txn.installments or 1
        group_id = new_id()
        share = (txn.value / Decimal(count)).quantize(CENT, rounding=ROUND_HALF_UP)
        last_share = txn.value - share * (count - 1)
        return [
            replace(
                txn,
                id=f"{group_id}-{index}",
                date=add_months(txn.date, index),
                description=f"{txn.description} ({index + 1}/{count})",
                value=last_share if index == count - 1 else share,
                installments=count,
                installment_index=index + 1,
                group_id=group_id,
            )
            for index in range(count)
        ]

    def delete_transaction(self, transaction_id: str, delete_all_next: bool = False) -> bool:
        """Delete a transaction, or an installment and every later one.

        Args:
            transaction_id: Transaction ID to delete
            delete_all_next: Also delete later installments of the same group

        Returns:
            False if the transaction does not exist, True otherwise
        """
        transactions = self.repo.get_transactions()
        target = next((t for t in transactions if t.id == transaction_id), None)
        if target is None:
            return False

        if delete_all_next and target.group_id and target.installment_index is not None:
            removed = [
                t
                for t in transactions
                if t.group_id == target.group_id
                and (t.installment_index or 0) >= target.installment_index
            ]
        else:
            removed = [target]

        removed_ids = {t.id for t in removed}
        remaining = [t for t in transactions if t.id not in removed_ids]
        self.repo.save_transactions(remaining)
        logger.debug("Deleted %d transaction(s) starting with %s", len(removed), transaction_id)

        if target.type == TransactionType.EXPENSE:
            still_paid = any(
                t.category_id == target.category_id
                and t.date.year == target.date.year
                and t.date.month == target.date.month
                and not t.is_auto_invoice
                for t in remaining
            )
            if not still_paid:
                self.bills.clear_paid_for_category(
                    target.category_id, target.date.year, target.date.month
                )

        resolver = EffectiveDateResolver.from_repository(self.repo)
        if resolver.is_credit_card(target.payment_method_id):
            targets = [self._invoice_target(t, resolver) for t in removed]
            self.invoices.sync_invoices([t for t in targets if t is not None])
            self.invoices.sync_all_linked_invoices()

        return True

    def toggle_status(self, txn: TransactionEntity) -> TransactionEntity:
        """Flip a transaction between Paid and Projected and save it.

        Raises:
            ValidationError: If the transaction is a synthetic invoice
        """
        if txn.is_auto_invoice:
            raise ValidationError(
                f"Transaction {txn.id} is a card invoice; it follows its purchases and cannot be toggled"
            )
        if txn.status == TransactionStatus.PAID:
            new_status = TransactionStatus.PROJECTED
        else:
            new_status = TransactionStatus.PAID
        return self.save_transaction(replace(txn, status=new_status))[0]

    def _invoice_target(
        self, txn: TransactionEntity, resolver: EffectiveDateResolver
    ) -> Optional[tuple[str, int, int]]:
        if txn.is_auto_invoice or not resolver.is_credit_card(txn.payment_method_id):
            return None
        effective: date = resolver.resolve(txn)
        return txn.payment_method_id, effective.month, effective.year
