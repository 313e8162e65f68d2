"""Credit-card invoice synchronization.

Every credit card linked to a bank account gets one synthetic Expense
transaction per billing month, posted to that account and holding the sum of
the card's purchases that resolve to the month. The synthetic transactions
live in the same collection as user transactions and are recognized by their
notes key, ``AUTO_INVOICE_<card id>_<month index>_<year>``.

Invoices are always recomputed from the purchases, never adjusted
incrementally, so resynchronizing a month with unchanged purchases leaves the
stored collection untouched.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from famfin.config import get_settings
from famfin.database.mappers import transaction_to_document
from famfin.database.repository import LedgerRepository
from famfin.domain.billing import EffectiveDateResolver
from famfin.domain.entities import (
    AUTO_INVOICE_PREFIX,
    Category,
    PaymentMethod,
    PaymentMethodKind,
    Transaction,
    TransactionOrigin,
    TransactionStatus,
    TransactionType,
)
from famfin.utils.date_parser import month_abbreviation, shift_month

logger = logging.getLogger(__name__)

INVOICE_DUE_DAY = 5
FALLBACK_CATEGORY_ID = "1"
FALLBACK_INVOICE_METHOD_ID = "pm6"
CARD_CATEGORY_NAMES = ("card", "cartão")

# Months synced around today: one behind, twenty-three ahead
SYNC_WINDOW_START = -1
SYNC_WINDOW_END = 23


def invoice_key(card_id: str, month: int, year: int) -> str:
    """Notes key of the invoice for a card and billing month (1-based month)."""
    return f"{AUTO_INVOICE_PREFIX}{card_id}_{month - 1}_{year}"


def parse_invoice_key(notes: Optional[str]) -> Optional[tuple[str, int, int]]:
    """Split an invoice notes key into (card id, month, year), or None."""
    if not notes or not notes.startswith(AUTO_INVOICE_PREFIX):
        return None
    parts = notes[len(AUTO_INVOICE_PREFIX):].rsplit("_", 2)
    if len(parts) != 3:
        return None
    card_id, month_index, year = parts
    try:
        return card_id, int(month_index) + 1, int(year)
    except ValueError:
        return None


def sync_window(today: date) -> list[tuple[int, int]]:
    """(month, year) pairs covered by a full resync."""
    return [
        shift_month(today.month, today.year, offset)
        for offset in range(SYNC_WINDOW_START, SYNC_WINDOW_END + 1)
    ]


class _SyncContext:
    """Reference data shared by every month synced in one pass."""

    def __init__(self, repo: LedgerRepository, locale: Optional[str]):
        self.methods = repo.get_payment_methods()
        self.categories = repo.get_categories()
        self.resolver = EffectiveDateResolver(self.methods, repo.get_closing_days())
        self.locale = locale

    def card(self, card_id: str) -> Optional[PaymentMethod]:
        return self.resolver.methods_by_id.get(card_id)

    def invoice_category_id(self) -> str:
        expense_categories = [c for c in self.categories if c.type == TransactionType.EXPENSE]
        for category in expense_categories:
            if _is_card_category(category):
                return category.id
        if expense_categories:
            return expense_categories[0].id
        return FALLBACK_CATEGORY_ID

    def invoice_method_id(self) -> str:
        # Never a card, or the invoice would be aggregated into another invoice
        for method in self.methods:
            if method.kind == PaymentMethodKind.BOLETO:
                return method.id
        return FALLBACK_INVOICE_METHOD_ID


def issues_invoices(method: Optional[PaymentMethod]) -> bool:
    """True for a credit card linked to the bank account paying its invoices."""
    return method is not None and method.is_credit_card and bool(method.linked_bank_account_id)


def _is_card_category(category: Category) -> bool:
    name = category.name.lower()
    return any(token in name for token in CARD_CATEGORY_NAMES)


class InvoiceService:
    """Service keeping synthetic invoice transactions in step with card purchases."""

    def __init__(self, repo: LedgerRepository, locale: Optional[str] = None):
        """Initialize invoice service.

        Args:
            repo: Ledger repository
            locale: Locale for month names in invoice descriptions
                (defaults to the configured FAMFIN_LOCALE)
        """
        self.repo = repo
        self.locale = locale or get_settings().locale

    def sync_invoice(self, card_id: str, month: int, year: int) -> Optional[Transaction]:
        """Recompute the invoice of one card for one billing month.

        Args:
            card_id: Payment method ID of the card
            month: Billing month (1-12)
            year: Billing year

        Returns:
            The stored invoice transaction, or None when the month has no
            purchases or the card is not linked to a bank account (any
            invoice left from an earlier link is removed)
        """
        self.sync_invoices([(card_id, month, year)])
        key = invoice_key(card_id, month, year)
        for txn in self.repo.get_transactions():
            if txn.notes == key:
                return txn
        return None

    def sync_invoices(self, targets: Iterable[tuple[str, int, int]]) -> int:
        """Recompute several (card id, month, year) invoices in one write.

        Returns:
            Number of invoices created, updated or removed
        """
        context = _SyncContext(self.repo, self.locale)
        transactions = self.repo.get_transactions()
        changed = 0
        for card_id, month, year in dict.fromkeys(targets):
            if self._apply(transactions, context, card_id, month, year):
                changed += 1
        if changed:
            self.repo.save_transactions(transactions)
        return changed

    def sync_all_linked_invoices(self, today: Optional[date] = None) -> int:
        """Resynchronize every linked card over the sync window.

        Besides the window around today, each card also resyncs every month
        that already holds one of its invoices and every month one of its
        purchases resolves to, so invoices outside the window cannot go stale.
        Invoices of methods that no longer issue them (unlinked, no longer a
        credit card, or deleted) are removed.

        Returns:
            Number of invoices created, updated or removed
        """
        today = today or date.today()
        context = _SyncContext(self.repo, self.locale)
        linked_cards = [m for m in context.methods if issues_invoices(m)]
        transactions = self.repo.get_transactions()

        orphaned = []
        for txn in transactions:
            parsed = parse_invoice_key(txn.notes) if txn.is_auto_invoice else None
            if parsed is not None and not issues_invoices(context.card(parsed[0])):
                orphaned.append(parsed)

        changed = 0
        for card_id, month, year in dict.fromkeys(orphaned):
            if self._apply(transactions, context, card_id, month, year):
                changed += 1
        for card in linked_cards:
            for month, year in self._months_to_sync(card, transactions, context, today):
                if self._apply(transactions, context, card.id, month, year):
                    changed += 1

        if changed:
            self.repo.save_transactions(transactions)
        logger.debug(
            "Synced %d linked card(s), %d invoice(s) changed", len(linked_cards), changed
        )
        return changed

    def list_invoices(self, card_id: Optional[str] = None) -> list[Transaction]:
        """List synthetic invoice transactions, optionally for one card."""
        invoices = []
        for txn in self.repo.get_transactions():
            if not txn.is_auto_invoice:
                continue
            parsed = parse_invoice_key(txn.notes)
            if card_id is not None and (parsed is None or parsed[0] != card_id):
                continue
            invoices.append(txn)
        return sorted(invoices, key=lambda t: t.date)

    def _months_to_sync(
        self,
        card: PaymentMethod,
        transactions: list[Transaction],
        context: _SyncContext,
        today: date,
    ) -> list[tuple[int, int]]:
        months = dict.fromkeys(sync_window(today))
        for txn in transactions:
            if txn.is_auto_invoice:
                parsed = parse_invoice_key(txn.notes)
                if parsed is not None and parsed[0] == card.id:
                    months[(parsed[1], parsed[2])] = None
            elif txn.payment_method_id == card.id:
                effective = context.resolver.resolve(txn)
                months[(effective.month, effective.year)] = None
        return list(months)

    def _apply(
        self,
        transactions: list[Transaction],
        context: _SyncContext,
        card_id: str,
        month: int,
        year: int,
    ) -> bool:
        """Bring one invoice in line with its purchases, editing the list in place.

        Returns:
            True if the list changed
        """
        card = context.card(card_id)
        key = invoice_key(card_id, month, year)
        if not issues_invoices(card):
            kept = [txn for txn in transactions if txn.notes != key]
            if len(kept) == len(transactions):
                return False
            transactions[:] = kept
            logger.debug("Removed invoice %s of a card without a linked account", key)
            return True

        total = sum(
            (
                txn.value
                for txn in transactions
                if txn.payment_method_id == card_id
                and not txn.is_auto_invoice
                and context.resolver.falls_in(txn, month, year)
            ),
            Decimal("0"),
        )

        positions = [i for i, txn in enumerate(transactions) if txn.notes == key]
        changed = False
        # Only one invoice may exist per key; drop any extra copies
        for position in reversed(positions[1:]):
            del transactions[position]
            changed = True

        if total <= 0:
            if positions:
                del transactions[positions[0]]
                logger.debug("Removed empty invoice %s", key)
                return True
            return changed

        existing = transactions[positions[0]] if positions else None
        invoice = Transaction(
            id=existing.id if existing else f"invoice-{card_id}-{year}-{month:02d}",
            date=date(year, month, INVOICE_DUE_DAY),
            description=f"Invoice: {card.name} ({month_abbreviation(month, context.locale)})",
            category_id=context.invoice_category_id(),
            bank_account_id=card.linked_bank_account_id,
            type=TransactionType.EXPENSE,
            value=total,
            payment_method_id=context.invoice_method_id(),
            status=TransactionStatus.PROJECTED,
            notes=key,
            origin=TransactionOrigin.SYSTEM,
        )

        if existing is None:
            transactions.append(invoice)
            logger.debug("Created invoice %s for %s", key, total)
            return True
        # Compared as stored: values come back from storage as JSON numbers
        if transaction_to_document(existing) != transaction_to_document(invoice):
            transactions[positions[0]] = invoice
            logger.debug("Updated invoice %s to %s", key, total)
            return True
        return changed
