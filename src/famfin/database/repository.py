"""Typed access to the ledger collections kept in a Store."""

import json
import logging
from decimal import Decimal
from typing import Any, Callable, Optional, TypeVar

from famfin.database import mappers
from famfin.database.base import (
    Store,
    CATEGORIES_KEY,
    TRANSACTIONS_KEY,
    PAYMENT_METHODS_KEY,
    BANK_ACCOUNTS_KEY,
    CLOSING_DAYS_KEY,
    RECURRING_BILLS_KEY,
    COPYRIGHT_IMAGE_KEY,
)
from famfin.domain.entities import (
    BankAccount,
    Category,
    PaymentMethod,
    PaymentMethodKind,
    RecurringBill,
    Transaction,
    TransactionType,
)
from famfin.domain.errors import CorruptDocumentError, corrupt_document

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CATEGORIES = (
    Category(id="1", name="Salary", type=TransactionType.INCOME),
    Category(id="2", name="Food", type=TransactionType.EXPENSE),
    Category(id="3", name="Housing", type=TransactionType.EXPENSE),
    Category(id="4", name="Transport", type=TransactionType.EXPENSE),
    Category(id="5", name="Leisure", type=TransactionType.EXPENSE),
    Category(id="6", name="Health", type=TransactionType.EXPENSE),
    Category(id="7", name="Education", type=TransactionType.EXPENSE),
)

DEFAULT_PAYMENT_METHODS = (
    PaymentMethod(id="pm1", name="Pix", type=TransactionType.INCOME, kind=PaymentMethodKind.PIX),
    PaymentMethod(id="pm2", name="Cash", type=TransactionType.INCOME, kind=PaymentMethodKind.CASH),
    PaymentMethod(id="pm3", name="Pix", type=TransactionType.EXPENSE, kind=PaymentMethodKind.PIX),
    PaymentMethod(
        id="pm4", name="Credit Card", type=TransactionType.EXPENSE, kind=PaymentMethodKind.CREDIT_CARD
    ),
    PaymentMethod(id="pm5", name="Cash", type=TransactionType.EXPENSE, kind=PaymentMethodKind.CASH),
    PaymentMethod(id="pm6", name="Boleto", type=TransactionType.EXPENSE, kind=PaymentMethodKind.BOLETO),
)

DEFAULT_BANK_ACCOUNTS = (BankAccount(id="ba1", name="Main Wallet", initial_balance=Decimal("0")),)


class LedgerRepository:
    """Read and write whole ledger collections.

    Every read decodes the full document and every write replaces it; there
    are no partial updates. Reference collections (categories, payment
    methods, bank accounts) are seeded with defaults the first time they are
    read from an empty store.
    """

    def __init__(self, store: Store):
        """Initialize repository.

        Args:
            store: Store instance holding the documents
        """
        self.store = store

    # Raw documents
    def get_raw(self, key: str) -> Optional[str]:
        return self.store.get(key)

    def put_raw(self, key: str, value: str) -> None:
        self.store.set(key, value)

    def _load(self, key: str) -> Optional[Any]:
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.error("Could not decode stored document %s: %s", key, e)
            raise CorruptDocumentError(corrupt_document(key, e)) from e

    def _dump(self, key: str, payload: Any) -> None:
        self.store.set(key, json.dumps(payload, ensure_ascii=False))

    def _load_list(
        self,
        key: str,
        to_domain: Callable[[dict[str, Any]], T],
        to_document: Callable[[T], dict[str, Any]],
        defaults: tuple[T, ...] = (),
    ) -> list[T]:
        payload = self._load(key)
        if payload is None:
            if defaults:
                logger.debug("Seeding %s with %d default entries", key, len(defaults))
                self._dump(key, [to_document(item) for item in defaults])
            return list(defaults)
        if not isinstance(payload, list):
            raise CorruptDocumentError(corrupt_document(key, "expected a list"))
        try:
            return [to_domain(item) for item in payload]
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Could not map stored document %s: %s", key, e)
            raise CorruptDocumentError(corrupt_document(key, e)) from e

    # Categories
    def get_categories(self) -> list[Category]:
        return self._load_list(
            CATEGORIES_KEY,
            mappers.category_to_domain,
            mappers.category_to_document,
            DEFAULT_CATEGORIES,
        )

    def save_categories(self, categories: list[Category]) -> None:
        self._dump(CATEGORIES_KEY, [mappers.category_to_document(c) for c in categories])

    # Payment methods
    def get_payment_methods(self) -> list[PaymentMethod]:
        return self._load_list(
            PAYMENT_METHODS_KEY,
            mappers.payment_method_to_domain,
            mappers.payment_method_to_document,
            DEFAULT_PAYMENT_METHODS,
        )

    def save_payment_methods(self, methods: list[PaymentMethod]) -> None:
        self._dump(PAYMENT_METHODS_KEY, [mappers.payment_method_to_document(m) for m in methods])

    # Bank accounts
    def get_bank_accounts(self) -> list[BankAccount]:
        return self._load_list(
            BANK_ACCOUNTS_KEY,
            mappers.bank_account_to_domain,
            mappers.bank_account_to_document,
            DEFAULT_BANK_ACCOUNTS,
        )

    def save_bank_accounts(self, accounts: list[BankAccount]) -> None:
        self._dump(BANK_ACCOUNTS_KEY, [mappers.bank_account_to_document(a) for a in accounts])

    # Transactions
    def get_transactions(self) -> list[Transaction]:
        return self._load_list(
            TRANSACTIONS_KEY,
            mappers.transaction_to_domain,
            mappers.transaction_to_document,
        )

    def save_transactions(self, transactions: list[Transaction]) -> None:
        self._dump(TRANSACTIONS_KEY, [mappers.transaction_to_document(t) for t in transactions])

    # Recurring bills
    def get_recurring_bills(self) -> list[RecurringBill]:
        return self._load_list(
            RECURRING_BILLS_KEY,
            mappers.recurring_bill_to_domain,
            mappers.recurring_bill_to_document,
        )

    def save_recurring_bills(self, bills: list[RecurringBill]) -> None:
        self._dump(RECURRING_BILLS_KEY, [mappers.recurring_bill_to_document(b) for b in bills])

    # Credit-card closing days
    def get_closing_days(self) -> dict[str, int]:
        payload = self._load(CLOSING_DAYS_KEY)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise CorruptDocumentError(corrupt_document(CLOSING_DAYS_KEY, "expected an object"))
        return {str(key): int(day) for key, day in payload.items()}

    def save_closing_days(self, closing_days: dict[str, int]) -> None:
        self._dump(CLOSING_DAYS_KEY, closing_days)

    # Copyright image, kept only so that backups carry it
    def get_copyright_image(self) -> Optional[str]:
        return self.store.get(COPYRIGHT_IMAGE_KEY)

    def save_copyright_image(self, image: str) -> None:
        self.store.set(COPYRIGHT_IMAGE_KEY, image)
