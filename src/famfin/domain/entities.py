"""Domain model entities for famfin.

These are pure data classes representing ledger concepts, independent of the
document layout used by the store. The mappers in ``famfin.database.mappers``
translate between these entities and the persisted JSON documents.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

AUTO_INVOICE_PREFIX = "AUTO_INVOICE_"


class TransactionType(str, Enum):
    """Direction of a transaction. The stored value is always positive."""

    INCOME = "Income"
    EXPENSE = "Expense"


class TransactionStatus(str, Enum):
    """Confirmed (paid) or expected (projected) transaction."""

    PAID = "Paid"
    PROJECTED = "Projected"


class TransactionOrigin(str, Enum):
    """Who owns a transaction."""

    USER = "User"
    SYSTEM = "System"


class PaymentMethodKind(str, Enum):
    """Explicit payment method kind."""

    CASH = "Cash"
    PIX = "Pix"
    CREDIT_CARD = "CreditCard"
    BOLETO = "Boleto"
    OTHER = "Other"


class BillStatus(str, Enum):
    """Payment status of a recurring bill for a month."""

    PAID = "Paid"
    OVERDUE = "Overdue"
    DUE_TODAY = "DueToday"
    UPCOMING = "Upcoming"


@dataclass(frozen=True)
class Category:
    """Transaction category."""

    id: str
    name: str
    type: TransactionType


@dataclass(frozen=True)
class PaymentMethod:
    """Payment method, optionally linked to the bank account paying its invoices."""

    id: str
    name: str
    type: TransactionType
    kind: PaymentMethodKind = PaymentMethodKind.OTHER
    icon_url: Optional[str] = None
    linked_bank_account_id: Optional[str] = None

    @property
    def is_credit_card(self) -> bool:
        return self.kind == PaymentMethodKind.CREDIT_CARD


@dataclass(frozen=True)
class BankAccount:
    """Bank account. Balances are derived, never stored."""

    id: str
    name: str
    initial_balance: Decimal = Decimal("0")
    icon_url: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: str
    date: date
    description: str
    category_id: str
    bank_account_id: str
    type: TransactionType
    value: Decimal
    payment_method_id: str
    status: TransactionStatus = TransactionStatus.PAID
    notes: Optional[str] = None
    installments: Optional[int] = None
    installment_index: Optional[int] = None
    group_id: Optional[str] = None
    origin: TransactionOrigin = TransactionOrigin.USER

    @property
    def is_auto_invoice(self) -> bool:
        """True for system-generated credit-card invoice transactions."""
        if self.origin == TransactionOrigin.SYSTEM:
            return True
        return bool(self.notes) and self.notes.startswith(AUTO_INVOICE_PREFIX)

    @property
    def signed_value(self) -> Decimal:
        return self.value if self.type == TransactionType.INCOME else -self.value


@dataclass(frozen=True)
class RecurringBill:
    """Recurring bill with a paid flag per month.

    ``payments`` is keyed by ``"<year>-<month index>"`` where the month index
    is 0-based, matching the persisted layout.
    """

    id: str
    name: str
    due_day: int
    value: Optional[Decimal] = None
    group: Optional[str] = None
    group_color: Optional[str] = None
    category_id: Optional[str] = None
    payments: dict[str, bool] = field(default_factory=dict)


@dataclass(frozen=True)
class MonthlySummary:
    """Income and expense totals for one month."""

    month: int
    year: int
    total_income: Decimal
    confirmed_income: Decimal
    total_expense: Decimal
    confirmed_expense: Decimal
    balance: Decimal
    confirmed_balance: Decimal


@dataclass(frozen=True)
class CategorySummary:
    """Expense total of one category within a month."""

    category_id: str
    category_name: str
    total: Decimal
    confirmed_total: Decimal
    percentage: float


@dataclass(frozen=True)
class BankAccountSummary:
    """Bank account with its derived balances."""

    account: BankAccount
    current_balance: Decimal
    confirmed_balance: Decimal

    @property
    def id(self) -> str:
        return self.account.id

    @property
    def name(self) -> str:
        return self.account.name


@dataclass(frozen=True)
class YearlyHistoryPoint:
    """One month of the yearly history chart."""

    month: int
    label: str
    income: Decimal
    expense: Decimal
    confirmed_income: Decimal
    confirmed_expense: Decimal
    balance: Decimal


@dataclass(frozen=True)
class CardInvoiceProjection:
    """Credit-card purchases falling into one billing month."""

    month: int
    year: int
    total: Decimal
    count: int
    items: tuple[Transaction, ...] = ()
