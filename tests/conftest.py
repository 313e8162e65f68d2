"""Shared pytest fixtures for famfin tests."""

from datetime import date
from decimal import Decimal
from pathlib import Path
import pytest

from famfin.database.factories import create_sqlite_store
from famfin.database.memory import MemoryStore
from famfin.database.repository import LedgerRepository
from famfin.domain.entities import (
    BankAccount,
    Category,
    PaymentMethod,
    PaymentMethodKind,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from famfin.domain.invoice import InvoiceService
from famfin.domain.recurring import RecurringBillService
from famfin.domain.summary import SummaryService
from famfin.domain.transaction import TransactionService


@pytest.fixture
def store():
    """Create an empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def repo(store):
    """Create a repository over the in-memory store."""
    return LedgerRepository(store)


@pytest.fixture
def temp_db(tmp_path):
    """Create a temporary SQLite store for testing."""
    db_path = str(tmp_path / "famfin.db")
    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()


@pytest.fixture
def invoice_service(repo):
    """Create an InvoiceService with English month names."""
    return InvoiceService(repo, locale="en")


@pytest.fixture
def bill_service(repo):
    """Create a RecurringBillService."""
    return RecurringBillService(repo)


@pytest.fixture
def transaction_service(repo, invoice_service, bill_service):
    """Create a TransactionService sharing the fixtures' collaborators."""
    return TransactionService(repo, invoices=invoice_service, bills=bill_service)


@pytest.fixture
def summary_service(repo):
    """Create a SummaryService."""
    return SummaryService(repo)


@pytest.fixture
def ledger(repo):
    """Seed categories, accounts and payment methods.

    "visa" is a credit card paid from "checking"; "master" is a credit card
    without a linked account.
    """
    repo.save_categories(
        [
            Category(id="salary", name="Salary", type=TransactionType.INCOME),
            Category(id="food", name="Food", type=TransactionType.EXPENSE),
            Category(id="housing", name="Housing", type=TransactionType.EXPENSE),
            Category(id="cards", name="Credit Card Bills", type=TransactionType.EXPENSE),
        ]
    )
    repo.save_bank_accounts(
        [
            BankAccount(id="checking", name="Checking", initial_balance=Decimal("1000")),
            BankAccount(id="savings", name="Savings", initial_balance=Decimal("0")),
        ]
    )
    repo.save_payment_methods(
        [
            PaymentMethod(
                id="visa",
                name="Visa",
                type=TransactionType.EXPENSE,
                kind=PaymentMethodKind.CREDIT_CARD,
                linked_bank_account_id="checking",
            ),
            PaymentMethod(
                id="master",
                name="Master",
                type=TransactionType.EXPENSE,
                kind=PaymentMethodKind.CREDIT_CARD,
            ),
            PaymentMethod(id="pix", name="Pix", type=TransactionType.EXPENSE, kind=PaymentMethodKind.PIX),
            PaymentMethod(
                id="boleto", name="Boleto", type=TransactionType.EXPENSE, kind=PaymentMethodKind.BOLETO
            ),
        ]
    )
    return repo


@pytest.fixture
def make_transaction():
    """Return a factory for transactions with sensible defaults."""

    def factory(**overrides) -> Transaction:
        fields = dict(
            id="",
            date=date(2025, 3, 10),
            description="Purchase",
            category_id="food",
            bank_account_id="checking",
            type=TransactionType.EXPENSE,
            value=Decimal("100"),
            payment_method_id="pix",
            status=TransactionStatus.PAID,
        )
        fields.update(overrides)
        if isinstance(fields["value"], (int, str)):
            fields["value"] = Decimal(str(fields["value"]))
        return Transaction(**fields)

    return factory


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def backup_dir(tmp_path) -> Path:
    """Directory for exported backup files."""
    path = tmp_path / "backups"
    path.mkdir()
    return path
