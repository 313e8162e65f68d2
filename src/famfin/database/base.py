"""Abstract document store interface."""

from abc import ABC, abstractmethod
from typing import Optional

CATEGORIES_KEY = "categories"
TRANSACTIONS_KEY = "transactions"
PAYMENT_METHODS_KEY = "paymentMethods"
BANK_ACCOUNTS_KEY = "bankAccounts"
CLOSING_DAYS_KEY = "ccClosingDays"
RECURRING_BILLS_KEY = "recurringBills"
COPYRIGHT_IMAGE_KEY = "copyrightImage"

ALL_KEYS = (
    CATEGORIES_KEY,
    TRANSACTIONS_KEY,
    PAYMENT_METHODS_KEY,
    BANK_ACCOUNTS_KEY,
    CLOSING_DAYS_KEY,
    RECURRING_BILLS_KEY,
    COPYRIGHT_IMAGE_KEY,
)


class Store(ABC):
    """Abstract key to JSON-text document store.

    Implementations hold no logic of their own: values are opaque strings,
    written and returned verbatim.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the backing storage."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the backing storage."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Create whatever the backing storage needs."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the raw value stored under key, or None."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""
        pass

    @abstractmethod
    def list_keys(self) -> list[str]:
        """List stored keys in sorted order."""
        pass
