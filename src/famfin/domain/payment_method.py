"""Payment method domain service."""

from dataclasses import replace
from typing import Optional
from uuid import uuid4

from famfin.database.repository import LedgerRepository
from famfin.domain.entities import PaymentMethod, PaymentMethodKind
from famfin.domain.errors import NotFoundError, payment_method_not_found
from famfin.domain.invoice import InvoiceService


class PaymentMethodService:
    """Service for managing payment methods and their invoice account links."""

    def __init__(self, repo: LedgerRepository, invoices: Optional[InvoiceService] = None):
        """Initialize payment method service.

        Args:
            repo: Ledger repository
            invoices: Invoice service to resynchronize after saves
        """
        self.repo = repo
        self.invoices = invoices or InvoiceService(repo)

    def list_payment_methods(self) -> list[PaymentMethod]:
        return self.repo.get_payment_methods()

    def list_credit_cards(self) -> list[PaymentMethod]:
        return [m for m in self.repo.get_payment_methods() if m.kind == PaymentMethodKind.CREDIT_CARD]

    def get_payment_method(self, method_id: str) -> Optional[PaymentMethod]:
        for method in self.repo.get_payment_methods():
            if method.id == method_id:
                return method
        return None

    def save_payment_method(self, method: PaymentMethod) -> PaymentMethod:
        """Create or update a payment method, then resync linked invoices.

        Args:
            method: Payment method; an empty ID creates a new one

        Returns:
            The stored payment method
        """
        if not method.id:
            method = replace(method, id=uuid4().hex)
        methods = self.repo.get_payment_methods()
        for i, existing in enumerate(methods):
            if existing.id == method.id:
                methods[i] = method
                break
        else:
            methods.append(method)
        self.repo.save_payment_methods(methods)
        self.invoices.sync_all_linked_invoices()
        return method

    def link_account(self, method_id: str, bank_account_id: Optional[str]) -> PaymentMethod:
        """Link a card to the bank account paying its invoices, or unlink it.

        Raises:
            NotFoundError: If the payment method does not exist
        """
        method = self.get_payment_method(method_id)
        if method is None:
            raise NotFoundError(payment_method_not_found(method_id))
        return self.save_payment_method(replace(method, linked_bank_account_id=bank_account_id or None))

    def delete_payment_method(self, method_id: str) -> bool:
        """Delete a payment method.

        Returns:
            False, leaving everything untouched, while any transaction uses it
        """
        if any(t.payment_method_id == method_id for t in self.repo.get_transactions()):
            return False
        methods = self.repo.get_payment_methods()
        self.repo.save_payment_methods([m for m in methods if m.id != method_id])
        return True
