"""Bank account domain service."""

from dataclasses import replace
from typing import Optional
from uuid import uuid4

from famfin.database.repository import LedgerRepository
from famfin.domain.entities import BankAccount as AccountEntity


class AccountService:
    """Service for managing bank accounts."""

    def __init__(self, repo: LedgerRepository):
        """Initialize account service.

        Args:
            repo: Ledger repository
        """
        self.repo = repo

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.repo.get_bank_accounts()

    def get_account(self, account_id: str) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        for account in self.repo.get_bank_accounts():
            if account.id == account_id:
                return account
        return None

    def save_account(self, account: AccountEntity) -> AccountEntity:
        """Create or update an account; an empty ID creates a new one."""
        if not account.id:
            account = replace(account, id=uuid4().hex)
        accounts = self.repo.get_bank_accounts()
        for i, existing in enumerate(accounts):
            if existing.id == account.id:
                accounts[i] = account
                break
        else:
            accounts.append(account)
        self.repo.save_bank_accounts(accounts)
        return account

    def delete_account(self, account_id: str) -> bool:
        """Delete an account.

        Args:
            account_id: Account ID to delete

        Returns:
            False, leaving everything untouched, while any transaction is
            booked to the account
        """
        if any(t.bank_account_id == account_id for t in self.repo.get_transactions()):
            return False
        accounts = self.repo.get_bank_accounts()
        self.repo.save_bank_accounts([a for a in accounts if a.id != account_id])
        return True
