"""Category domain service."""

from dataclasses import replace
from typing import Optional
from uuid import uuid4

from famfin.database.repository import LedgerRepository
from famfin.domain.entities import Category, TransactionType


class CategoryService:
    """Service for managing categories."""

    def __init__(self, repo: LedgerRepository):
        """Initialize category service.

        Args:
            repo: Ledger repository
        """
        self.repo = repo

    def list_categories(self, type: Optional[TransactionType] = None) -> list[Category]:
        """List categories.

        Args:
            type: Optional Income/Expense filter

        Returns:
            List of category entities
        """
        categories = self.repo.get_categories()
        if type is not None:
            categories = [c for c in categories if c.type == type]
        return categories

    def get_category(self, category_id: str) -> Optional[Category]:
        for category in self.repo.get_categories():
            if category.id == category_id:
                return category
        return None

    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get the first category with a name, compared case-insensitively."""
        wanted = name.strip().lower()
        for category in self.repo.get_categories():
            if category.name.lower() == wanted:
                return category
        return None

    def save_category(self, category: Category) -> Category:
        """Create or update a category; an empty ID creates a new one.

        Name uniqueness is not enforced here; callers check it.
        """
        if not category.id:
            category = replace(category, id=uuid4().hex)
        categories = self.repo.get_categories()
        for i, existing in enumerate(categories):
            if existing.id == category.id:
                categories[i] = category
                break
        else:
            categories.append(category)
        self.repo.save_categories(categories)
        return category

    def delete_category(self, category_id: str) -> bool:
        """Delete a category.

        Returns:
            False, leaving everything untouched, while any transaction uses it
        """
        if any(t.category_id == category_id for t in self.repo.get_transactions()):
            return False
        categories = self.repo.get_categories()
        self.repo.save_categories([c for c in categories if c.id != category_id])
        return True
