"""In-memory document store, used for tests and embedding."""

from typing import Optional

from famfin.database.base import Store


class MemoryStore(Store):
    """Store keeping documents in a plain dict."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._documents: dict[str, str] = dict(initial or {})

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def initialize_schema(self) -> None:
        pass

    def get(self, key: str) -> Optional[str]:
        return self._documents.get(key)

    def set(self, key: str, value: str) -> None:
        self._documents[key] = value

    def delete(self, key: str) -> None:
        self._documents.pop(key, None)

    def list_keys(self) -> list[str]:
        return sorted(self._documents)
