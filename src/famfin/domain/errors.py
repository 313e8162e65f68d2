"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class CorruptDocumentError(DomainError):
    """A stored document could not be decoded."""


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def bill_not_found(bill_id: str) -> str:
    """Return message for missing recurring bill."""
    return f"Recurring bill {bill_id} not found"


def payment_method_not_found(method_id: str) -> str:
    """Return message for missing payment method."""
    return f"Payment method {method_id} not found"


def corrupt_document(key: str, reason: object) -> str:
    """Return message for a stored document that is not valid JSON."""
    return f"Stored document '{key}' is corrupt: {reason}"


def delete_blocked(kind: str, entity_id: str) -> str:
    """Return message when an entity is still referenced by transactions."""
    return (
        f"Cannot delete {kind} {entity_id}: it is used by existing transactions. "
        "Please reassign or delete them first."
    )
