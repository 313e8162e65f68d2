"""Mapper functions to convert between domain entities and stored documents.

Stored documents use the camelCase JSON layout of existing data files and
backups, so exports remain interchangeable. This layer isolates the
conversion logic and migrates legacy values on read.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from famfin.domain import entities as domain
from famfin.utils.amount_parser import to_decimal

LEGACY_TYPES = {
    "Receita": domain.TransactionType.INCOME,
    "Despesa": domain.TransactionType.EXPENSE,
}

LEGACY_STATUSES = {
    "Pago": domain.TransactionStatus.PAID,
    "Previsão": domain.TransactionStatus.PROJECTED,
}

CREDIT_CARD_NAMES = ("credit card", "credit", "cartão de crédito", "crédito")


def parse_transaction_type(raw: Any) -> domain.TransactionType:
    if raw in LEGACY_TYPES:
        return LEGACY_TYPES[raw]
    return domain.TransactionType(raw)


def parse_transaction_status(raw: Any) -> domain.TransactionStatus:
    if raw in LEGACY_STATUSES:
        return LEGACY_STATUSES[raw]
    return domain.TransactionStatus(raw)


def infer_payment_method_kind(name: str) -> domain.PaymentMethodKind:
    """Derive a kind from a payment method name (documents written before kinds existed)."""
    lowered = (name or "").lower()
    if any(token in lowered for token in CREDIT_CARD_NAMES):
        return domain.PaymentMethodKind.CREDIT_CARD
    if "boleto" in lowered:
        return domain.PaymentMethodKind.BOLETO
    if "pix" in lowered:
        return domain.PaymentMethodKind.PIX
    if "cash" in lowered or "dinheiro" in lowered:
        return domain.PaymentMethodKind.CASH
    return domain.PaymentMethodKind.OTHER


def _number(value: Decimal) -> int | float:
    """Render a Decimal as a JSON number."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _optional(data: dict[str, Any], key: str, value: Optional[Any]) -> None:
    if value is not None:
        data[key] = value


def category_to_domain(data: dict[str, Any]) -> domain.Category:
    """Convert a stored category document to a Category entity."""
    return domain.Category(
        id=str(data["id"]),
        name=data["name"],
        type=parse_transaction_type(data["type"]),
    )


def category_to_document(category: domain.Category) -> dict[str, Any]:
    return {"id": category.id, "name": category.name, "type": category.type.value}


def payment_method_to_domain(data: dict[str, Any]) -> domain.PaymentMethod:
    """Convert a stored payment method document to a PaymentMethod entity."""
    kind = data.get("kind")
    return domain.PaymentMethod(
        id=str(data["id"]),
        name=data["name"],
        type=parse_transaction_type(data["type"]),
        kind=domain.PaymentMethodKind(kind) if kind else infer_payment_method_kind(data["name"]),
        icon_url=data.get("iconUrl"),
        linked_bank_account_id=data.get("linkedBankAccountId") or None,
    )


def payment_method_to_document(method: domain.PaymentMethod) -> dict[str, Any]:
    data = {
        "id": method.id,
        "name": method.name,
        "type": method.type.value,
        "kind": method.kind.value,
    }
    _optional(data, "iconUrl", method.icon_url)
    _optional(data, "linkedBankAccountId", method.linked_bank_account_id)
    return data


def bank_account_to_domain(data: dict[str, Any]) -> domain.BankAccount:
    """Convert a stored bank account document to a BankAccount entity."""
    return domain.BankAccount(
        id=str(data["id"]),
        name=data["name"],
        initial_balance=to_decimal(data.get("initialBalance", 0)),
        icon_url=data.get("iconUrl"),
    )


def bank_account_to_document(account: domain.BankAccount) -> dict[str, Any]:
    data = {
        "id": account.id,
        "name": account.name,
        "initialBalance": _number(account.initial_balance),
    }
    _optional(data, "iconUrl", account.icon_url)
    return data


def transaction_to_domain(data: dict[str, Any]) -> domain.Transaction:
    """Convert a stored transaction document to a Transaction entity."""
    origin = data.get("origin")
    return domain.Transaction(
        id=str(data["id"]),
        date=date.fromisoformat(data["date"][:10]),
        description=data.get("description", ""),
        category_id=str(data.get("categoryId", "")),
        bank_account_id=str(data.get("bankAccountId", "")),
        type=parse_transaction_type(data["type"]),
        value=to_decimal(data.get("value")),
        payment_method_id=str(data.get("paymentMethodId", "")),
        status=parse_transaction_status(data.get("status", "Paid")),
        notes=data.get("notes"),
        installments=data.get("installments"),
        installment_index=data.get("installmentIndex"),
        group_id=data.get("groupId"),
        origin=domain.TransactionOrigin(origin) if origin else domain.TransactionOrigin.USER,
    )


def transaction_to_document(txn: domain.Transaction) -> dict[str, Any]:
    data = {
        "id": txn.id,
        "date": txn.date.isoformat(),
        "description": txn.description,
        "categoryId": txn.category_id,
        "bankAccountId": txn.bank_account_id,
        "type": txn.type.value,
        "value": _number(txn.value),
        "paymentMethodId": txn.payment_method_id,
        "status": txn.status.value,
    }
    _optional(data, "notes", txn.notes)
    _optional(data, "installments", txn.installments)
    _optional(data, "installmentIndex", txn.installment_index)
    _optional(data, "groupId", txn.group_id)
    if txn.origin != domain.TransactionOrigin.USER:
        data["origin"] = txn.origin.value
    return data


def recurring_bill_to_domain(data: dict[str, Any]) -> domain.RecurringBill:
    """Convert a stored recurring bill document to a RecurringBill entity."""
    value = data.get("value")
    return domain.RecurringBill(
        id=str(data["id"]),
        name=data["name"],
        due_day=int(data.get("dueDay", 1)),
        value=to_decimal(value) if value is not None else None,
        group=data.get("group") or None,
        group_color=data.get("groupColor") or None,
        category_id=data.get("categoryId") or None,
        payments={str(k): bool(v) for k, v in (data.get("payments") or {}).items()},
    )


def recurring_bill_to_document(bill: domain.RecurringBill) -> dict[str, Any]:
    data: dict[str, Any] = {"id": bill.id, "name": bill.name, "dueDay": bill.due_day}
    if bill.value is not None:
        data["value"] = _number(bill.value)
    _optional(data, "group", bill.group)
    _optional(data, "groupColor", bill.group_color)
    _optional(data, "categoryId", bill.category_id)
    data["payments"] = dict(bill.payments)
    return data
