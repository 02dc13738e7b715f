from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from sqlalchemy import Boolean, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

from .errors import NotFoundError, ValidationError


# Absolute tolerance for every money comparison in the ledger core
MONEY_TOLERANCE = 0.01

STATUS_PAID = "paid"
STATUS_PARTIAL = "partial"
STATUS_DUE = "due"
VALID_STATUSES = (STATUS_PAID, STATUS_PARTIAL, STATUS_DUE)


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer for master-data payloads (customers, suppliers, products):
    - writable_fields: column keys clients are allowed to set (security boundary)
    - required_on_create: column keys required for POST
    - aliases: wire name -> column key (e.g. "stockQuantity" -> "stock_quantity")
    """
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)
    aliases: dict[str, str] = field(default_factory=dict)


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped or "e" in stripped.lower() or "." in stripped:
                raise ValidationError(f"{col.key} must be an integer", field=col.key)
            try:
                return int(stripped)
            except ValueError:
                raise ValidationError(f"{col.key} must be an integer", field=col.key)
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise ValidationError(f"{col.key} must be an integer", field=col.key)

    # Floats (money and stock quantities); numeric strings come from HTML forms
    if isinstance(coltype, Float):
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                raise ValidationError(f"{col.key} must be a number", field=col.key)
        if not is_number(value):
            raise ValidationError(f"{col.key} must be a number", field=col.key)
        return float(value)

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        return bool(value)

    if isinstance(coltype, (String, Text)):
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict keyed by column name.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    cols = _columns_by_key(model)

    normalized: dict = {}
    for raw_key, raw in payload.items():
        key = policy.aliases.get(raw_key, raw_key)
        if key not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {raw_key}", field=raw_key)
        if key not in cols:
            raise ValidationError(f"Unknown field: {raw_key}", field=raw_key)
        normalized[key] = raw

    if not partial:
        missing = sorted(f for f in policy.required_on_create if normalized.get(f) in (None, ""))
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", field=missing[0])

    patch: dict = {}
    for k, raw in normalized.items():
        col = cols[k]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null", field=k)
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank", field=k)

        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}", field=k)

        patch[k] = val

    return patch


def enforce_rules_product(patch: dict) -> None:
    """Business rules that are not captured by SQLAlchemy metadata alone."""
    for key in ("price", "stock_quantity", "min_stock_level"):
        if key in patch and patch[key] is not None and patch[key] < 0:
            raise ValidationError(f"{key} must be >= 0", field=key)


# =============================================================================
# LEDGER ENTRY VALIDATION
# =============================================================================

def amounts_match(a: float, b: float) -> bool:
    """Money equality within MONEY_TOLERANCE; exact float equality is never used."""
    return abs(a - b) <= MONEY_TOLERANCE


def validate_amount(name: str, value: Any) -> float:
    """Money fields must be finite, non-negative numbers."""
    if not is_number(value) or value < 0:
        raise ValidationError(f"{name} must be a non-negative number", field=name)
    return float(value)


def validate_status(status: Any) -> str:
    if not isinstance(status, str) or status not in VALID_STATUSES:
        raise ValidationError(
            f"status must be one of: {', '.join(VALID_STATUSES)}",
            field="status",
        )
    return status


def normalize_item(
    item: Any,
    index: int,
    catalog_lookup: Optional[Callable[[Any], Any]] = None,
    *,
    strict: bool = False,
) -> dict:
    """
    Validate one line item and return its normalized snapshot.

    If the item names a catalog product (``productId``) missing name, price and
    unit are copied from that product. The copy is a snapshot: later catalog
    price changes never touch this item.

    ``strict=False`` (create): an absent or inconsistent ``total`` is replaced by
    ``price * quantity``. ``strict=True`` (item replacement on update): a
    supplied ``total`` that disagrees with ``price * quantity`` is rejected.
    """
    if not isinstance(item, dict):
        raise ValidationError(f"Product at index {index} is invalid.", field="products", index=index)

    name = item.get("name")
    price = item.get("price")
    quantity = item.get("quantity")
    unit = item.get("unit")
    total = item.get("total")
    custom = item.get("custom", False)

    product_id = item.get("productId")
    if product_id and catalog_lookup is not None:
        product = catalog_lookup(product_id)
        if product is None:
            raise NotFoundError(f"Product with ID {product_id} not found.", field="productId", index=index)
        name = name or product.name
        price = price if price is not None else product.price
        unit = unit or product.unit

    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"Product at index {index} is missing name.", field="name", index=index)
    if not is_number(price) or price < 0:
        raise ValidationError(f"Product at index {index} has invalid price.", field="price", index=index)
    if not is_number(quantity) or quantity <= 0:
        raise ValidationError(f"Product at index {index} has invalid quantity.", field="quantity", index=index)
    if not isinstance(unit, str) or not unit.strip():
        raise ValidationError(f"Product at index {index} is missing unit.", field="unit", index=index)
    if not isinstance(custom, bool):
        raise ValidationError(f"Product at index {index}: custom must be a boolean.", field="custom", index=index)

    expected = price * quantity
    if total is None or not is_number(total) or not amounts_match(total, expected):
        if strict and total is not None:
            raise ValidationError(
                f"Product total does not match quantity * price for product: {name}",
                field="total",
                index=index,
            )
        total = expected

    return {
        "name": name.strip(),
        "price": float(price),
        "quantity": float(quantity),
        "unit": unit.strip(),
        "total": float(total),
        "custom": custom,
    }


def normalize_items(
    items: Any,
    catalog_lookup: Optional[Callable[[Any], Any]] = None,
    *,
    strict: bool = False,
) -> list[dict]:
    if not isinstance(items, list) or not items:
        raise ValidationError("At least one product is required.", field="products")
    return [
        normalize_item(item, index, catalog_lookup, strict=strict)
        for index, item in enumerate(items)
    ]


def items_total(items: list[dict]) -> float:
    return sum(item["total"] for item in items)


def validate_totals(items: list[dict], total_amount: float, paid_amount: float, due_amount: float) -> None:
    """Check totalAmount against the items and paid + due against totalAmount."""
    if not amounts_match(items_total(items), total_amount):
        raise ValidationError(
            "Total amount does not match sum of product prices.",
            field="totalAmount",
        )
    if not amounts_match(paid_amount + due_amount, total_amount):
        raise ValidationError(
            "Total amount must equal paid amount plus due amount.",
            field="paidAmount",
        )
