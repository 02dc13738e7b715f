# Overview: Service-layer operations for the sales/buying ledger; encapsulates business logic and database work.

"""
Ledger Service

WHY: Sales and buyings are the store's books. Every create and every update
that touches items or amounts keeps three invariants:

- totalAmount == sum of line item totals        (within 0.01)
- paidAmount + dueAmount == totalAmount         (within 0.01)
- status in {"paid", "partial", "due"}

DESIGN:
- Line items are snapshots. A catalog product only seeds name/price/unit.
- Payments are the only incremental mutation. They run under the record's
  version_id so two concurrent payments cannot lose an update.
- Caller-supplied status is trusted at creation (membership is checked).
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import current_app
from sqlalchemy.orm.exc import StaleDataError

from ..errors import ConflictError, NotFoundError, ValidationError
from ..extensions import db
from ..models import Buying, BuyingLine, Customer, Sale, SaleLine, Supplier
from ..validation import (
    MONEY_TOLERANCE,
    STATUS_DUE,
    STATUS_PAID,
    STATUS_PARTIAL,
    is_number,
    items_total,
    normalize_items,
    validate_amount,
    validate_status,
    validate_totals,
)
from .concurrency import run_with_retry
from .products_service import catalog_lookup
from .tenant_service import get_scoped, get_scoped_or_404, scoped_query


KIND_SALE = "sale"
KIND_BUYING = "buying"


@dataclass(frozen=True)
class RecordKind:
    """Binds a ledger kind to its record, line and counterparty models."""
    name: str
    label: str
    model: type
    line_model: type
    counterparty_model: type
    counterparty_label: str
    counterparty_column: str


RECORD_KINDS = {
    KIND_SALE: RecordKind(
        name=KIND_SALE,
        label="Sale",
        model=Sale,
        line_model=SaleLine,
        counterparty_model=Customer,
        counterparty_label="Customer",
        counterparty_column="customer_id",
    ),
    KIND_BUYING: RecordKind(
        name=KIND_BUYING,
        label="Buying",
        model=Buying,
        line_model=BuyingLine,
        counterparty_model=Supplier,
        counterparty_label="Supplier",
        counterparty_column="supplier_id",
    ),
}

# Wire keys accepted by update_record
UPDATABLE_FIELDS = ("items", "products", "totalAmount", "paidAmount", "dueAmount", "status")


def get_kind(kind: str) -> RecordKind:
    try:
        return RECORD_KINDS[kind]
    except KeyError:
        raise ValidationError(f"Unknown record kind: {kind}")


def derive_status(paid_amount: float, total_amount: float) -> str:
    """Paid once the remaining due is within MONEY_TOLERANCE."""
    if paid_amount >= total_amount - MONEY_TOLERANCE:
        return STATUS_PAID
    if paid_amount > 0:
        return STATUS_PARTIAL
    return STATUS_DUE


def _build_lines(spec: RecordKind, items: list[dict]) -> list:
    return [spec.line_model(position=i, **item) for i, item in enumerate(items)]


def _line_dicts(record) -> list[dict]:
    return [line.to_dict() for line in record.lines]


# =============================================================================
# CREATE
# =============================================================================

def _create_record(
    spec: RecordKind,
    *,
    store_id: int,
    counterparty_id,
    items,
    total_amount=None,
    paid_amount=None,
    due_amount=None,
    status=None,
    actor_id: int | None = None,
):
    if counterparty_id in (None, ""):
        raise ValidationError(f"{spec.counterparty_label} is required.", field=spec.model.counterparty_key)

    counterparty = get_scoped(spec.counterparty_model, counterparty_id, store_id)
    if counterparty is None:
        raise NotFoundError(f"{spec.counterparty_label} not found.", field=spec.model.counterparty_key)

    normalized = normalize_items(items, catalog_lookup(store_id))

    # Omitted totals are derived from the items; supplied ones must agree.
    total = items_total(normalized) if total_amount is None else validate_amount("totalAmount", total_amount)
    paid = validate_amount("paidAmount", paid_amount if paid_amount is not None else 0)
    due = max(total - paid, 0.0) if due_amount is None else validate_amount("dueAmount", due_amount)
    status = derive_status(paid, total) if status is None else validate_status(status)

    validate_totals(normalized, total, paid, due)

    record = spec.model(
        store_id=store_id,
        total_amount=total,
        paid_amount=paid,
        due_amount=due,
        status=status,
        created_by_user_id=actor_id,
    )
    setattr(record, spec.counterparty_column, counterparty.id)
    record.lines = _build_lines(spec, normalized)

    db.session.add(record)
    db.session.commit()

    current_app.logger.info(
        "%s %s created store=%s total=%.2f status=%s",
        spec.label, record.id, store_id, total, status,
    )
    return record


def create_sale(
    store_id: int,
    customer_id,
    items,
    total_amount=None,
    paid_amount=None,
    due_amount=None,
    status=None,
    actor_id: int | None = None,
) -> Sale:
    return _create_record(
        RECORD_KINDS[KIND_SALE],
        store_id=store_id,
        counterparty_id=customer_id,
        items=items,
        total_amount=total_amount,
        paid_amount=paid_amount,
        due_amount=due_amount,
        status=status,
        actor_id=actor_id,
    )


def create_buying(
    store_id: int,
    supplier_id,
    items,
    total_amount=None,
    paid_amount=None,
    due_amount=None,
    status=None,
    actor_id: int | None = None,
) -> Buying:
    return _create_record(
        RECORD_KINDS[KIND_BUYING],
        store_id=store_id,
        counterparty_id=supplier_id,
        items=items,
        total_amount=total_amount,
        paid_amount=paid_amount,
        due_amount=due_amount,
        status=status,
        actor_id=actor_id,
    )


def create_from_payload(store_id: int, kind: str, payload: dict, actor_id: int | None = None):
    """Route helper: map a JSON body with wire names onto create_sale / create_buying."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON body.")
    spec = get_kind(kind)
    counterparty_key = spec.model.counterparty_key
    return _create_record(
        spec,
        store_id=store_id,
        counterparty_id=payload.get(counterparty_key),
        items=payload.get("products", payload.get("items")),
        total_amount=payload.get("totalAmount"),
        paid_amount=payload.get("paidAmount"),
        due_amount=payload.get("dueAmount"),
        status=payload.get("status"),
        actor_id=actor_id,
    )


# =============================================================================
# READ
# =============================================================================

def get_record(store_id: int, kind: str, record_id):
    spec = get_kind(kind)
    return get_scoped_or_404(spec.model, record_id, store_id, spec.label)


def list_records(store_id: int, kind: str, counterparty_id=None) -> list:
    """Records for the store, newest first, optionally for one counterparty."""
    spec = get_kind(kind)
    query = scoped_query(spec.model, store_id)

    if counterparty_id not in (None, ""):
        counterparty = get_scoped(spec.counterparty_model, counterparty_id, store_id)
        if counterparty is None:
            raise NotFoundError(f"{spec.counterparty_label} not found.", field=spec.model.counterparty_key)
        query = query.filter(getattr(spec.model, spec.counterparty_column) == counterparty.id)

    return query.order_by(spec.model.created_at.desc(), spec.model.id.desc()).all()


# =============================================================================
# UPDATE
# =============================================================================

def update_record(store_id: int, kind: str, record_id, patch: dict):
    """
    Apply a whitelisted patch and re-validate the merged record.

    Items (``items`` or ``products``) replace the whole item set, are
    normalized strictly, and totalAmount is recomputed from them. Without
    items the patched amounts are checked against the stored items.
    """
    if not isinstance(patch, dict):
        raise ValidationError("Invalid JSON body.")

    for key in patch:
        if key not in UPDATABLE_FIELDS:
            raise ValidationError(f"Field not allowed: {key}", field=key)

    spec = get_kind(kind)
    record = get_scoped_or_404(spec.model, record_id, store_id, spec.label)

    raw_items = patch.get("items", patch.get("products"))
    has_items = "items" in patch or "products" in patch

    if has_items:
        items = normalize_items(raw_items, catalog_lookup(store_id), strict=True)
        total = items_total(items)
    else:
        items = _line_dicts(record)
        total = (
            validate_amount("totalAmount", patch["totalAmount"])
            if "totalAmount" in patch else record.total_amount
        )

    paid = validate_amount("paidAmount", patch["paidAmount"]) if "paidAmount" in patch else record.paid_amount
    due = validate_amount("dueAmount", patch["dueAmount"]) if "dueAmount" in patch else record.due_amount
    status = validate_status(patch["status"]) if "status" in patch else record.status

    validate_totals(items, total, paid, due)

    if has_items:
        record.lines = _build_lines(spec, items)
    record.total_amount = total
    record.paid_amount = paid
    record.due_amount = due
    record.status = status

    try:
        db.session.commit()
    except StaleDataError:
        db.session.rollback()
        raise ConflictError(f"{spec.label} was modified by another request; reload and retry.")

    return record


def record_payment(store_id: int, kind: str, record_id, amount, actor_id: int | None = None):
    """
    Add a payment to a record and recompute due and status.

    Not idempotent: the same amount submitted twice is counted twice.
    A version conflict re-reads the record and applies the payment again.
    """
    if not is_number(amount) or amount <= 0:
        raise ValidationError("amount must be a positive number", field="amount")
    amount = float(amount)

    spec = get_kind(kind)

    def _apply():
        record = get_scoped_or_404(spec.model, record_id, store_id, spec.label)
        paid = record.paid_amount + amount
        record.paid_amount = paid
        record.due_amount = max(record.total_amount - paid, 0.0)
        record.status = derive_status(paid, record.total_amount)
        db.session.commit()
        return record

    record = run_with_retry(_apply)
    current_app.logger.info(
        "%s %s payment store=%s amount=%.2f by=%s status=%s",
        spec.label, record.id, store_id, amount, actor_id, record.status,
    )
    return record


# =============================================================================
# DELETE
# =============================================================================

def delete_record(store_id: int, kind: str, record_id) -> None:
    spec = get_kind(kind)
    record = get_scoped_or_404(spec.model, record_id, store_id, spec.label)
    db.session.delete(record)
    db.session.commit()
