# Overview: Service-layer operations for suppliers; encapsulates business logic and database work.

"""
Supplier Service

TENANCY: Suppliers are store-scoped; phone numbers are unique system-wide.

DELETE: Removing a supplier leaves its buying records in place with their
supplier_id unchanged. Unlike customers, nothing cascades.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from ..errors import ConflictError
from ..extensions import db
from ..models import Buying, Supplier
from ..validation import ModelValidationPolicy, validate_payload
from . import metrics_service
from .tenant_service import get_scoped_or_404, scoped_query


SUPPLIER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "phone", "address"},
    required_on_create={"name", "phone", "address"},
)


def _commit_unique_phone() -> None:
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Phone number already registered", field="phone")


def create_supplier(store_id: int, payload: dict) -> Supplier:
    patch = validate_payload(model=Supplier, payload=payload, policy=SUPPLIER_POLICY, partial=False)
    supplier = Supplier(store_id=store_id, **patch)
    db.session.add(supplier)
    _commit_unique_phone()
    return supplier


def update_supplier(store_id: int, supplier_id, payload: dict) -> Supplier:
    supplier = get_scoped_or_404(Supplier, supplier_id, store_id, "Supplier")
    patch = validate_payload(model=Supplier, payload=payload, policy=SUPPLIER_POLICY, partial=True)
    for key, value in patch.items():
        setattr(supplier, key, value)
    _commit_unique_phone()
    return supplier


def _with_buyings(store_id: int, suppliers: list[Supplier]) -> list[dict]:
    """Supplier dicts with purchase totals and their buying records, newest first."""
    ids = [s.id for s in suppliers]
    summaries = metrics_service.supplier_summaries(store_id, ids)

    buyings_by_supplier: dict[int, list[dict]] = {sid: [] for sid in ids}
    if ids:
        buyings = (
            scoped_query(Buying, store_id)
            .filter(Buying.supplier_id.in_(ids))
            .order_by(Buying.created_at.desc(), Buying.id.desc())
            .all()
        )
        for buying in buyings:
            buyings_by_supplier[buying.supplier_id].append(buying.to_dict())

    return [
        {**s.to_dict(), **summaries[s.id], "buyings": buyings_by_supplier[s.id]}
        for s in suppliers
    ]


def list_suppliers(store_id: int, search: str | None = None) -> list[dict]:
    query = scoped_query(Supplier, store_id)
    search = (search or "").strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(db.or_(Supplier.name.ilike(pattern), Supplier.phone.ilike(pattern)))
    suppliers = query.order_by(Supplier.name.asc(), Supplier.id.asc()).all()
    return _with_buyings(store_id, suppliers)


def get_supplier(store_id: int, supplier_id) -> dict:
    supplier = get_scoped_or_404(Supplier, supplier_id, store_id, "Supplier")
    return _with_buyings(store_id, [supplier])[0]


def delete_supplier(store_id: int, supplier_id) -> None:
    supplier = get_scoped_or_404(Supplier, supplier_id, store_id, "Supplier")
    db.session.delete(supplier)
    db.session.commit()
