"""
Tenant Service: store scoping helpers

WHY: Every customer, supplier, product and ledger row belongs to exactly one
store. Requests are scoped to the store of the authenticated owner, and a row
from another store must look exactly like a missing row.

SECURITY INVARIANTS:
1. Every authenticated request has g.store_id set (see decorators.require_auth)
2. Queries touching store-owned data filter by store_id
3. Cross-store access is reported as NotFound, never as Forbidden

USAGE:
    from storeledger.services.tenant_service import get_scoped_or_404

    customer = get_scoped_or_404(Customer, customer_id, g.store_id, "Customer")
"""

from ..errors import NotFoundError
from ..extensions import db


def scoped_query(model, store_id: int):
    """Base query for a store-owned model."""
    return db.session.query(model).filter(model.store_id == store_id)


def get_scoped(model, record_id, store_id: int):
    """Return the row only if it belongs to store_id, else None."""
    if isinstance(record_id, bool):
        return None
    try:
        record_id = int(record_id)
    except (TypeError, ValueError):
        return None
    return scoped_query(model, store_id).filter(model.id == record_id).first()


def get_scoped_or_404(model, record_id, store_id: int, label: str):
    record = get_scoped(model, record_id, store_id)
    if record is None:
        raise NotFoundError(f"{label} not found")
    return record
