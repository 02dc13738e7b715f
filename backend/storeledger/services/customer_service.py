# Overview: Service-layer operations for customers; encapsulates business logic and database work.

"""
Customer Service

TENANCY: Customers are store-scoped. Phone numbers are unique across the
whole system, so a duplicate phone in another store is still a conflict.

DELETE: Removing a customer removes every sale recorded against them.
Both deletes run in one transaction; on failure nothing is removed.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import ConflictError, InternalError
from ..extensions import db
from ..models import Customer, Sale, SaleLine
from ..validation import ModelValidationPolicy, validate_payload
from . import metrics_service
from .tenant_service import get_scoped_or_404, scoped_query


CUSTOMER_POLICY = ModelValidationPolicy(
    writable_fields={"name", "phone", "address"},
    required_on_create={"name", "phone", "address"},
)


def _commit_unique_phone() -> None:
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Phone number already registered", field="phone")


def create_customer(store_id: int, payload: dict) -> Customer:
    patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=False)
    customer = Customer(store_id=store_id, **patch)
    db.session.add(customer)
    _commit_unique_phone()
    return customer


def update_customer(store_id: int, customer_id, payload: dict) -> Customer:
    customer = get_scoped_or_404(Customer, customer_id, store_id, "Customer")
    patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=True)
    for key, value in patch.items():
        setattr(customer, key, value)
    _commit_unique_phone()
    return customer


def serialize_with_totals(store_id: int, customers: list[Customer]) -> list[dict]:
    summaries = metrics_service.customer_summaries(store_id, [c.id for c in customers])
    return [{**c.to_dict(), **summaries[c.id]} for c in customers]


def list_customers(store_id: int, search: str | None = None) -> list[dict]:
    """Customers with sales totals; search matches name or phone, case-insensitive."""
    query = scoped_query(Customer, store_id)
    search = (search or "").strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(db.or_(Customer.name.ilike(pattern), Customer.phone.ilike(pattern)))
    customers = query.order_by(Customer.name.asc(), Customer.id.asc()).all()
    return serialize_with_totals(store_id, customers)


def get_customer(store_id: int, customer_id) -> dict:
    customer = get_scoped_or_404(Customer, customer_id, store_id, "Customer")
    return serialize_with_totals(store_id, [customer])[0]


def delete_customer(store_id: int, customer_id) -> int:
    """
    Delete a customer and all of their sales.

    Returns the number of sales deleted. Raises InternalError if the
    database rejects any part of the delete; the rollback leaves both the
    customer and the sales in place.
    """
    customer = get_scoped_or_404(Customer, customer_id, store_id, "Customer")

    try:
        sale_ids = [
            row.id for row in db.session.query(Sale.id).filter(
                Sale.store_id == store_id,
                Sale.customer_id == customer.id,
            )
        ]
        if sale_ids:
            db.session.query(SaleLine).filter(SaleLine.sale_id.in_(sale_ids)).delete(synchronize_session=False)
            db.session.query(Sale).filter(Sale.id.in_(sale_ids)).delete(synchronize_session=False)
        db.session.delete(customer)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Failed to delete customer %s", customer_id)
        raise InternalError("Failed to delete customer")

    return len(sale_ids)
