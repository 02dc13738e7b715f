# Overview: Read-side aggregation for dashboard KPIs, dues, aging and trend series.

"""
Metrics Service

All functions are read-only and total: an empty result set yields 0, never
None or an error. Every query filters by store_id.

Windows come from date_windows and are closed intervals, so both bounds are
inclusive. Growth percentages are returned unrounded; kpis() rounds them to
2 decimals for the response.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta

from sqlalchemy import func

from .. import date_windows
from ..date_windows import Bucket, Window
from ..extensions import db
from ..models import Buying, Customer, Sale, Supplier
from ..validation import STATUS_PAID, STATUS_PARTIAL
from .ledger_service import KIND_BUYING, KIND_SALE, get_kind
from .tenant_service import scoped_query


OVERDUE_DAYS = 30

LABEL_CUSTOMER_DUES = "Customer Dues"
LABEL_SUPPLIER_DUES = "Supplier Dues"
LABEL_AVAILABLE_CASH = "Available Cash"


def _in_window(query, column, window: Window | None):
    if window is None:
        return query
    return query.filter(column >= window.start, column < window.stop)


def _sum(query_column, model, store_id: int, window: Window | None, *filters) -> float:
    query = db.session.query(func.coalesce(func.sum(query_column), 0.0)).filter(
        model.store_id == store_id, *filters
    )
    query = _in_window(query, model.created_at, window)
    return float(query.scalar() or 0.0)


# =============================================================================
# PRIMITIVES
# =============================================================================

def sales_total(store_id: int, window: Window) -> dict:
    """Sum of totalAmount and count of sales created in the window."""
    query = db.session.query(
        func.coalesce(func.sum(Sale.total_amount), 0.0),
        func.count(Sale.id),
    ).filter(Sale.store_id == store_id)
    total, count = _in_window(query, Sale.created_at, window).one()
    return {"sum": float(total or 0.0), "count": int(count or 0)}


def dues_total(store_id: int, window: Window | None, kind: str, status: str | None = None) -> float:
    """
    Sum of dueAmount for sales or buyings created in the window.

    The dashboard dues chart and the aging view pass status="partial";
    the KPI cards sum every due in the window.
    """
    model = get_kind(kind).model
    filters = [model.status == status] if status is not None else []
    return _sum(model.due_amount, model, store_id, window, *filters)


def growth_percent(current: float, previous: float) -> float:
    if previous > 0:
        return (current - previous) / previous * 100
    if current > 0:
        return 100.0
    return 0.0


def customers_created(store_id: int, window: Window) -> int:
    query = db.session.query(func.count(Customer.id)).filter(Customer.store_id == store_id)
    return int(_in_window(query, Customer.created_at, window).scalar() or 0)


def aging_buckets(store_id: int, kind: str, now: datetime) -> dict:
    """Outstanding (partial) dues: all time, 30+ days old, this ISO week, previous ISO week."""
    # first instant no longer overdue: midnight after the day OVERDUE_DAYS ago
    overdue_stop = date_windows.end_of_day(now - timedelta(days=OVERDUE_DAYS)) + date_windows.ONE_MS
    model = get_kind(kind).model
    partial = model.status == STATUS_PARTIAL

    return {
        "total": dues_total(store_id, None, kind, STATUS_PARTIAL),
        "overdue30": _sum(model.due_amount, model, store_id, None, partial, model.created_at < overdue_stop),
        "dueThisWeek": dues_total(store_id, date_windows.week_range(now), kind, STATUS_PARTIAL),
        "duePreviousWeek": dues_total(store_id, date_windows.previous_week_range(now), kind, STATUS_PARTIAL),
    }


def cash_flow_breakdown(store_id: int, window: Window) -> list[dict]:
    available_cash = _sum(Sale.total_amount, Sale, store_id, window, Sale.status == STATUS_PAID)
    return [
        {"label": LABEL_CUSTOMER_DUES, "value": dues_total(store_id, window, KIND_SALE, STATUS_PARTIAL)},
        {"label": LABEL_SUPPLIER_DUES, "value": dues_total(store_id, window, KIND_BUYING, STATUS_PARTIAL)},
        {"label": LABEL_AVAILABLE_CASH, "value": available_cash},
    ]


def net_cash_flow(store_id: int, window: Window) -> float:
    """Sales in the window minus customer and supplier dues in the same window."""
    return (
        sales_total(store_id, window)["sum"]
        - dues_total(store_id, window, KIND_SALE)
        - dues_total(store_id, window, KIND_BUYING)
    )


def series_by_bucket(store_id: int, buckets: list[Bucket]) -> list[dict]:
    return [
        {"label": bucket.label, "sum": sales_total(store_id, bucket.window)["sum"]}
        for bucket in buckets
    ]


# =============================================================================
# DASHBOARD VIEWS
# =============================================================================

def kpis(store_id: int, token: str | None, now: datetime) -> dict:
    """
    KPI cards for a filter token (today, last-week, ...).

    totalCustomers / totalSuppliers are all-time counts; every other value
    is restricted to the resolved window. salesGrowth compares sales totals,
    customerGrowth compares customers created, each against the previous window.
    """
    window = date_windows.resolve(token, now)
    previous = date_windows.resolve_previous(token, now)

    current_sales = sales_total(store_id, window)
    previous_sales = sales_total(store_id, previous)
    customer_dues = dues_total(store_id, window, KIND_SALE)
    supplier_dues = dues_total(store_id, window, KIND_BUYING)

    return {
        "totalSales": current_sales["sum"],
        "salesCount": current_sales["count"],
        "totalCustomers": scoped_query(Customer, store_id).count(),
        "totalSuppliers": scoped_query(Supplier, store_id).count(),
        "customerDues": customer_dues,
        "supplierDues": supplier_dues,
        "netCashFlow": current_sales["sum"] - customer_dues - supplier_dues,
        "salesGrowth": round(growth_percent(current_sales["sum"], previous_sales["sum"]), 2),
        "customerGrowth": round(
            growth_percent(customers_created(store_id, window), customers_created(store_id, previous)),
            2,
        ),
    }


def outstanding(store_id: int, now: datetime) -> dict:
    return {
        "customer": aging_buckets(store_id, KIND_SALE, now),
        "supplier": aging_buckets(store_id, KIND_BUYING, now),
    }


def sales_series(store_id: int, token: str | None, now: datetime) -> list[dict]:
    return series_by_bucket(store_id, date_windows.resolve_series(token, now))


# =============================================================================
# COUNTERPARTY SUMMARIES
# =============================================================================

def _summaries(records, key: str, total_name: str) -> dict[int, dict]:
    totals: dict[int, dict] = defaultdict(lambda: {total_name: 0.0, "currentDue": 0.0, "advancePayment": 0.0})
    for record in records:
        entry = totals[getattr(record, key)]
        entry[total_name] += record.total_amount
        entry["currentDue"] += record.due_amount
        entry["advancePayment"] += record.paid_amount
    return totals


def customer_summaries(store_id: int, customer_ids: list[int]) -> dict[int, dict]:
    """customer_id -> {totalSales, currentDue, advancePayment}; missing ids get zeros."""
    if not customer_ids:
        return {}
    sales = scoped_query(Sale, store_id).filter(Sale.customer_id.in_(customer_ids)).all()
    totals = _summaries(sales, "customer_id", "totalSales")
    return {cid: dict(totals[cid]) for cid in customer_ids}


def supplier_summaries(store_id: int, supplier_ids: list[int]) -> dict[int, dict]:
    """supplier_id -> {totalPurchases, currentDue, advancePayment}; missing ids get zeros."""
    if not supplier_ids:
        return {}
    buyings = scoped_query(Buying, store_id).filter(Buying.supplier_id.in_(supplier_ids)).all()
    totals = _summaries(buyings, "supplier_id", "totalPurchases")
    return {sid: dict(totals[sid]) for sid in supplier_ids}
