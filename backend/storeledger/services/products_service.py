# Overview: Service-layer operations for products; encapsulates business logic and database work.

"""
Products Service

TENANCY: All product operations are store-scoped. A product from another
store is reported as not found.

Products are the catalog ledger line items snapshot from; see
validation.normalize_item and catalog_lookup() below.
"""

from __future__ import annotations

from ..errors import ValidationError
from ..extensions import db
from ..models import PRODUCT_CATEGORIES, Product
from ..validation import ModelValidationPolicy, enforce_rules_product, validate_payload
from .tenant_service import get_scoped, get_scoped_or_404, scoped_query


PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={
        "name", "category", "unit", "price",
        "stock_quantity", "min_stock_level", "description",
    },
    required_on_create={"name", "category", "unit", "price", "stock_quantity", "min_stock_level"},
    aliases={
        "stockQuantity": "stock_quantity",
        "minStockLevel": "min_stock_level",
    },
)

CATEGORY_ALL = "All"
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _normalize_category(patch: dict) -> None:
    if "category" not in patch:
        return
    category = patch["category"].lower()
    if category not in PRODUCT_CATEGORIES:
        raise ValidationError(
            f"category must be one of: {', '.join(PRODUCT_CATEGORIES)}",
            field="category",
        )
    patch["category"] = category


def _validated_patch(payload: dict, *, partial: bool) -> dict:
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=partial)
    enforce_rules_product(patch)
    _normalize_category(patch)
    return patch


def create_product(store_id: int, payload: dict) -> Product:
    patch = _validated_patch(payload, partial=False)
    product = Product(store_id=store_id, **patch)
    db.session.add(product)
    db.session.commit()
    return product


def update_product(store_id: int, product_id, payload: dict) -> Product:
    product = get_scoped_or_404(Product, product_id, store_id, "Product")
    patch = _validated_patch(payload, partial=True)
    for key, value in patch.items():
        setattr(product, key, value)
    db.session.commit()
    return product


def get_product(store_id: int, product_id) -> Product:
    return get_scoped_or_404(Product, product_id, store_id, "Product")


def delete_product(store_id: int, product_id) -> None:
    """Existing ledger line items keep their snapshot of the deleted product."""
    product = get_scoped_or_404(Product, product_id, store_id, "Product")
    db.session.delete(product)
    db.session.commit()


def _float_arg(filters: dict, key: str) -> float | None:
    raw = filters.get(key)
    if raw in (None, ""):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number", field=key)


def _int_arg(filters: dict, key: str, default: int) -> int:
    raw = filters.get(key)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be an integer", field=key)


def list_products(store_id: int, filters: dict | None = None) -> dict:
    """
    Filtered, paginated product listing, newest first.

    Filters (all optional): name (case-insensitive substring), category
    ("All" means no filter), minPrice, maxPrice, minStock, maxStock,
    page (1-indexed), limit (default 20, max 100).
    """
    filters = filters or {}
    query = scoped_query(Product, store_id)

    name = (filters.get("name") or "").strip()
    if name:
        query = query.filter(Product.name.ilike(f"%{name}%"))

    category = (filters.get("category") or "").strip()
    if category and category != CATEGORY_ALL:
        query = query.filter(Product.category == category.lower())

    min_price = _float_arg(filters, "minPrice")
    if min_price is not None:
        query = query.filter(Product.price >= min_price)
    max_price = _float_arg(filters, "maxPrice")
    if max_price is not None:
        query = query.filter(Product.price <= max_price)

    min_stock = _float_arg(filters, "minStock")
    if min_stock is not None:
        query = query.filter(Product.stock_quantity >= min_stock)
    max_stock = _float_arg(filters, "maxStock")
    if max_stock is not None:
        query = query.filter(Product.stock_quantity <= max_stock)

    page = max(_int_arg(filters, "page", 1), 1)
    limit = min(max(_int_arg(filters, "limit", DEFAULT_PAGE_SIZE), 1), MAX_PAGE_SIZE)

    total = query.count()
    products = (
        query.order_by(Product.created_at.desc(), Product.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return {
        "products": [p.to_dict() for p in products],
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": (total + limit - 1) // limit,
    }


def low_stock_products(store_id: int) -> list[Product]:
    """Products whose stock is at or under their minimum level."""
    return (
        scoped_query(Product, store_id)
        .filter(Product.stock_quantity <= Product.min_stock_level)
        .order_by(Product.stock_quantity.asc(), Product.name.asc())
        .all()
    )


def catalog_lookup(store_id: int):
    """Product resolver for line item normalization, limited to one store."""
    def lookup(product_id):
        return get_scoped(Product, product_id, store_id)
    return lookup
