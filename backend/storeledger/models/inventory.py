from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


PRODUCT_CATEGORIES = ("cement", "steel", "bricks", "sand & aggregates", "paint", "hardware")


class Product(db.Model):
    """
    Catalog entry. Ledger line items copy name/price/unit from here at entry
    time and never reference the product again.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_store_category", "store_id", "category"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    store_id = db.Column(db.Integer, db.ForeignKey("stores.id"), nullable=False, index=True)

    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(64), nullable=False)
    unit = db.Column(db.String(32), nullable=False)
    price = db.Column(db.Float, nullable=False)
    stock_quantity = db.Column(db.Float, nullable=False, default=0)
    min_stock_level = db.Column(db.Float, nullable=False, default=0)
    description = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    store = db.relationship("Store", backref=db.backref("products", lazy=True))

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.min_stock_level

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "storeId": self.store_id,
            "name": self.name,
            "category": self.category,
            "unit": self.unit,
            "price": self.price,
            "stockQuantity": self.stock_quantity,
            "minStockLevel": self.min_stock_level,
            "description": self.description,
            "isLowStock": self.is_low_stock,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }


class Supplier(db.Model):
    """
    Vendor the store buys from.

    Deleting a supplier does NOT delete its buying records; they keep the
    dangling supplier_id (no FK constraint on buyings.supplier_id for that reason).
    """
    __tablename__ = "suppliers"
    __table_args__ = (
        db.Index("ix_suppliers_store_name", "store_id", "name"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    store_id = db.Column(db.Integer, db.ForeignKey("stores.id"), nullable=False, index=True)

    name = db.Column(db.String(128), nullable=False)
    phone = db.Column(db.String(32), nullable=False, unique=True)
    address = db.Column(db.String(255), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    store = db.relationship("Store", backref=db.backref("suppliers", lazy=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "storeId": self.store_id,
            "name": self.name,
            "phone": self.phone,
            "address": self.address,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
