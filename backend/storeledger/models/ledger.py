from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


class LineItemMixin:
    """Columns shared by sale_lines and buying_lines (snapshot of a product at entry time)."""

    id = db.Column(db.Integer, primary_key=True)
    position = db.Column(db.Integer, nullable=False)

    name = db.Column(db.String(255), nullable=False)
    price = db.Column(db.Float, nullable=False)
    quantity = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(32), nullable=False)
    total = db.Column(db.Float, nullable=False)
    custom = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "unit": self.unit,
            "total": self.total,
            "custom": self.custom,
        }


class LedgerRecordMixin:
    """
    Amount columns and serialization shared by Sale and Buying.

    INVARIANTS (enforced by ledger_service, not the database):
    - total_amount == sum(line.total)          (within 0.01)
    - paid_amount + due_amount == total_amount (within 0.01)
    - status in {"paid", "partial", "due"}

    Subclasses provide a counterparty_id property over their own column.
    """

    # wire name of the counterparty column ("customerId" / "supplierId")
    counterparty_key: str = ""

    id = db.Column(db.Integer, primary_key=True)

    total_amount = db.Column(db.Float, nullable=False)
    paid_amount = db.Column(db.Float, nullable=False)
    due_amount = db.Column(db.Float, nullable=False)
    status = db.Column(db.String(16), nullable=False, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    created_by_user_id = db.Column(db.Integer, nullable=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "storeId": self.store_id,
            self.counterparty_key: self.counterparty_id,
            "products": [line.to_dict() for line in self.lines],
            "totalAmount": self.total_amount,
            "paidAmount": self.paid_amount,
            "dueAmount": self.due_amount,
            "status": self.status,
            "createdBy": self.created_by_user_id,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
            "version": self.version_id,
        }


class Sale(LedgerRecordMixin, db.Model):
    """Goods sold to a customer, possibly on credit (due_amount > 0)."""
    __tablename__ = "sales"
    __table_args__ = (
        db.Index("ix_sales_store_created", "store_id", "created_at"),
        db.Index("ix_sales_store_customer", "store_id", "customer_id"),
        {"sqlite_autoincrement": True},
    )

    counterparty_key = "customerId"

    store_id = db.Column(db.Integer, db.ForeignKey("stores.id"), nullable=False, index=True)
    customer_id = db.Column(db.Integer, db.ForeignKey("customers.id"), nullable=False, index=True)

    lines = db.relationship(
        "SaleLine",
        order_by="SaleLine.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    __mapper_args__ = {"version_id_col": LedgerRecordMixin.version_id}

    @property
    def counterparty_id(self) -> int:
        return self.customer_id


class SaleLine(LineItemMixin, db.Model):
    __tablename__ = "sale_lines"
    __table_args__ = {"sqlite_autoincrement": True}

    sale_id = db.Column(db.Integer, db.ForeignKey("sales.id"), nullable=False, index=True)


class Buying(LedgerRecordMixin, db.Model):
    """
    Goods bought from a supplier.

    supplier_id carries no foreign key: supplier deletion leaves buyings in place.
    """
    __tablename__ = "buyings"
    __table_args__ = (
        db.Index("ix_buyings_store_created", "store_id", "created_at"),
        db.Index("ix_buyings_store_supplier", "store_id", "supplier_id"),
        {"sqlite_autoincrement": True},
    )

    counterparty_key = "supplierId"

    store_id = db.Column(db.Integer, db.ForeignKey("stores.id"), nullable=False, index=True)
    supplier_id = db.Column(db.Integer, nullable=False, index=True)

    lines = db.relationship(
        "BuyingLine",
        order_by="BuyingLine.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    __mapper_args__ = {"version_id_col": LedgerRecordMixin.version_id}

    @property
    def counterparty_id(self) -> int:
        return self.supplier_id


class BuyingLine(LineItemMixin, db.Model):
    __tablename__ = "buying_lines"
    __table_args__ = {"sqlite_autoincrement": True}

    buying_id = db.Column(db.Integer, db.ForeignKey("buyings.id"), nullable=False, index=True)
