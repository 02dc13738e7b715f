from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow


class Store(db.Model):
    """
    Tenant root: a single shop owned by exactly one user.

    TENANCY: Every customer, supplier, product, sale and buying row carries
    store_id, and every query against them filters by it.
    """
    __tablename__ = "stores"
    __table_args__ = (
        db.UniqueConstraint("user_id", name="uq_stores_user"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    gst_number = db.Column(db.String(32), nullable=True)

    # Contact
    country_code = db.Column(db.String(8), nullable=False)
    phone = db.Column(db.String(32), nullable=False)

    # Address
    village_or_town = db.Column(db.String(120), nullable=False)
    post = db.Column(db.String(120), nullable=False)
    police_station = db.Column(db.String(120), nullable=False)
    district = db.Column(db.String(120), nullable=False)
    state = db.Column(db.String(120), nullable=False)
    pincode = db.Column(db.String(16), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    owner = db.relationship("User", backref=db.backref("store", uselist=False))

    def __repr__(self) -> str:
        return f"<Store id={self.id} name={self.name!r} user_id={self.user_id}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "gstNumber": self.gst_number,
            "contact": {"countryCode": self.country_code, "phone": self.phone},
            "address": {
                "villageOrTown": self.village_or_town,
                "post": self.post,
                "police": self.police_station,
                "district": self.district,
                "state": self.state,
                "pincode": self.pincode,
            },
            "createdAt": to_utc_z(self.created_at),
        }
