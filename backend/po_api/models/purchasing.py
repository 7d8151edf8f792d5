from __future__ import annotations

from ..extensions import db
from .auth import new_uuid
from po_api.time_utils import to_utc_z, utcnow


def _number(value):
    return float(value) if value is not None else None


class PurchaseOrder(db.Model):
    """
    A purchase order document.

    order_number uniqueness is enforced by the database; the service layer
    turns the resulting IntegrityError into a 409.
    """
    __tablename__ = "purchase_orders"
    __table_args__ = (
        db.Index("idx_po_date", "date"),
        db.Index("idx_po_party_name", "party_name"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)

    date = db.Column(db.Date, nullable=False)
    order_number = db.Column(db.String(100), nullable=False, unique=True, index=True)
    party_name = db.Column(db.String(255), nullable=False)

    broker = db.Column(db.String(255), nullable=True)
    mill = db.Column(db.String(255), nullable=True)
    weight = db.Column(db.Numeric(14, 3), nullable=True)
    bags = db.Column(db.Integer, nullable=True)
    product = db.Column(db.String(255), nullable=True)
    rate = db.Column(db.Numeric(14, 2), nullable=True)
    terms_and_conditions = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat() if self.date else None,
            "order_number": self.order_number,
            "party_name": self.party_name,
            "broker": self.broker,
            "mill": self.mill,
            "weight": _number(self.weight),
            "bags": self.bags,
            "product": self.product,
            "rate": _number(self.rate),
            "terms_and_conditions": self.terms_and_conditions,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
