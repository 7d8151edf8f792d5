# Overview: Service-layer operations for purchase orders; encapsulates business logic and database work.

"""
Purchase Order Service

Routes hand in payloads that have already been through validate_payload and
enforce_rules_purchase_order, so every function here receives a clean patch.

order_number uniqueness is left to the database: a duplicate surfaces as an
IntegrityError on commit, which is rolled back and reported as ConflictError.
"""
from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from ..errors import NotFoundError
from ..extensions import db
from ..models import PurchaseOrder
from ..validation import ConflictError

PURCHASE_ORDER_FIELDS = {
    "date", "order_number", "party_name", "broker", "mill",
    "weight", "bags", "product", "rate", "terms_and_conditions",
}

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# OFFSET is bound as a 32-bit integer on some drivers
MAX_OFFSET = 2**31 - 1


class PurchaseOrderNotFoundError(NotFoundError):
    """Raised when a purchase order id does not exist."""

    def __init__(self, po_id: str):
        super().__init__("Purchase order not found")
        self.po_id = po_id


def apply_purchase_order_patch(po: PurchaseOrder, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PURCHASE_ORDER_FIELDS:
            continue
        setattr(po, k, v)


def _commit_or_conflict() -> None:
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Order number already exists")


def list_purchase_orders(
    *,
    search: str | None = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> dict:
    """
    Page through purchase orders, newest first.

    search is a case-insensitive substring match on order_number or
    party_name; LIKE wildcards in it are matched literally.

    Returns {"items": [...], "pagination": {page, limit, total, totalPages}}.
    """
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    page = min(max(page, 1), MAX_OFFSET // limit + 1)

    query = db.session.query(PurchaseOrder)

    search = (search or "").strip()
    if search:
        query = query.filter(
            or_(
                PurchaseOrder.order_number.icontains(search, autoescape=True),
                PurchaseOrder.party_name.icontains(search, autoescape=True),
            )
        )

    total = query.count()
    total_pages = (total + limit - 1) // limit

    orders = (
        query.order_by(PurchaseOrder.date.desc(), PurchaseOrder.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return {
        "items": [po.to_dict() for po in orders],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": total_pages,
        },
    }


def get_purchase_order(po_id: str) -> PurchaseOrder:
    po = db.session.get(PurchaseOrder, po_id)
    if po is None:
        raise PurchaseOrderNotFoundError(po_id)
    return po


def create_purchase_order(*, patch: dict) -> PurchaseOrder:
    """
    Insert a purchase order from a validated patch.

    Raises:
        ConflictError: If order_number is already used
    """
    po = PurchaseOrder()
    apply_purchase_order_patch(po, patch)
    db.session.add(po)
    _commit_or_conflict()
    return po


def update_purchase_order(po_id: str, *, patch: dict) -> PurchaseOrder:
    """
    Replace the business fields of an existing purchase order.

    Raises:
        PurchaseOrderNotFoundError: If po_id does not exist (nothing is written)
        ConflictError: If the new order_number belongs to another order
    """
    po = get_purchase_order(po_id)
    apply_purchase_order_patch(po, patch)
    _commit_or_conflict()
    return po


def delete_purchase_order(po_id: str) -> None:
    po = get_purchase_order(po_id)
    db.session.delete(po)
    db.session.commit()
