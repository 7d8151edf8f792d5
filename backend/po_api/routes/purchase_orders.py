# Overview: Flask API routes for purchase order operations; parses input and returns JSON responses.

"""
Purchase Order Routes

All routes require a logged-in session (see login_required).
Validation and business rules run here; the service receives a clean patch.
"""

from flask import Blueprint, request

from ..decorators import login_required
from ..models import PurchaseOrder
from ..responses import success
from ..services import purchase_order_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_purchase_order,
)

PURCHASE_ORDER_POLICY = ModelValidationPolicy(
    writable_fields=purchase_order_service.PURCHASE_ORDER_FIELDS,
    required_on_create={"date", "order_number", "party_name"},
    read_only_fields={"id", "created_at", "updated_at"},
)

purchase_orders_bp = Blueprint("purchase_orders", __name__, url_prefix="/api/purchase-orders")


def _validated_patch() -> dict:
    payload = request.get_json(silent=True)
    patch = validate_payload(
        model=PurchaseOrder,
        payload=payload,
        policy=PURCHASE_ORDER_POLICY,
        partial=False,
    )
    enforce_rules_purchase_order(patch)
    return patch


@purchase_orders_bp.get("")
@login_required
def list_purchase_orders_route():
    """
    List purchase orders.

    Query parameters:
    - q: case-insensitive search on order number or party name
    - page: 1-based page number (default: 1)
    - limit: page size (default: 10, max: 100)

    Returns:
        {success, data: PurchaseOrder[], pagination: {page, limit, total, totalPages}}
    """
    result = purchase_order_service.list_purchase_orders(
        search=request.args.get("q", ""),
        page=request.args.get("page", 1, type=int),
        limit=request.args.get("limit", purchase_order_service.DEFAULT_PAGE_SIZE, type=int),
    )
    return success(result["items"], pagination=result["pagination"])


@purchase_orders_bp.get("/<po_id>")
@login_required
def get_purchase_order_route(po_id: str):
    po = purchase_order_service.get_purchase_order(po_id)
    return success(po.to_dict())


@purchase_orders_bp.post("")
@login_required
def create_purchase_order_route():
    """
    Create a purchase order.

    Request body:
    {
        "date": "2024-03-01",         // required, YYYY-MM-DD
        "order_number": "PO-1001",    // required, unique
        "party_name": "Acme Traders", // required
        "broker": "...",              // optional
        "mill": "...",                // optional
        "weight": 12.5,               // optional, > 0
        "bags": 40,                   // optional, integer > 0
        "product": "...",             // optional
        "rate": 2150,                 // optional, > 0
        "terms_and_conditions": "..." // optional
    }
    """
    patch = _validated_patch()
    po = purchase_order_service.create_purchase_order(patch=patch)
    return success(po.to_dict(), message="Purchase order created", status=201)


@purchase_orders_bp.put("/<po_id>")
@login_required
def update_purchase_order_route(po_id: str):
    """Replace all business fields; omitted optional fields are cleared."""
    patch = _validated_patch()
    po = purchase_order_service.update_purchase_order(po_id, patch=patch)
    return success(po.to_dict(), message="Purchase order updated")


@purchase_orders_bp.delete("/<po_id>")
@login_required
def delete_purchase_order_route(po_id: str):
    purchase_order_service.delete_purchase_order(po_id)
    return success(None, message="Purchase order deleted successfully")
