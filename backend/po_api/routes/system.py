# backend/po_api/routes/system.py
"""
System health and banner endpoints.
"""

from flask import Blueprint, current_app

from ..responses import failure, success
from ..services.schema_service import check_connection
from po_api.time_utils import to_utc_z, utcnow

API_NAME = "Purchase Order API"
API_VERSION = "1.0.0"

system_bp = Blueprint("system", __name__)


@system_bp.get("/api/health")
def health_route():
    """
    Liveness plus a database round trip.

    Returns 503 with the same body shape when the database is unreachable.
    """
    database = check_connection()
    body = {
        "timestamp": to_utc_z(utcnow()),
        "environment": current_app.config.get("APP_ENV", "development"),
        "database": database,
    }
    if database["status"] != "healthy":
        return failure("Database unavailable", 503, **body)
    return success(None, message="Server is running", **body)


@system_bp.get("/")
def root_route():
    return success({
        "name": API_NAME,
        "version": API_VERSION,
        "endpoints": {
            "health": "/api/health",
            "auth": "/api/auth",
            "purchaseOrders": "/api/purchase-orders",
            "company": "/api/company",
        },
    }, message=API_NAME)
