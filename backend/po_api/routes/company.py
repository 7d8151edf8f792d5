# Overview: Flask API routes for the company profile.

from flask import Blueprint, request

from ..decorators import login_required
from ..responses import success
from ..services import company_service


company_bp = Blueprint("company", __name__, url_prefix="/api/company")


@company_bp.get("")
@login_required
def get_company_route():
    """Return the company profile, or data: null if it was never saved."""
    profile = company_service.get_company_profile()
    return success(profile.to_dict() if profile else None)


@company_bp.post("")
@login_required
def save_company_route():
    """
    Create or replace the company profile.

    Request body (camelCase):
    {
        "companyName": "...",       // required
        "companyLogo": "data:...",  // optional
        "address": "...", "phone": "...", "email": "...",
        "gstNumber": "...", "bankName": "...", "bankAccountNumber": "...",
        "ifscCode": "...", "branchName": "..."
    }
    """
    profile = company_service.save_company_profile(request.get_json(silent=True))
    return success(profile.to_dict(), message="Company profile saved successfully")
