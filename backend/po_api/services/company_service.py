# Overview: Service-layer operations for the company profile singleton.

"""
Company Profile Service

The profile is a single row pinned to id 1. Saving replaces every field:
keys missing from the payload are cleared.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import CompanyProfile
from ..models.company import COMPANY_PROFILE_ID
from ..validation import ModelValidationPolicy, ValidationError, validate_payload

# Wire (camelCase) -> column
COMPANY_FIELD_MAP = {
    "companyName": "company_name",
    "companyLogo": "company_logo",
    "address": "address",
    "phone": "phone",
    "email": "email",
    "gstNumber": "gst_number",
    "bankName": "bank_name",
    "bankAccountNumber": "bank_account_number",
    "ifscCode": "ifsc_code",
    "branchName": "branch_name",
}

COMPANY_POLICY = ModelValidationPolicy(
    writable_fields=set(COMPANY_FIELD_MAP.values()),
    required_on_create={"company_name"},
)

READ_ONLY_KEYS = {"id", "updatedAt", "createdAt"}

WIRE_NAMES = {column: key for key, column in COMPANY_FIELD_MAP.items()}


def to_column_payload(payload: dict) -> dict:
    """Translate camelCase keys; unknown keys are rejected."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    name = payload.get("companyName")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Company name is required", "companyName")

    translated = {}
    for key, value in payload.items():
        if key in READ_ONLY_KEYS:
            continue
        if key not in COMPANY_FIELD_MAP:
            raise ValidationError(f"Field not allowed: {key}", key)
        translated[COMPANY_FIELD_MAP[key]] = value
    return translated


def get_company_profile() -> CompanyProfile | None:
    return db.session.get(CompanyProfile, COMPANY_PROFILE_ID)


def save_company_profile(payload: dict) -> CompanyProfile:
    """
    Upsert the singleton profile from a camelCase payload.

    Raises:
        ValidationError: missing company name or malformed fields
    """
    try:
        patch = validate_payload(
            model=CompanyProfile,
            payload=to_column_payload(payload),
            policy=COMPANY_POLICY,
            partial=False,
        )
    except ValidationError as e:
        # Report the camelCase key the client actually sent
        if e.field in WIRE_NAMES:
            raise ValidationError(str(e).replace(e.field, WIRE_NAMES[e.field], 1), WIRE_NAMES[e.field]) from e
        raise

    profile = get_company_profile()
    if profile is None:
        profile = CompanyProfile(id=COMPANY_PROFILE_ID)
        _apply(profile, patch)
        db.session.add(profile)
        try:
            db.session.commit()
            current_app.logger.info("Company profile created")
            return profile
        except IntegrityError:
            # A concurrent save inserted the row first; fall through to update it
            db.session.rollback()
            profile = get_company_profile()
            if profile is None:
                raise

    _apply(profile, patch)
    db.session.commit()
    current_app.logger.info("Company profile updated")
    return profile


def _apply(profile: CompanyProfile, patch: dict) -> None:
    for column, value in patch.items():
        setattr(profile, column, value)
