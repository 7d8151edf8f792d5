# Overview: Column-driven payload validation shared by the purchase order and company routes.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from sqlalchemy import Boolean, Date, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeMeta

from po_api.time_utils import parse_iso_date


# Largest weight/rate that fits the Numeric(14, 3) and Numeric(14, 2) columns
MAX_AMOUNT = Decimal("99999999999")
MAX_BAGS = 2_147_483_647


class ValidationError(ValueError):
    """Bad client input; rendered as 400 with per-field details."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    def details(self) -> list[dict]:
        return [{"field": self.field, "message": str(self)}] if self.field else []


class ConflictError(ValueError):
    """409-level uniqueness conflict (e.g., duplicate order number)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required for full (non-partial) payloads
    - read_only_fields: server-managed keys that clients may echo back; dropped silently
    """
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)
    read_only_fields: set[str] = field(default_factory=set)


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers: no floats, no "1e3", no "2.0"
    if isinstance(coltype, Integer):
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{col.key} must be an integer", col.key)
            if 'e' in stripped.lower():
                raise ValidationError(f"{col.key} must be a plain integer (scientific notation not allowed)", col.key)
            if '.' in stripped:
                raise ValidationError(f"{col.key} must be an integer (no decimals)", col.key)
            try:
                return int(stripped)
            except ValueError:
                raise ValidationError(f"{col.key} must be an integer", col.key)
        if isinstance(value, float):
            raise ValidationError(f"{col.key} must be an integer, not a decimal", col.key)
        raise ValidationError(f"{col.key} must be an integer", col.key)

    # Decimals (weight, rate): JSON numbers or numeric strings
    if isinstance(coltype, Numeric):
        if isinstance(value, bool):
            raise ValidationError(f"{col.key} must be a number", col.key)
        if isinstance(value, (int, float, Decimal, str)):
            try:
                number = Decimal(str(value).strip())
            except InvalidOperation:
                raise ValidationError(f"{col.key} must be a number", col.key)
            if not number.is_finite():
                raise ValidationError(f"{col.key} must be a finite number", col.key)
            # Round to the column scale so range checks see the stored value
            if coltype.scale is not None:
                try:
                    number = number.quantize(Decimal(1).scaleb(-coltype.scale), rounding=ROUND_HALF_UP)
                except InvalidOperation:
                    raise ValidationError(f"{col.key} is out of range", col.key)
            return number
        raise ValidationError(f"{col.key} must be a number", col.key)

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        # fallback: truthiness
        return bool(value)

    # Calendar dates (accept YYYY-MM-DD)
    if isinstance(coltype, Date):
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                parsed = parse_iso_date(value)
            except ValueError:
                raise ValidationError(f"{col.key} must be an ISO-8601 date (YYYY-MM-DD)", col.key)
            if parsed is None:
                raise ValidationError(f"{col.key} is required", col.key)
            return parsed
        raise ValidationError(f"{col.key} must be an ISO-8601 date (YYYY-MM-DD)", col.key)

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if isinstance(value, (dict, list, bool)):
            raise ValidationError(f"{col.key} must be a string", col.key)
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Check a JSON object against the model's columns and the policy.

    Values are coerced to the column type (Decimal for Numeric, date for
    Date, stripped str for String/Text) and String lengths are enforced.

    partial=False replaces the whole record: required fields must be present
    and writable fields missing from the payload come back as None.
    partial=True only checks the keys that were sent.
    """
    if payload is None:
        raise ValidationError("Invalid JSON payload")
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    payload = {k: v for k, v in payload.items() if k not in policy.read_only_fields}

    if not partial:
        missing = sorted(
            f for f in policy.required_on_create
            if payload.get(f) is None or (isinstance(payload.get(f), str) and not payload[f].strip())
        )
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing[0])

    cols = _columns_by_key(model)

    # Allowlist
    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}", k)
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}", k)

    patch: dict = {}

    for k, raw in payload.items():
        col = cols[k]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null", k)
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        if isinstance(col.type, (String, Text)) and isinstance(val, str) and val == "":
            if not col.nullable:
                raise ValidationError(f"{k} cannot be blank", k)
            # Optional text left empty on a form is stored as NULL
            val = None

        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}", k)

        patch[k] = val

    if not partial:
        for k in policy.writable_fields:
            patch.setdefault(k, None)

    return patch


def enforce_rules_purchase_order(patch: dict) -> None:
    """Weight, rate and bags must be positive and fit their columns when given."""
    for key in ("weight", "rate"):
        if patch.get(key) is not None and patch[key] <= 0:
            raise ValidationError(f"{key.capitalize()} must be positive", key)
        if patch.get(key) is not None and patch[key] > MAX_AMOUNT:
            raise ValidationError(f"{key} cannot exceed {MAX_AMOUNT}", key)

    if patch.get("bags") is not None and patch["bags"] <= 0:
        raise ValidationError("Bags must be a positive integer", "bags")
    if patch.get("bags") is not None and patch["bags"] > MAX_BAGS:
        raise ValidationError(f"bags cannot exceed {MAX_BAGS}", "bags")
