from __future__ import annotations

from ..extensions import db
from po_api.time_utils import to_utc_z, utcnow

COMPANY_PROFILE_ID = 1


class CompanyProfile(db.Model):
    """
    Company details printed on purchase orders.

    Singleton: the check constraint pins the primary key to 1, so the table
    holds at most one row.
    """
    __tablename__ = "company_profile"
    __table_args__ = (
        db.CheckConstraint(f"id = {COMPANY_PROFILE_ID}", name="company_profile_single_row"),
    )

    id = db.Column(db.Integer, primary_key=True, default=COMPANY_PROFILE_ID, autoincrement=False)

    company_name = db.Column(db.String(255), nullable=False)
    # May hold a data URL, hence Text
    company_logo = db.Column(db.Text, nullable=True)
    address = db.Column(db.Text, nullable=True)
    phone = db.Column(db.String(64), nullable=True)
    email = db.Column(db.String(255), nullable=True)
    gst_number = db.Column(db.String(64), nullable=True)
    bank_name = db.Column(db.String(255), nullable=True)
    bank_account_number = db.Column(db.String(64), nullable=True)
    ifsc_code = db.Column(db.String(32), nullable=True)
    branch_name = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        """camelCase keys, as consumed by the front end."""
        return {
            "companyName": self.company_name,
            "companyLogo": self.company_logo,
            "address": self.address,
            "phone": self.phone,
            "email": self.email,
            "gstNumber": self.gst_number,
            "bankName": self.bank_name,
            "bankAccountNumber": self.bank_account_number,
            "ifscCode": self.ifsc_code,
            "branchName": self.branch_name,
            "updatedAt": to_utc_z(self.updated_at),
        }
