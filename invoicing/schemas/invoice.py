"""
Invoice Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID
from decimal import Decimal


DEFAULT_VAT_RATE = Decimal("20")


# ===================== SETTINGS SNAPSHOTS =====================

class BusinessAddress(BaseModel):
    street: str
    city: str
    postal_code: str
    country: str = ""

    class Config:
        frozen = True


class GeneralSettings(BaseModel):
    """Business identity printed on invoices (setting key: general_settings)"""
    business_name: str
    business_address: BusinessAddress
    tax_id: str  # ICE number
    phone: Optional[str] = None
    email: Optional[str] = None
    logo_url: Optional[str] = None

    class Config:
        frozen = True


class InvoiceSettings(BaseModel):
    """Invoice configuration (setting key: invoice_settings)"""
    vat_rate: Decimal = Field(DEFAULT_VAT_RATE, ge=0, le=100, decimal_places=2)  # stored as Numeric(5, 2)
    invoice_footer_notes: Optional[str] = None
    auto_generate: bool = True

    class Config:
        frozen = True

    @classmethod
    def defaults(cls) -> "InvoiceSettings":
        return cls()


# ===================== MEMBERS =====================

class MemberSummary(BaseModel):
    first_name: str
    last_name: str
    email: Optional[str] = None

    class Config:
        from_attributes = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# ===================== INVOICES =====================

class InvoiceCreate(BaseModel):
    payment_id: UUID
    member_id: UUID
    subscription_id: Optional[UUID] = None
    amount: Decimal = Field(..., description="Total amount (TTC)")
    created_by: Optional[str] = None


class InvoiceRead(BaseModel):
    id: UUID
    invoice_number: str
    payment_id: UUID
    member_id: UUID
    subscription_id: Optional[UUID] = None
    issue_date: date
    amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    vat_rate: Decimal
    business_name: Optional[str] = None
    business_address: Optional[BusinessAddress] = None
    business_tax_id: Optional[str] = None
    business_phone: Optional[str] = None
    business_email: Optional[str] = None
    business_logo_url: Optional[str] = None
    footer_notes: Optional[str] = None
    status: str
    pdf_url: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    def business_snapshot(self) -> Optional[GeneralSettings]:
        """Business identity as it was when the invoice was issued"""
        if not self.business_name or self.business_address is None:
            return None
        return GeneralSettings(
            business_name=self.business_name,
            business_address=self.business_address,
            tax_id=self.business_tax_id or "",
            phone=self.business_phone,
            email=self.business_email,
            logo_url=self.business_logo_url,
        )


class TaxPreview(BaseModel):
    net_amount: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    vat_rate: Decimal
    amount_in_words: str


class InvoiceExportRequest(BaseModel):
    payment_ids: List[UUID] = Field(..., min_length=1)
