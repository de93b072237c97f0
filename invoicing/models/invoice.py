"""
Invoice Models - Issued tax invoices and the daily numbering counter
"""
from sqlalchemy import Column, String, Date, Integer, Numeric, Text, JSON, Uuid, UniqueConstraint
import enum

from invoicing.core import Base
from .base import UUIDMixin, TimestampMixin


class InvoiceStatus(str, enum.Enum):
    DRAFT = "draft"
    ISSUED = "issued"
    PAID = "paid"
    CANCELLED = "cancelled"


class Invoice(Base, UUIDMixin, TimestampMixin):
    """Tax invoice issued for a subscription payment"""
    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("payment_id", name="uq_invoices_payment_id"),
        UniqueConstraint("invoice_number", name="uq_invoices_invoice_number"),
    )

    invoice_number = Column(String(20), nullable=False)  # DDMMYYYY-NN
    payment_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    member_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    subscription_id = Column(Uuid(as_uuid=True))
    issue_date = Column(Date, nullable=False)

    # Amounts (amount + tax_amount == total_amount)
    amount = Column(Numeric(12, 2), nullable=False)  # HT
    tax_amount = Column(Numeric(12, 2), nullable=False)  # TVA
    total_amount = Column(Numeric(12, 2), nullable=False)  # TTC

    # Business snapshot (copied from general settings at issue time)
    business_name = Column(String(200))
    business_address = Column(JSON)  # {street, city, postal_code, country}
    business_tax_id = Column(String(50))
    business_phone = Column(String(50))
    business_email = Column(String(200))
    business_logo_url = Column(String(500))

    # Invoice settings snapshot
    vat_rate = Column(Numeric(5, 2), nullable=False)
    footer_notes = Column(Text)

    status = Column(String(20), default=InvoiceStatus.ISSUED.value, nullable=False)
    pdf_url = Column(String(500))
    created_by = Column(String(100))


class InvoiceSequence(Base):
    """Per-day invoice counter, only touched under a row lock"""
    __tablename__ = "invoice_sequences"

    sequence_date = Column(Date, primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
