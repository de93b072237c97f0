from .base import TimestampMixin, UUIDMixin
from .invoice import Invoice, InvoiceSequence, InvoiceStatus
from .settings import AppSetting
from .member import Member

__all__ = [
    # Base
    "TimestampMixin", "UUIDMixin",
    # Invoice
    "Invoice", "InvoiceSequence", "InvoiceStatus",
    # Settings
    "AppSetting",
    # Member
    "Member",
]
