from .invoice import (
    DEFAULT_VAT_RATE,
    BusinessAddress,
    GeneralSettings,
    InvoiceSettings,
    MemberSummary,
    InvoiceCreate,
    InvoiceRead,
    TaxPreview,
    InvoiceExportRequest,
)

__all__ = [
    "DEFAULT_VAT_RATE",
    "BusinessAddress",
    "GeneralSettings",
    "InvoiceSettings",
    "MemberSummary",
    "InvoiceCreate",
    "InvoiceRead",
    "TaxPreview",
    "InvoiceExportRequest",
]
