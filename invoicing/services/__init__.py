# Services Package
from .amount_to_words import amount_to_words, format_invoice_amount
from .tax_service import TaxBreakdown, calculate_tax
from .numbering_service import InvoiceNumberGenerator, format_invoice_number, parse_invoice_number
from .invoice_service import InvoiceRecordService
from .document_service import InvoiceDocumentComposer
from .workflow_service import InvoiceWorkflow, WorkflowRun, WorkflowState
from .export_service import InvoiceExportService, BulkExportResult

__all__ = [
    "amount_to_words",
    "format_invoice_amount",
    "TaxBreakdown",
    "calculate_tax",
    "InvoiceNumberGenerator",
    "format_invoice_number",
    "parse_invoice_number",
    "InvoiceRecordService",
    "InvoiceDocumentComposer",
    "InvoiceWorkflow",
    "WorkflowRun",
    "WorkflowState",
    "InvoiceExportService",
    "BulkExportResult",
]
