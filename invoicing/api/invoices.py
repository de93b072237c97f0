"""
Invoices API - Invoice generation, lookup and bulk download
"""
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from invoicing.integrations.base import InvoiceStore
from invoicing.schemas import InvoiceCreate, InvoiceExportRequest, InvoiceRead, TaxPreview
from invoicing.services import InvoiceExportService, InvoiceWorkflow, calculate_tax, format_invoice_amount
from invoicing.services.export_service import BulkExportResult
from .deps import get_export_service, get_invoice_store, get_workflow


invoices_router = APIRouter(prefix="/invoices", tags=["Invoices"])


def _export_response(result: BulkExportResult, media_type: str) -> Response:
    if result.content is None:
        raise HTTPException(
            status_code=404,
            detail={"message": "No invoices could be exported", "failed": result.failed}
        )
    return Response(
        content=result.content,
        media_type=media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{result.filename}"',
            "X-Invoices-Exported": str(result.total_successful),
            "X-Invoices-Failed": str(result.total_failed),
        },
    )


@invoices_router.post("", response_model=InvoiceRead, status_code=201)
async def create_invoice(data: InvoiceCreate, workflow: InvoiceWorkflow = Depends(get_workflow)):
    """
    Create the invoice for a payment: record, PDF, upload.

    If the PDF step fails the record is kept without pdf_url; the error
    details carry its invoice_id for POST /invoices/{id}/regenerate.
    """
    return await workflow.create_invoice(data)


@invoices_router.get("/preview", response_model=TaxPreview)
async def preview_invoice_amounts(
    amount: Decimal = Query(..., description="Total amount (TTC)"),
    vat_rate: Decimal = Query(Decimal("20"), description="VAT rate in percent"),
):
    """HT/TVA/TTC breakdown and amount in words, without creating anything"""
    breakdown = calculate_tax(amount, vat_rate)
    return TaxPreview(
        net_amount=breakdown.net_amount,
        tax_amount=breakdown.tax_amount,
        total_amount=breakdown.total_amount,
        vat_rate=breakdown.vat_rate,
        amount_in_words=format_invoice_amount(breakdown.total_amount),
    )


@invoices_router.get("/by-payment/{payment_id}", response_model=InvoiceRead)
async def get_invoice_for_payment(payment_id: UUID, store: InvoiceStore = Depends(get_invoice_store)):
    invoice = await store.get_by_payment(payment_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="No invoice for this payment")
    return invoice


@invoices_router.post("/export")
async def export_invoices(
    request: InvoiceExportRequest,
    export_service: InvoiceExportService = Depends(get_export_service)
):
    """Download existing invoice PDFs as one ZIP archive"""
    result = await export_service.export_zip(request.payment_ids)
    return _export_response(result, "application/zip")


@invoices_router.post("/print-batch")
async def print_invoices(
    request: InvoiceExportRequest,
    export_service: InvoiceExportService = Depends(get_export_service)
):
    """Merge existing invoice PDFs into one printable document"""
    result = await export_service.export_print_batch(request.payment_ids)
    return _export_response(result, "application/pdf")


@invoices_router.get("/{invoice_id}", response_model=InvoiceRead)
async def get_invoice(invoice_id: UUID, store: InvoiceStore = Depends(get_invoice_store)):
    invoice = await store.get(invoice_id)
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@invoices_router.post("/{invoice_id}/regenerate", response_model=InvoiceRead)
async def regenerate_invoice_document(invoice_id: UUID, workflow: InvoiceWorkflow = Depends(get_workflow)):
    """Retry PDF generation and upload for an existing invoice"""
    return await workflow.regenerate_document(invoice_id)
