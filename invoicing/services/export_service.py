"""
Export Service - Bulk download of already generated invoices

ZIP archive for accounting, or one merged PDF for printing. Invoices are
fetched in small concurrent batches; a failing invoice is reported and
skipped, never aborting the whole export.
"""
import io
import asyncio
import logging
import zipfile
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple
from uuid import UUID

from pypdf import PdfReader, PdfWriter

from invoicing.core.clock import local_today
from invoicing.integrations.base import InvoiceStorage, InvoiceStore

logger = logging.getLogger(__name__)

BATCH_SIZE = 10


def generate_zip_filename(count: int, today: Optional[date] = None) -> str:
    """invoices-YYYY-MM-DD-<count>.zip"""
    day = today or local_today()
    return f"invoices-{day.isoformat()}-{count}.zip"


@dataclass
class BulkExportResult:
    content: Optional[bytes]
    filename: str
    successful: List[str] = field(default_factory=list)
    failed: List[Dict[str, str]] = field(default_factory=list)  # [{"id": payment_id, "error": msg}]

    @property
    def total_successful(self) -> int:
        return len(self.successful)

    @property
    def total_failed(self) -> int:
        return len(self.failed)


class InvoiceExportService:

    def __init__(
        self,
        store: InvoiceStore,
        storage: InvoiceStorage,
        today: Callable[[], date] = local_today,
        batch_size: int = BATCH_SIZE,
    ):
        self.store = store
        self.storage = storage
        self.today = today
        self.batch_size = batch_size

    async def export_zip(self, payment_ids: List[UUID]) -> BulkExportResult:
        files, failed = await self._collect(payment_ids)

        content = None
        if files:
            buffer = io.BytesIO()
            with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
                for _, invoice_number, pdf in files:
                    archive.writestr(f"invoice-{invoice_number}.pdf", pdf)
            content = buffer.getvalue()

        logger.info(f"Invoice ZIP export: {len(files)} ok, {len(failed)} failed")
        return BulkExportResult(
            content=content,
            filename=generate_zip_filename(len(files), self.today()),
            successful=[payment_id for payment_id, _, _ in files],
            failed=failed,
        )

    async def export_print_batch(self, payment_ids: List[UUID]) -> BulkExportResult:
        """Merge the invoice PDFs into a single document for printing"""
        files, failed = await self._collect(payment_ids)

        merger = PdfWriter()
        successful = []
        for payment_id, invoice_number, pdf in files:
            try:
                reader = PdfReader(io.BytesIO(pdf))
                pages = list(reader.pages)
            except Exception as e:
                logger.error(f"Failed to parse PDF for invoice {invoice_number}: {e}")
                failed.append({"id": payment_id, "error": f"Invalid PDF for invoice {invoice_number}: {e}"})
                continue
            for page in pages:
                merger.add_page(page)
            successful.append(payment_id)

        content = None
        if len(merger.pages) > 0:
            output_stream = io.BytesIO()
            merger.write(output_stream)
            content = output_stream.getvalue()
        else:
            logger.warning("No invoices were merged into the print batch")

        return BulkExportResult(
            content=content,
            filename=f"invoices-{self.today().isoformat()}-print.pdf",
            successful=successful,
            failed=failed,
        )

    async def _collect(self, payment_ids: List[UUID]) -> Tuple[List[Tuple[str, str, bytes]], List[Dict[str, str]]]:
        """Returns ([(payment_id, invoice_number, pdf)], [failure])"""
        files: List[Tuple[str, str, bytes]] = []
        failed: List[Dict[str, str]] = []

        for start in range(0, len(payment_ids), self.batch_size):
            batch = payment_ids[start:start + self.batch_size]
            results = await asyncio.gather(*(self._fetch_one(pid) for pid in batch), return_exceptions=True)

            for payment_id, result in zip(batch, results):
                if isinstance(result, Exception):
                    logger.warning(f"Invoice export skipped payment {payment_id}: {result}")
                    failed.append({"id": str(payment_id), "error": str(result)})
                    continue
                invoice_number, pdf = result
                files.append((str(payment_id), invoice_number, pdf))

        return files, failed

    async def _fetch_one(self, payment_id: UUID) -> Tuple[str, bytes]:
        invoice = await self.store.get_by_payment(payment_id)
        if invoice is None or not invoice.pdf_url:
            raise LookupError("Invoice not found. Please ensure all invoices are generated.")
        pdf = await self.storage.download(invoice.pdf_url)
        return invoice.invoice_number, pdf
