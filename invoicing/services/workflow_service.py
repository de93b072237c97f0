"""
Invoice Workflow - record -> compose -> upload -> link

The workflow is an explicit state machine. Each state has exactly one step
that moves it forward; a failing step leaves the run in its last good state
with the error attached, so a retry resumes where it stopped. Nothing is
rolled back: an invoice record whose PDF failed stays without pdf_url until
regenerate_document() or resume() completes it.
"""
import asyncio
import enum
import logging
from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Dict, Optional
from uuid import UUID

from invoicing.core.exceptions import (
    ConfigurationError, InvoiceError, InvoiceNotFoundError, PersistenceError, RenderingError, UploadError
)
from invoicing.integrations.base import InvoiceStorage, InvoiceStore, MemberLookup, SettingsProvider
from invoicing.schemas import InvoiceCreate, InvoiceRead
from .document_service import InvoiceDocumentComposer
from .invoice_service import InvoiceRecordService
from .settings_service import GENERAL_SETTINGS_KEY, fetch_general_settings, fetch_invoice_settings

logger = logging.getLogger(__name__)


class WorkflowState(str, enum.Enum):
    CREATED = "created"  # record persisted, no document yet
    COMPOSED = "composed"  # PDF bytes in hand
    UPLOADED = "uploaded"  # PDF stored, URL known
    LINKED = "linked"  # URL saved on the record


@dataclass
class WorkflowRun:
    invoice: InvoiceRead
    state: WorkflowState = WorkflowState.CREATED
    document: Optional[bytes] = None
    pdf_url: Optional[str] = None
    overwrite: bool = False  # allow replacing an already stored PDF
    error: Optional[InvoiceError] = None

    @property
    def done(self) -> bool:
        return self.state is WorkflowState.LINKED

    @property
    def failed(self) -> bool:
        return self.error is not None


Step = Callable[[WorkflowRun], Awaitable[WorkflowRun]]


class InvoiceWorkflow:
    """Complete invoice generation: the entry point used by the API"""

    def __init__(
        self,
        records: InvoiceRecordService,
        composer: InvoiceDocumentComposer,
        store: InvoiceStore,
        storage: InvoiceStorage,
        members: MemberLookup,
        settings_provider: SettingsProvider,
    ):
        self.records = records
        self.composer = composer
        self.store = store
        self.storage = storage
        self.members = members
        self.settings_provider = settings_provider
        self._steps: Dict[WorkflowState, Step] = {
            WorkflowState.CREATED: self._compose,
            WorkflowState.COMPOSED: self._upload,
            WorkflowState.UPLOADED: self._link,
        }

    # ========== Entry points ==========

    async def create_invoice(self, data: InvoiceCreate) -> InvoiceRead:
        """Create a new invoice for a payment and attach its PDF"""
        logger.info(f"Starting invoice generation for payment {data.payment_id} (member {data.member_id}, amount {data.amount})")

        # A failure here aborts everything: no record, nothing to resume
        invoice = await self.records.create_record(data)

        run = await self.advance(WorkflowRun(invoice=invoice))
        return self._finish(run)

    async def regenerate_document(self, invoice_id: UUID) -> InvoiceRead:
        """
        Retry PDF generation for an existing invoice. Reuses the record, so the
        one-invoice-per-payment check is never involved.
        """
        invoice = await self.store.get(invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(f"Invoice not found: {invoice_id}", details={"invoice_id": str(invoice_id)})

        logger.info(f"Regenerating PDF for invoice {invoice.invoice_number}")
        run = await self.advance(WorkflowRun(invoice=invoice, overwrite=True))
        return self._finish(run)

    async def resume(self, run: WorkflowRun) -> InvoiceRead:
        """Continue a failed run from its last successful state"""
        run = await self.advance(replace(run, error=None))
        return self._finish(run)

    async def handle_payment(self, data: InvoiceCreate) -> Optional[InvoiceRead]:
        """Invoice a freshly recorded payment when auto-generation is enabled"""
        invoice_settings = await fetch_invoice_settings(self.settings_provider)
        if not invoice_settings.auto_generate:
            logger.debug(f"Auto-generation disabled, no invoice for payment {data.payment_id}")
            return None
        return await self.create_invoice(data)

    # ========== State machine ==========

    async def advance(self, run: WorkflowRun) -> WorkflowRun:
        """Run steps until the invoice is linked or a step fails"""
        while not run.done:
            step = self._steps[run.state]
            try:
                run = await step(run)
            except InvoiceError as e:
                e.details.update({
                    "invoice_id": str(run.invoice.id),
                    "invoice_number": run.invoice.invoice_number,
                    "workflow_state": run.state.value,
                })
                logger.error(f"Invoice workflow failed for {run.invoice.invoice_number} after '{run.state.value}': {e.message}")
                return replace(run, error=e)
            logger.debug(f"Invoice {run.invoice.invoice_number} -> {run.state.value}")
        return run

    def _finish(self, run: WorkflowRun) -> InvoiceRead:
        if run.error is not None:
            raise run.error
        logger.info(f"Invoice workflow completed: {run.invoice.invoice_number} -> {run.invoice.pdf_url}")
        return run.invoice

    # ========== Steps ==========

    async def _compose(self, run: WorkflowRun) -> WorkflowRun:
        invoice = run.invoice
        # The issued snapshot wins; live settings only cover records without one
        business = invoice.business_snapshot()
        try:
            member, invoice_settings = await asyncio.gather(
                self.members.get_member(invoice.member_id),
                fetch_invoice_settings(self.settings_provider),
            )
            if business is None:
                business = await fetch_general_settings(self.settings_provider)
        except InvoiceError:
            raise
        except Exception as e:
            raise RenderingError(f"Failed to generate invoice PDF: {e}") from e

        if business is None:
            raise ConfigurationError("General settings not configured", config_key=GENERAL_SETTINGS_KEY)

        document = await self.composer.compose(invoice, member, business, invoice_settings)
        return replace(run, document=document, state=WorkflowState.COMPOSED)

    async def _upload(self, run: WorkflowRun) -> WorkflowRun:
        try:
            pdf_url = await self.storage.upload(run.document, run.invoice.invoice_number, overwrite=run.overwrite)
        except UploadError:
            raise
        except Exception as e:
            raise UploadError(f"Failed to upload PDF to Storage: {e}") from e
        return replace(run, pdf_url=pdf_url, state=WorkflowState.UPLOADED)

    async def _link(self, run: WorkflowRun) -> WorkflowRun:
        try:
            invoice = await self.store.update_pdf_url(run.invoice.id, run.pdf_url)
        except InvoiceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to update invoice PDF URL: {e}") from e
        return replace(run, invoice=invoice, document=None, state=WorkflowState.LINKED)
