import os

os.environ.setdefault("DATABASE_URI", "sqlite://")

import asyncio
import io
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from pypdf import PdfWriter

from invoicing.core.exceptions import DuplicateInvoiceError, InvoiceNotFoundError, MemberNotFoundError, StorageError
from invoicing.integrations.base import (
    DocumentRenderer, InvoiceStorage, InvoiceStore, MemberLookup, SequenceStore, SettingsProvider
)
from invoicing.schemas import InvoiceCreate, InvoiceRead, MemberSummary
from invoicing.services import (
    InvoiceDocumentComposer, InvoiceExportService, InvoiceNumberGenerator, InvoiceRecordService, InvoiceWorkflow
)


TODAY = date(2026, 10, 17)

GENERAL_SETTINGS = {
    "business_name": "Studio Atlas",
    "business_address": {
        "street": "12 Rue des Orangers",
        "city": "Casablanca",
        "postal_code": "20000",
        "country": "Maroc",
    },
    "tax_id": "001234567000089",
    "phone": "+212 522 000 000",
    "email": "contact@studio-atlas.ma",
    "logo_url": "https://storage.test/business-assets/logo.png",
}


# ===================== FAKES =====================

class FakeSettingsProvider(SettingsProvider):

    def __init__(self, values=None):
        self.values = dict(values or {})

    async def get(self, key):
        return self.values.get(key)


class LockedSequenceStore(SequenceStore):
    """
    In-memory stand-in for the database counter. The read-yield-write inside
    the lock would interleave (and duplicate) without it.
    """

    def __init__(self):
        self.counters = {}
        self.error = None
        self.return_none = False
        self._locks = {}

    def _lock(self):
        loop = asyncio.get_running_loop()
        return self._locks.setdefault(loop, asyncio.Lock())

    async def next(self, day):
        if self.error:
            raise self.error
        if self.return_none:
            return None
        async with self._lock():
            current = self.counters.get(day, 0)
            await asyncio.sleep(0)
            self.counters[day] = current + 1
            return current + 1


class MemoryInvoiceStore(InvoiceStore):

    def __init__(self):
        self.invoices = {}
        self.fail_updates = False

    async def insert(self, data):
        if any(inv.payment_id == data["payment_id"] for inv in self.invoices.values()):
            raise DuplicateInvoiceError(data["payment_id"])
        if any(inv.invoice_number == data["invoice_number"] for inv in self.invoices.values()):
            raise AssertionError(f"invoice number reused: {data['invoice_number']}")
        now = datetime.now(timezone.utc)
        invoice = InvoiceRead(id=uuid.uuid4(), created_at=now, updated_at=now, **data)
        self.invoices[invoice.id] = invoice
        return invoice

    async def get(self, invoice_id):
        return self.invoices.get(invoice_id)

    async def get_by_payment(self, payment_id):
        for invoice in self.invoices.values():
            if invoice.payment_id == payment_id:
                return invoice
        return None

    async def update_pdf_url(self, invoice_id, pdf_url):
        if self.fail_updates:
            raise RuntimeError("database unavailable")
        if invoice_id not in self.invoices:
            raise InvoiceNotFoundError(f"Invoice not found: {invoice_id}")
        invoice = self.invoices[invoice_id].model_copy(update={"pdf_url": pdf_url})
        self.invoices[invoice_id] = invoice
        return invoice


class FakeStorage(InvoiceStorage):

    def __init__(self):
        self.objects = {}
        self.upload_calls = []
        self.fail_uploads = False

    async def upload(self, document, invoice_number, overwrite=False):
        self.upload_calls.append((invoice_number, overwrite))
        if self.fail_uploads:
            raise RuntimeError("bucket unreachable")
        url = f"https://storage.test/business-assets/invoices/INV-{invoice_number}.pdf"
        self.objects[url] = document
        return url

    async def download(self, url):
        if url not in self.objects:
            raise StorageError("Failed to fetch file (404)")
        return self.objects[url]

    async def delete(self, url):
        return self.objects.pop(url, None) is not None


class FakeRenderer(DocumentRenderer):

    def __init__(self):
        self.documents = []
        self.fail = False

    def render(self, document):
        if self.fail:
            raise RuntimeError("renderer crashed")
        self.documents.append(document)
        return b"%PDF-1.4 " + document.title.encode("utf-8")


class FakeMemberLookup(MemberLookup):

    def __init__(self):
        self.members = {}

    def add(self, first_name="Sara", last_name="Alami", email="sara@example.com"):
        member_id = uuid.uuid4()
        self.members[member_id] = MemberSummary(first_name=first_name, last_name=last_name, email=email)
        return member_id

    async def get_member(self, member_id):
        if member_id not in self.members:
            raise MemberNotFoundError(f"Member not found: {member_id}")
        return self.members[member_id]


# ===================== HARNESS =====================

class InvoicingHarness:
    """Every service wired to in-memory collaborators, with a movable 'today'"""

    def __init__(self):
        self.today = TODAY
        self.settings_provider = FakeSettingsProvider({"general_settings": dict(GENERAL_SETTINGS)})
        self.sequence_store = LockedSequenceStore()
        self.store = MemoryInvoiceStore()
        self.storage = FakeStorage()
        self.renderer = FakeRenderer()
        self.members = FakeMemberLookup()
        self.logo_requests = []

        clock = lambda: self.today
        self.numbering = InvoiceNumberGenerator(self.sequence_store, today=clock)
        self.records = InvoiceRecordService(self.store, self.numbering, self.settings_provider, today=clock)
        self.composer = InvoiceDocumentComposer(self.renderer, logo_fetcher=self._fetch_logo)
        self.workflow = InvoiceWorkflow(
            records=self.records,
            composer=self.composer,
            store=self.store,
            storage=self.storage,
            members=self.members,
            settings_provider=self.settings_provider,
        )
        self.export = InvoiceExportService(self.store, self.storage, today=clock)

    async def _fetch_logo(self, url):
        self.logo_requests.append(url)
        return b"\x89PNG fake logo"

    def payment(self, amount=7200, member_id=None, **extra):
        return InvoiceCreate(
            payment_id=uuid.uuid4(),
            member_id=member_id or self.members.add(),
            amount=Decimal(str(amount)),
            **extra
        )


@pytest.fixture
def harness():
    return InvoicingHarness()


def run(coro):
    return asyncio.run(coro)


def blank_pdf(pages=1):
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=595, height=842)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
