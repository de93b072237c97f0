"""
API Dependencies - Wire the invoicing services to the database and storage
"""
from functools import lru_cache

from invoicing.core import SessionLocal
from invoicing.integrations.base import InvoiceStore
from invoicing.integrations.pdf_renderer import ReportLabRenderer
from invoicing.integrations.sql import SqlInvoiceStore, SqlMemberLookup, SqlSequenceStore, SqlSettingsProvider
from invoicing.integrations.storage import SupabaseStorage
from invoicing.services import (
    InvoiceDocumentComposer, InvoiceExportService, InvoiceNumberGenerator, InvoiceRecordService, InvoiceWorkflow
)


@lru_cache()
def get_invoice_store() -> InvoiceStore:
    return SqlInvoiceStore(SessionLocal)


@lru_cache()
def get_storage() -> SupabaseStorage:
    return SupabaseStorage()


@lru_cache()
def get_workflow() -> InvoiceWorkflow:
    store = get_invoice_store()
    storage = get_storage()
    settings_provider = SqlSettingsProvider(SessionLocal)

    records = InvoiceRecordService(
        store=store,
        numbering=InvoiceNumberGenerator(SqlSequenceStore(SessionLocal)),
        settings_provider=settings_provider,
    )
    composer = InvoiceDocumentComposer(ReportLabRenderer(), logo_fetcher=storage.fetch_logo)

    return InvoiceWorkflow(
        records=records,
        composer=composer,
        store=store,
        storage=storage,
        members=SqlMemberLookup(SessionLocal),
        settings_provider=settings_provider,
    )


@lru_cache()
def get_export_service() -> InvoiceExportService:
    return InvoiceExportService(get_invoice_store(), get_storage())
