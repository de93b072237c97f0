"""
Invoice Service - Invoice record creation

Creates the database record only: tax breakdown, invoice number and the
immutable business/settings snapshot. PDF generation is the workflow's job.
"""
import asyncio
import logging
from datetime import date
from typing import Callable

from invoicing.core.clock import local_today
from invoicing.core.exceptions import ConfigurationError, DuplicateInvoiceError
from invoicing.integrations.base import InvoiceStore, SettingsProvider
from invoicing.models import InvoiceStatus
from invoicing.schemas import InvoiceCreate, InvoiceRead
from .numbering_service import InvoiceNumberGenerator
from .settings_service import GENERAL_SETTINGS_KEY, fetch_general_settings, fetch_invoice_settings
from .tax_service import calculate_tax

logger = logging.getLogger(__name__)


class InvoiceRecordService:
    """Service for creating invoice records"""

    def __init__(
        self,
        store: InvoiceStore,
        numbering: InvoiceNumberGenerator,
        settings_provider: SettingsProvider,
        today: Callable[[], date] = local_today,
    ):
        self.store = store
        self.numbering = numbering
        self.settings_provider = settings_provider
        self.today = today

    async def create_record(self, data: InvoiceCreate) -> InvoiceRead:
        """
        Create the invoice record for a payment.

        The store's unique payment_id constraint is what guarantees one
        invoice per payment; the lookup below only avoids burning an
        invoice number on an obvious duplicate.
        """
        logger.debug(f"Creating invoice record for payment {data.payment_id} (amount {data.amount})")
        # Single clock read: the number's day and issue_date must agree
        issue_date = self.today()

        existing = await self.store.get_by_payment(data.payment_id)
        if existing:
            logger.warning(f"Invoice {existing.invoice_number} already exists for payment {data.payment_id}")
            raise DuplicateInvoiceError(data.payment_id, details={"invoice_number": existing.invoice_number})

        # 1. Settings
        general_settings, invoice_settings = await asyncio.gather(
            fetch_general_settings(self.settings_provider),
            fetch_invoice_settings(self.settings_provider),
        )
        if general_settings is None:
            raise ConfigurationError(
                "General settings not configured. Please configure business information in Settings.",
                config_key=GENERAL_SETTINGS_KEY
            )

        # 2. Tax breakdown
        breakdown = calculate_tax(data.amount, invoice_settings.vat_rate)
        logger.debug(
            f"Tax calculation: net={breakdown.net_amount} tax={breakdown.tax_amount} "
            f"total={breakdown.total_amount} rate={breakdown.vat_rate}"
        )

        # 3. Invoice number
        invoice_number = await self.numbering.next(issue_date)

        # 4. Record with snapshots
        record = {
            "invoice_number": invoice_number,
            "payment_id": data.payment_id,
            "member_id": data.member_id,
            "subscription_id": data.subscription_id,
            "issue_date": issue_date,
            "amount": breakdown.net_amount,
            "tax_amount": breakdown.tax_amount,
            "total_amount": breakdown.total_amount,
            "business_name": general_settings.business_name,
            "business_address": general_settings.business_address.model_dump(),
            "business_tax_id": general_settings.tax_id,
            "business_phone": general_settings.phone,
            "business_email": general_settings.email,
            "business_logo_url": general_settings.logo_url,
            "vat_rate": invoice_settings.vat_rate,
            "footer_notes": invoice_settings.invoice_footer_notes,
            "status": InvoiceStatus.ISSUED.value,
            "created_by": data.created_by,
        }

        invoice = await self.store.insert(record)
        logger.info(
            f"Invoice record created: {invoice.invoice_number} "
            f"(id={invoice.id}, total={invoice.total_amount})"
        )
        return invoice
