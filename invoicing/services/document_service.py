"""
Document Service - Invoice PDF content

Builds the printable content of an invoice (business block, title, customer,
HT/TVA/TTC table, amount in words, footer) and hands it to a DocumentRenderer.
"""
import asyncio
import logging
from decimal import Decimal
from datetime import date
from typing import Awaitable, Callable, Optional

from invoicing.core.config import settings
from invoicing.core.exceptions import RenderingError
from invoicing.integrations.base import DocumentRenderer, InvoiceDocument
from invoicing.schemas import DEFAULT_VAT_RATE, GeneralSettings, InvoiceRead, InvoiceSettings, MemberSummary
from .amount_to_words import amount_to_words
from .tax_service import round_cents, to_decimal

logger = logging.getLogger(__name__)

LogoFetcher = Callable[[str], Awaitable[Optional[bytes]]]

AMOUNT_WORDS_HEADING = "La présente facture est arrêtée à la somme de:"


def format_currency(amount, currency_code: str = "MAD") -> str:
    """7200 -> '7 200,00 MAD'"""
    value = round_cents(to_decimal(amount, "Amount"))
    formatted = f"{value:,.2f}".replace(",", " ").replace(".", ",")
    return f"{formatted} {currency_code}"


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def format_rate(rate) -> str:
    """20 -> '20', 7.5 -> '7.5'"""
    value = to_decimal(rate, "VAT rate")
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


def resolve_vat_rate(invoice: InvoiceRead, invoice_settings: Optional[InvoiceSettings]) -> Decimal:
    """Rate shown in the TVA row: live settings first, then the stored rate"""
    if invoice_settings is not None and invoice_settings.vat_rate is not None:
        return invoice_settings.vat_rate
    if invoice.vat_rate is not None:
        return invoice.vat_rate
    return DEFAULT_VAT_RATE


def resolve_footer_notes(invoice: InvoiceRead, invoice_settings: Optional[InvoiceSettings]) -> Optional[str]:
    """Live footer notes take priority over the stored ones; blank means none"""
    for notes in (invoice_settings.invoice_footer_notes if invoice_settings else None, invoice.footer_notes):
        if notes and notes.strip():
            return notes.strip()
    return None


class InvoiceDocumentComposer:
    """Composes invoice documents; drawing is delegated to the renderer"""

    def __init__(
        self,
        renderer: DocumentRenderer,
        logo_fetcher: Optional[LogoFetcher] = None,
        currency_label: str = settings.CURRENCY_LABEL,
        currency_code: str = settings.CURRENCY_CODE,
    ):
        self.renderer = renderer
        self.logo_fetcher = logo_fetcher
        self.currency_label = currency_label
        self.currency_code = currency_code

    async def compose(
        self,
        invoice: InvoiceRead,
        member: MemberSummary,
        business: GeneralSettings,
        invoice_settings: Optional[InvoiceSettings] = None,
    ) -> bytes:
        """Generate the invoice PDF"""
        logger.debug(f"Starting PDF generation for {invoice.invoice_number} ({member.full_name})")
        try:
            document = await self.build_document(invoice, member, business, invoice_settings)
            content = await asyncio.to_thread(self.renderer.render, document)
        except Exception as e:
            logger.error(f"Failed to generate invoice PDF {invoice.invoice_number}: {e}")
            raise RenderingError(f"Failed to generate invoice PDF: {e}") from e

        logger.info(f"Invoice PDF generated: {invoice.invoice_number} ({len(content)} bytes)")
        return content

    async def build_document(
        self,
        invoice: InvoiceRead,
        member: MemberSummary,
        business: GeneralSettings,
        invoice_settings: Optional[InvoiceSettings] = None,
    ) -> InvoiceDocument:
        logo = await self._load_logo(business.logo_url)

        address = business.business_address
        business_lines = [
            business.business_name,
            address.street,
            f"{address.city} {address.postal_code}",
            f"ICE: {business.tax_id}",
        ]
        if business.phone:
            business_lines.append(f"Tél: {business.phone}")
        if business.email:
            business_lines.append(f"Email: {business.email}")

        vat_rate = resolve_vat_rate(invoice, invoice_settings)

        return InvoiceDocument(
            logo=logo,
            business_lines=business_lines,
            title=f"Facture N° {invoice.invoice_number}",
            date_line=f"Date: {format_date(invoice.issue_date)}",
            customer_line=f"Client(e): {member.full_name}",
            table_header=("Description", f"Montant ({self.currency_code})"),
            table_rows=[
                ("Abonnement (HT)", format_currency(invoice.amount, self.currency_code)),
                (f"TVA ({format_rate(vat_rate)}%)", format_currency(invoice.tax_amount, self.currency_code)),
                ("Total (TTC)", format_currency(invoice.total_amount, self.currency_code)),
            ],
            amount_words_heading=AMOUNT_WORDS_HEADING,
            amount_words=amount_to_words(invoice.total_amount, self.currency_label),
            footer_notes=resolve_footer_notes(invoice, invoice_settings),
            metadata={
                "title": f"Facture {invoice.invoice_number}",
                "author": business.business_name,
            },
        )

    async def _load_logo(self, logo_url: Optional[str]) -> Optional[bytes]:
        """Best-effort: a missing or broken logo never blocks the invoice"""
        if not logo_url or self.logo_fetcher is None:
            logger.debug("No logo configured, skipping logo")
            return None
        try:
            logo = await self.logo_fetcher(logo_url)
        except Exception as e:
            logger.warning(f"Failed to fetch logo {logo_url}: {e}")
            return None
        if not logo:
            logger.warning(f"Logo file is empty: {logo_url}")
            return None
        return logo
