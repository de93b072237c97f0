"""
Numbering Service - Sequential, day-scoped invoice numbers

Format: DDMMYYYY-NN (e.g. 08012025-01 for the first invoice of 8 Jan 2025).
The counter lives in the SequenceStore; this module never keeps its own.
"""
import re
import logging
from datetime import date
from typing import Callable, Optional, Tuple

from invoicing.core.clock import local_today
from invoicing.core.exceptions import NumberingError
from invoicing.integrations.base import SequenceStore

logger = logging.getLogger(__name__)

INVOICE_NUMBER_PATTERN = re.compile(r"^(\d{2})(\d{2})(\d{4})-(\d{2,})$")


def format_invoice_number(day: date, sequence: int) -> str:
    return f"{day.strftime('%d%m%Y')}-{sequence:02d}"


def parse_invoice_number(invoice_number: str) -> Tuple[date, int]:
    """Split an invoice number into its issue day and daily sequence"""
    match = INVOICE_NUMBER_PATTERN.match(invoice_number or "")
    if not match:
        raise ValueError(f"Invalid invoice number format: {invoice_number}")
    day, month, year, sequence = match.groups()
    return date(int(year), int(month), int(day)), int(sequence)


class InvoiceNumberGenerator:
    """Issues invoice numbers through one atomic SequenceStore call each"""

    def __init__(self, store: SequenceStore, today: Callable[[], date] = local_today):
        self.store = store
        self.today = today

    async def next(self, day: Optional[date] = None) -> str:
        """Next number for day (today when omitted)"""
        day = day or self.today()
        logger.debug(f"Generating invoice number for {day.isoformat()}")

        try:
            sequence = await self.store.next(day)
        except Exception as e:
            logger.error(f"Sequence store failed for {day.isoformat()}: {e}")
            raise NumberingError(f"Failed to generate invoice number: {e}") from e

        if sequence is None:
            logger.error(f"Sequence store returned no value for {day.isoformat()}")
            raise NumberingError("Failed to generate invoice number: RPC returned null invoice number")
        if sequence < 1:
            raise NumberingError(f"Failed to generate invoice number: invalid sequence value {sequence}")

        invoice_number = format_invoice_number(day, sequence)
        logger.info(f"Invoice number generated: {invoice_number}")
        return invoice_number
