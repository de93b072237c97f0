"""
Collaborator Interfaces - Abstract base classes for everything the invoicing
services talk to (database, object storage, PDF drawing)
"""
from abc import ABC, abstractmethod
from typing import Optional, List, Tuple, Dict, Any
from datetime import date
from dataclasses import dataclass, field
from uuid import UUID

from invoicing.schemas import InvoiceRead, MemberSummary


@dataclass
class InvoiceDocument:
    """
    Printable invoice content, in drawing order. Renderers lay it out;
    they never compute amounts or wording.
    """
    # Header
    business_lines: List[str]
    title: str  # "Facture N° 17102026-01"
    date_line: str  # "Date: 17/10/2026"
    customer_line: str  # "Client(e): Sara Alami"

    # Breakdown table
    table_header: Tuple[str, str]
    table_rows: List[Tuple[str, str]]

    # Amount in words
    amount_words_heading: str
    amount_words: str

    logo: Optional[bytes] = None
    footer_notes: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)


class SettingsProvider(ABC):
    """Live studio settings, looked up by key"""

    @abstractmethod
    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        """
        Return the active value for ``key`` (e.g. "general_settings"),
        or None when nothing is configured
        """
        pass


class SequenceStore(ABC):
    """
    Atomic day-scoped counter.

    ``next(day)`` must behave as a single fetch-and-increment keyed by ``day``:
    the first call for a day returns 1 and every later call that day returns
    the previous value + 1, across processes.
    """

    @abstractmethod
    async def next(self, day: date) -> Optional[int]:
        pass


class MemberLookup(ABC):

    @abstractmethod
    async def get_member(self, member_id: UUID) -> MemberSummary:
        """Raise MemberNotFoundError if the member does not exist"""
        pass


class InvoiceStore(ABC):
    """Persistence for invoice records (payment_id is unique)"""

    @abstractmethod
    async def insert(self, data: Dict[str, Any]) -> InvoiceRead:
        """Raise DuplicateInvoiceError when payment_id already has an invoice"""
        pass

    @abstractmethod
    async def get(self, invoice_id: UUID) -> Optional[InvoiceRead]:
        pass

    @abstractmethod
    async def get_by_payment(self, payment_id: UUID) -> Optional[InvoiceRead]:
        pass

    @abstractmethod
    async def update_pdf_url(self, invoice_id: UUID, pdf_url: str) -> InvoiceRead:
        pass


class InvoiceStorage(ABC):
    """Object storage for generated invoice PDFs and business assets"""

    @abstractmethod
    async def upload(self, document: bytes, invoice_number: str, overwrite: bool = False) -> str:
        """Store the PDF for ``invoice_number`` and return its public URL"""
        pass

    @abstractmethod
    async def download(self, url: str) -> bytes:
        """Fetch an object by public URL, raising StorageError on failure"""
        pass

    @abstractmethod
    async def delete(self, url: str) -> bool:
        """Remove an object by public URL; False when nothing was removed"""
        pass


class DocumentRenderer(ABC):
    """Turns structured invoice content into a binary document"""

    @abstractmethod
    def render(self, document: InvoiceDocument) -> bytes:
        pass
