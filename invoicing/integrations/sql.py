"""
SQL Adapters - SQLAlchemy implementations of the invoicing collaborators

Each call opens its own session from the factory, so adapters can be shared
across concurrent requests.
"""
import logging
from datetime import date
from typing import Optional, Dict, Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from invoicing.core.exceptions import DuplicateInvoiceError, InvoiceNotFoundError, MemberNotFoundError, PersistenceError
from invoicing.models import AppSetting, Invoice, InvoiceSequence, Member
from invoicing.schemas import InvoiceRead, MemberSummary
from .base import InvoiceStore, MemberLookup, SequenceStore, SettingsProvider

logger = logging.getLogger(__name__)


class SqlSettingsProvider(SettingsProvider):

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        db: Session = self.session_factory()
        try:
            setting = db.query(AppSetting).filter(
                AppSetting.key == key,
                AppSetting.is_active == True  # noqa: E712
            ).order_by(AppSetting.updated_at.desc()).first()
            return dict(setting.value) if setting and setting.value else None
        finally:
            db.close()


class SqlSequenceStore(SequenceStore):
    """
    Day counter in invoice_sequences. The row is read with SELECT ... FOR UPDATE
    so concurrent transactions serialize on it; the first number of a day
    inserts the row, and a concurrent insert of the same day is retried.
    """

    def __init__(self, session_factory: sessionmaker, max_attempts: int = 3):
        self.session_factory = session_factory
        self.max_attempts = max_attempts

    async def next(self, day: date) -> int:
        for attempt in range(1, self.max_attempts + 1):
            db: Session = self.session_factory()
            try:
                counter = db.query(InvoiceSequence).filter(
                    InvoiceSequence.sequence_date == day
                ).with_for_update().first()

                if counter is None:
                    counter = InvoiceSequence(sequence_date=day, last_value=1)
                    db.add(counter)
                else:
                    counter.last_value += 1

                value = counter.last_value
                db.commit()
                return value
            except IntegrityError:
                db.rollback()
                logger.warning(f"Invoice sequence race for {day.isoformat()} (attempt {attempt}), retrying")
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

        raise PersistenceError(f"Could not allocate invoice sequence for {day.isoformat()}")


class SqlMemberLookup(MemberLookup):

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    async def get_member(self, member_id: UUID) -> MemberSummary:
        db: Session = self.session_factory()
        try:
            member = db.query(Member).filter(Member.id == member_id).first()
            if not member:
                raise MemberNotFoundError(f"Member not found: {member_id}", details={"member_id": str(member_id)})
            return MemberSummary.model_validate(member)
        finally:
            db.close()


class SqlInvoiceStore(InvoiceStore):

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    async def insert(self, data: Dict[str, Any]) -> InvoiceRead:
        db: Session = self.session_factory()
        try:
            invoice = Invoice(**data)
            db.add(invoice)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                exists = db.query(Invoice.id).filter(Invoice.payment_id == data["payment_id"]).first()
                if exists:
                    raise DuplicateInvoiceError(data["payment_id"]) from e
                logger.error(f"Failed to insert invoice {data.get('invoice_number')}: {e}")
                raise PersistenceError(f"Failed to insert invoice record: {e.orig}") from e
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Failed to insert invoice {data.get('invoice_number')}: {e}")
                raise PersistenceError(f"Failed to insert invoice record: {e}") from e

            db.refresh(invoice)
            return InvoiceRead.model_validate(invoice)
        finally:
            db.close()

    async def get(self, invoice_id: UUID) -> Optional[InvoiceRead]:
        db: Session = self.session_factory()
        try:
            invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
            return InvoiceRead.model_validate(invoice) if invoice else None
        finally:
            db.close()

    async def get_by_payment(self, payment_id: UUID) -> Optional[InvoiceRead]:
        db: Session = self.session_factory()
        try:
            invoice = db.query(Invoice).filter(Invoice.payment_id == payment_id).first()
            return InvoiceRead.model_validate(invoice) if invoice else None
        finally:
            db.close()

    async def update_pdf_url(self, invoice_id: UUID, pdf_url: str) -> InvoiceRead:
        db: Session = self.session_factory()
        try:
            invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
            if not invoice:
                raise InvoiceNotFoundError(f"Invoice not found: {invoice_id}", details={"invoice_id": str(invoice_id)})
            invoice.pdf_url = pdf_url
            try:
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Failed to update invoice PDF URL for {invoice_id}: {e}")
                raise PersistenceError(f"Failed to update invoice PDF URL: {e}") from e
            db.refresh(invoice)
            logger.info(f"Invoice PDF URL updated: {invoice.invoice_number}")
            return InvoiceRead.model_validate(invoice)
        finally:
            db.close()
