"""
Invoice exceptions.

Every failure raised by the invoicing services is an :class:`InvoiceError`.
Messages are stable (callers and tests match on them); extra context goes
into ``details``.
"""

from typing import Any, Dict, Optional
from http import HTTPStatus


class InvoiceError(Exception):
    """
    Base exception for all invoicing errors.

    Attributes:
        message: Error message
        status_code: HTTP status code used by the API layer
        code: Application error code
        details: Additional error details
    """

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    code: str = "INVOICE_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
        code: Optional[str] = None
    ):
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details
            }
        }


class ValidationError(InvoiceError, ValueError):
    """Raised for invalid amounts or VAT rates."""
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"


class ConfigurationError(InvoiceError):
    """Raised when required settings are missing or malformed."""
    code = "CONFIGURATION_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        config_key: Optional[str] = None
    ):
        if config_key:
            details = details or {}
            details["config_key"] = config_key
        super().__init__(message, details=details)


class NumberingError(InvoiceError):
    """Raised when the sequence store cannot issue an invoice number."""
    status_code = HTTPStatus.BAD_GATEWAY
    code = "NUMBERING_ERROR"


class DuplicateInvoiceError(InvoiceError):
    """Raised when an invoice already exists for a payment."""
    status_code = HTTPStatus.CONFLICT
    code = "DUPLICATE_INVOICE"

    def __init__(self, payment_id: Any, details: Optional[Dict[str, Any]] = None):
        details = details or {}
        details["payment_id"] = str(payment_id)
        super().__init__("Invoice already exists for this payment", details=details)


class PersistenceError(InvoiceError):
    """Raised for invoice store failures other than duplicates."""
    code = "PERSISTENCE_ERROR"


class InvoiceNotFoundError(InvoiceError):
    status_code = HTTPStatus.NOT_FOUND
    code = "INVOICE_NOT_FOUND"


class MemberNotFoundError(InvoiceError):
    status_code = HTTPStatus.NOT_FOUND
    code = "MEMBER_NOT_FOUND"


class RenderingError(InvoiceError):
    """Raised when the invoice document cannot be composed or rendered."""
    status_code = HTTPStatus.BAD_GATEWAY
    code = "RENDERING_ERROR"


class StorageError(InvoiceError):
    """Raised for object storage failures."""
    status_code = HTTPStatus.BAD_GATEWAY
    code = "STORAGE_ERROR"


class UploadError(StorageError):
    code = "UPLOAD_ERROR"
