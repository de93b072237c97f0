from .router import api_router, invoice_error_handler

__all__ = ["api_router", "invoice_error_handler"]
