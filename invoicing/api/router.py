"""
API Router - JSON Endpoints
"""
import logging
from datetime import datetime

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from invoicing.core.exceptions import InvoiceError
from .invoices import invoices_router

logger = logging.getLogger(__name__)

api_router = APIRouter(tags=["API"])
api_router.include_router(invoices_router)


@api_router.get("/status")
async def api_status():
    return {"status": "ok", "version": "1.0.0", "timestamp": datetime.now().isoformat()}


async def invoice_error_handler(request: Request, exc: InvoiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    return JSONResponse(status_code=int(exc.status_code), content=exc.to_dict())
