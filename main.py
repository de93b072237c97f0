"""
Studio Invoicing - Tax invoices for subscription payments
FastAPI Application Entry Point
"""
import logging
import uvicorn
from fastapi import FastAPI
from contextlib import asynccontextmanager

from invoicing.core import settings, engine, Base
from invoicing.core.exceptions import InvoiceError
from invoicing.api import api_router, invoice_error_handler
import invoicing.models  # noqa: F401  (register tables)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("invoicing")

# Lifespan for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Create tables if not exist
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.APP_NAME} starting on port {settings.APP_PORT}")
    yield
    logger.info(f"{settings.APP_NAME} shutting down")

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Tax invoice generation, numbering and PDF delivery",
    version="1.0.0",
    lifespan=lifespan
)

app.add_exception_handler(InvoiceError, invoice_error_handler)
app.include_router(api_router, prefix="/api")

# Health check
@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.APP_NAME}

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.DEBUG
    )
