"""
Supabase Storage Client - Invoice PDF upload and asset download over the
Storage REST API

Object layout: <bucket>/invoices/YYYY/MM/INV-<invoice_number>.pdf
"""
import httpx
import logging
from typing import Optional, Tuple

from invoicing.core.config import settings
from invoicing.core.exceptions import StorageError, UploadError
from invoicing.services.numbering_service import parse_invoice_number
from .base import InvoiceStorage

logger = logging.getLogger(__name__)


def build_invoice_path(invoice_number: str) -> str:
    """invoices/YYYY/MM/INV-<invoice_number>.pdf, dated by the invoice number"""
    issue_day, _ = parse_invoice_number(invoice_number)
    return f"invoices/{issue_day.year:04d}/{issue_day.month:02d}/INV-{invoice_number}.pdf"


PUBLIC_OBJECT_PREFIX = "/storage/v1/object/public/"


def parse_public_url(url: str) -> Optional[Tuple[str, str]]:
    """(bucket, path) of a public Storage object URL, None for anything else"""
    try:
        path = httpx.URL(url).path
    except httpx.InvalidURL:
        return None
    if not path.startswith(PUBLIC_OBJECT_PREFIX):
        return None
    bucket, _, object_path = path[len(PUBLIC_OBJECT_PREFIX):].partition("/")
    if not bucket or not object_path:
        return None
    return bucket, object_path


class SupabaseStorage(InvoiceStorage):

    def __init__(
        self,
        base_url: str = settings.STORAGE_URL,
        api_key: str = settings.STORAGE_KEY,
        bucket: str = settings.STORAGE_BUCKET,
        timeout: float = settings.STORAGE_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.bucket = bucket
        self.timeout = timeout
        self._client = client

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "apikey": self.api_key,
        }

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{path}"

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        if self._client is not None:
            return await self._client.request(method, url, timeout=self.timeout, **kwargs)
        async with httpx.AsyncClient() as client:
            return await client.request(method, url, timeout=self.timeout, **kwargs)

    async def upload(self, document: bytes, invoice_number: str, overwrite: bool = False) -> str:
        try:
            path = build_invoice_path(invoice_number)
        except ValueError as e:
            raise UploadError(f"Failed to upload PDF to Storage: {e}") from e

        logger.debug(f"Uploading invoice PDF to {self.bucket}/{path}")
        headers = {
            **self._headers(),
            "Content-Type": "application/pdf",
            "cache-control": "max-age=3600",
            "x-upsert": "true" if overwrite else "false",
        }

        try:
            response = await self._request(
                "POST",
                f"{self.base_url}/storage/v1/object/{self.bucket}/{path}",
                content=document,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error(f"Failed to upload invoice PDF {path}: {e}")
            raise UploadError(f"Failed to upload PDF to Storage: {e}") from e

        if response.status_code not in (200, 201):
            logger.error(f"Failed to upload invoice PDF {path}: HTTP {response.status_code} {response.text}")
            raise UploadError(
                f"Failed to upload PDF to Storage: HTTP {response.status_code}",
                details={"path": path, "response": response.text[:500]}
            )

        url = self.public_url(path)
        logger.info(f"Invoice PDF uploaded: {path} ({len(document)} bytes)")
        return url

    def _own_object(self, url: str) -> Optional[Tuple[str, str]]:
        """(bucket, path) when url is a public object of this Storage instance"""
        target = parse_public_url(url)
        if target is None:
            return None
        requested, base = httpx.URL(url), httpx.URL(self.base_url)
        if (requested.scheme, requested.host, requested.port) != (base.scheme, base.host, base.port):
            return None
        return target

    async def download(self, url: str) -> bytes:
        target = self._own_object(url)
        if target is not None:
            bucket, path = target
            request_url, headers = f"{self.base_url}/storage/v1/object/{bucket}/{path}", self._headers()
        else:
            # Foreign host: never send the service key
            request_url, headers = url, {}

        try:
            response = await self._request("GET", request_url, headers=headers)
        except httpx.HTTPError as e:
            raise StorageError(f"Failed to fetch file: {e}", details={"url": url}) from e

        if response.status_code != 200:
            raise StorageError(
                f"Failed to fetch file ({response.status_code})",
                details={"url": url}
            )
        return response.content

    async def fetch_logo(self, logo_url: str) -> Optional[bytes]:
        """Logo bytes for the invoice header, None when unavailable"""
        try:
            content = await self.download(logo_url)
        except StorageError as e:
            logger.warning(f"Failed to fetch logo from Storage: {e.message}")
            return None
        if not content:
            logger.warning(f"Logo file is empty: {logo_url}")
            return None
        return content

    async def delete(self, url: str) -> bool:
        """Remove a stored PDF (cleanup before a regeneration, or a cancelled invoice)"""
        target = self._own_object(url)
        if target is None:
            logger.warning(f"Invalid PDF URL format for deletion: {url}")
            return False

        bucket, path = target
        logger.debug(f"Deleting invoice PDF from {bucket}/{path}")
        try:
            response = await self._request(
                "DELETE",
                f"{self.base_url}/storage/v1/object/{bucket}",
                json={"prefixes": [path]},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.warning(f"Failed to delete invoice PDF {path}: {e}")
            return False

        if response.status_code != 200:
            logger.warning(f"Failed to delete invoice PDF {path}: HTTP {response.status_code} {response.text}")
            return False

        logger.info(f"Invoice PDF deleted: {path}")
        return True
