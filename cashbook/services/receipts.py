"""
Receipt Upload Service

Turns an uploaded receipt into a public URL, either through the upload relay
(when an upload proxy URL is configured) or by writing straight to object
storage. Both paths name the object the same way:

    receipt-<epoch milliseconds>.<extension>

where the extension is the original filename's suffix after the last '.',
or 'jpg' when there is none.
"""

import time
from abc import ABC, abstractmethod
from typing import Optional

import requests
import structlog

from cashbook.audit import AuditLogger
from cashbook.models.receipt import UploadedReceipt
from cashbook.services.platform.interface import (
    ObjectStorageInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)

DEFAULT_EXTENSION = "jpg"
UPLOAD_PATH = "/upload-receipt"


def receipt_extension(filename: Optional[str]) -> str:
    if filename and "." in filename:
        extension = filename.rsplit(".", 1)[1]
        if extension:
            return extension
    return DEFAULT_EXTENSION


def receipt_key(filename: Optional[str], now_ms: Optional[int] = None) -> str:
    """Storage key for a receipt, derived from the current time."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"receipt-{now_ms}.{receipt_extension(filename)}"


class ReceiptUploadError(Exception):
    """Receipt could not be stored; message is shown to the user."""
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ReceiptUploader(ABC):
    """Stores a receipt and returns its public URL."""
    
    @abstractmethod
    def upload(self, receipt: UploadedReceipt) -> str:
        """
        Raises:
            ReceiptUploadError: If the receipt could not be stored
        """
        pass


class RelayReceiptUploader(ReceiptUploader):
    """Posts the receipt to the upload relay as multipart form data."""
    
    def __init__(self, base_url: str, session: Optional[requests.Session] = None):
        self._url = base_url.rstrip("/") + UPLOAD_PATH
        self._session = session or requests.Session()
    
    def upload(self, receipt: UploadedReceipt) -> str:
        files = {
            "file": (
                receipt.filename or "receipt",
                receipt.data,
                receipt.effective_content_type,
            )
        }
        try:
            response = self._session.post(self._url, files=files)
        except requests.RequestException as e:
            logger.warning("upload_proxy_unreachable", url=self._url, error=str(e))
            raise ReceiptUploadError(f"Upload proxy failed: {e}")
        
        if not response.ok:
            raise ReceiptUploadError(f"Upload proxy failed: {response.text}")
        
        try:
            public_url = response.json().get("publicUrl")
        except ValueError:
            public_url = None
        if not public_url:
            raise ReceiptUploadError("Upload proxy returned no public URL")
        return public_url


class StorageReceiptUploader(ReceiptUploader):
    """Writes the receipt directly to object storage."""
    
    def __init__(
        self,
        storage: ObjectStorageInterface,
        bucket: str = "receipts",
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._bucket = bucket
        self._audit_logger = audit_logger
    
    def upload(self, receipt: UploadedReceipt) -> str:
        key = receipt_key(receipt.filename)
        try:
            path = self._storage.store_object(
                self._bucket,
                key,
                receipt.data,
                receipt.effective_content_type,
            )
        except StorageError as e:
            if self._audit_logger:
                self._audit_logger.log_receipt_upload_failed(key, e.message)
            raise ReceiptUploadError(f"Upload failed: {e.message}")
        
        public_url = self._storage.public_url(self._bucket, path)
        if self._audit_logger:
            self._audit_logger.log_receipt_uploaded(key, receipt.size, public_url)
        return public_url


def build_receipt_uploader(
    upload_proxy_url: str,
    storage: ObjectStorageInterface,
    bucket: str = "receipts",
    audit_logger: Optional[AuditLogger] = None,
) -> ReceiptUploader:
    """Relay when an upload proxy URL is configured, direct storage otherwise."""
    if upload_proxy_url.strip():
        return RelayReceiptUploader(upload_proxy_url.strip())
    return StorageReceiptUploader(storage, bucket, audit_logger)
