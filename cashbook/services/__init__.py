"""Services package."""

from cashbook.services.platform import (
    AuthInterface,
    AuthenticationError,
    DataPlatform,
    ObjectStorageInterface,
    PlatformError,
    RecordError,
    RecordStoreInterface,
    StorageError,
)
from cashbook.services.receipts import (
    ReceiptUploadError,
    ReceiptUploader,
    RelayReceiptUploader,
    StorageReceiptUploader,
    build_receipt_uploader,
    receipt_key,
)

__all__ = [
    # Platform
    "AuthInterface",
    "AuthenticationError",
    "DataPlatform",
    "ObjectStorageInterface",
    "PlatformError",
    "RecordError",
    "RecordStoreInterface",
    "StorageError",
    # Receipts
    "ReceiptUploadError",
    "ReceiptUploader",
    "RelayReceiptUploader",
    "StorageReceiptUploader",
    "build_receipt_uploader",
    "receipt_key",
]
