"""
Shared fixtures.

No test talks to a real platform: FakePlatform keeps rows in memory and
records every call so tests can assert on what was (or was not) sent.
"""

import itertools
from datetime import datetime, timezone
from typing import Optional

import pytest

from cashbook.config import get_settings
from cashbook.models.session import Session
from cashbook.services.platform.interface import (
    AuthenticationError,
    DataPlatform,
    RecordError,
    StorageError,
)


class FakePlatform(DataPlatform):
    """In-memory DataPlatform that records calls and can be told to fail."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.objects: dict[tuple[str, str], tuple[bytes, str]] = {}
        self.calls: list[tuple] = []
        self.insert_error: Optional[str] = None
        self.insert_errors: dict[str, str] = {}
        self.auth_error: Optional[str] = None
        self.storage_error: Optional[str] = None
        self.query_rows: Optional[list[dict]] = None
        self._ids = itertools.count(1)

    def insert(self, collection: str, record: dict) -> dict:
        return self.insert_many(collection, [record])[0]

    def insert_many(self, collection: str, records: list[dict]) -> list[dict]:
        self.calls.append(("insert", collection, records))
        message = self.insert_errors.get(collection) or self.insert_error
        if message:
            raise RecordError(message)
        stored = []
        for record in records:
            row = {
                "id": f"{collection}-{next(self._ids)}",
                "created_at": datetime.now(timezone.utc).isoformat(),
                **record,
            }
            self.tables.setdefault(collection, []).append(row)
            stored.append(row)
        return stored

    def query(self, collection, filters=None, order=None):
        self.calls.append(("query", collection, list(filters or []), list(order or [])))
        if self.query_rows is not None:
            return list(self.query_rows)
        return list(self.tables.get(collection, []))

    def authenticate(self, email: str, password: str) -> Session:
        self.calls.append(("authenticate", email))
        if self.auth_error is not None:
            raise AuthenticationError(self.auth_error)
        return Session(user_id="user-1", email=email, access_token="token")

    def store_object(self, bucket, key, data, content_type):
        self.calls.append(("store_object", bucket, key, content_type))
        if self.storage_error is not None:
            raise StorageError(self.storage_error)
        self.objects[(bucket, key)] = (data, content_type)
        return key

    def public_url(self, bucket, path):
        return f"https://files.example.com/{bucket}/{path}"

    def calls_of(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def platform():
    return FakePlatform()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Run every test without a .env file and with a fresh settings cache."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
        "SUPABASE_SERVICE_ROLE_KEY",
        "STORAGE_BACKEND",
        "RECEIPTS_BUCKET",
        "UPLOAD_PROXY_URL",
        "LOG_LEVEL",
        "LOG_JSON",
        "PORT",
        "HOST",
        "CURRENCY_SYMBOL",
        "MAX_UPLOAD_SIZE_MB",
        "CLOUDINARY_CLOUD_NAME",
        "CLOUDINARY_API_KEY",
        "CLOUDINARY_API_SECRET",
        "CLOUDINARY_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
