"""
Supabase Data Platform Implementation

Wraps the supabase client so the rest of the application only ever sees
plain dicts, Session models and PlatformError subclasses. The client is
constructed once from configuration and shared read-only.
"""

from typing import Optional, Sequence

import structlog
from postgrest.exceptions import APIError
from storage3.utils import StorageException
from supabase import AuthError, Client, create_client

from cashbook.models.session import Session
from cashbook.services.platform.interface import (
    AuthenticationError,
    DataPlatform,
    Filter,
    Order,
    PlatformConfigurationError,
    RecordError,
    StorageError,
)


logger = structlog.get_logger(__name__)

_FILTER_OPS = {"eq", "gte", "lte"}


def _storage_message(error: StorageException) -> str:
    """The upstream message; str() of a storage error is a formatted dict."""
    return getattr(error, "message", None) or str(error)


class SupabasePlatform(DataPlatform):
    """
    Supabase implementation of the data platform.
    
    Rows live in Postgres tables reached through PostgREST, sessions come
    from Supabase Auth, and receipts are written to Supabase Storage.
    """
    
    def __init__(self, url: str, key: str, client: Optional[Client] = None):
        if client is None:
            try:
                client = create_client(url, key)
            except Exception as e:
                # The SDK raises its own exception type for a malformed URL or key.
                raise PlatformConfigurationError(str(e)) from e
        self._client = client
    
    @classmethod
    def from_settings(cls, settings) -> "SupabasePlatform":
        """Build the UI's client from SupabaseSettings (anon key)."""
        return cls(settings.url, settings.anon_key)
    
    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------
    
    def insert(self, collection: str, record: dict) -> dict:
        rows = self.insert_many(collection, [record])
        if not rows:
            raise RecordError(f"Insert into {collection} returned no row")
        return rows[0]
    
    def insert_many(self, collection: str, records: list[dict]) -> list[dict]:
        try:
            response = self._client.table(collection).insert(records).execute()
        except APIError as e:
            logger.warning("platform_insert_failed", collection=collection, error=e.message)
            raise RecordError(e.message or str(e))
        return list(response.data or [])
    
    def query(
        self,
        collection: str,
        filters: Optional[Sequence[Filter]] = None,
        order: Optional[Sequence[Order]] = None,
    ) -> list[dict]:
        request = self._client.table(collection).select("*")
        for column, op, value in filters or ():
            if op not in _FILTER_OPS:
                raise ValueError(f"Unsupported filter operator: {op}")
            request = getattr(request, op)(column, value)
        for column, descending in order or ():
            request = request.order(column, desc=descending)
        
        try:
            response = request.execute()
        except APIError as e:
            logger.warning("platform_query_failed", collection=collection, error=e.message)
            raise RecordError(e.message or str(e))
        return list(response.data or [])
    
    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    
    def authenticate(self, email: str, password: str) -> Session:
        try:
            response = self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            raise AuthenticationError(e.message or "Failed to login")
        
        if response.user is None or response.session is None:
            raise AuthenticationError("Failed to login")
        
        return Session(
            user_id=str(response.user.id),
            email=response.user.email,
            access_token=response.session.access_token,
        )
    
    # ------------------------------------------------------------------
    # Object storage
    # ------------------------------------------------------------------
    
    def store_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
    ) -> str:
        try:
            response = self._client.storage.from_(bucket).upload(
                path=key,
                file=data,
                file_options={"content-type": content_type},
            )
        except StorageException as e:
            raise StorageError(_storage_message(e))
        # Older storage clients return the raw HTTP response instead.
        return getattr(response, "path", None) or key
    
    def public_url(self, bucket: str, path: str) -> str:
        return self._client.storage.from_(bucket).get_public_url(path)
