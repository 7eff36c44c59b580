"""
Abstract Data Platform Interface

All persistence, authentication and object storage is delegated to a hosted
platform. The application reaches it only through these three small
interfaces, which allows us to:
1. Use in-memory fakes for testing
2. Swap the object storage backend under the upload relay
3. Keep business logic decoupled from the platform SDK

The interface is intentionally minimal - insert, query, authenticate,
store an object, resolve its public URL. Nothing is updated or deleted.
"""

from abc import ABC, abstractmethod
from typing import Any, Literal, Optional, Sequence

from cashbook.models.session import Session


FilterOp = Literal["eq", "gte", "lte"]
Filter = tuple[str, FilterOp, Any]
Order = tuple[str, bool]


class RecordStoreInterface(ABC):
    """Row insert/query against named collections."""
    
    @abstractmethod
    def insert(self, collection: str, record: dict) -> dict:
        """
        Insert one row.
        
        Returns:
            The stored row, including platform-assigned id and created_at
            
        Raises:
            RecordError: If the platform rejects the insert
        """
        pass
    
    @abstractmethod
    def insert_many(self, collection: str, records: list[dict]) -> list[dict]:
        """
        Insert several rows in one request.
        
        Raises:
            RecordError: If the platform rejects the insert
        """
        pass
    
    @abstractmethod
    def query(
        self,
        collection: str,
        filters: Optional[Sequence[Filter]] = None,
        order: Optional[Sequence[Order]] = None,
    ) -> list[dict]:
        """
        Select rows from a collection.
        
        Args:
            collection: Collection (table) name
            filters: (column, op, value) triples, combined with AND
            order: (column, descending) pairs, applied in sequence
            
        Raises:
            RecordError: If the query fails
        """
        pass


class AuthInterface(ABC):
    """Password-based session authentication."""
    
    @abstractmethod
    def authenticate(self, email: str, password: str) -> Session:
        """
        Request an authenticated session.
        
        Raises:
            AuthenticationError: If the credentials are rejected
        """
        pass


class ObjectStorageInterface(ABC):
    """Object storage with public URL retrieval."""
    
    @abstractmethod
    def store_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        content_type: str,
    ) -> str:
        """
        Store bytes under a key.
        
        Returns:
            The stored object's path, for use with public_url()
            
        Raises:
            StorageError: If the write fails
        """
        pass
    
    @abstractmethod
    def public_url(self, bucket: str, path: str) -> str:
        """Resolve a caller-resolvable URL for a stored object."""
        pass


class DataPlatform(RecordStoreInterface, AuthInterface, ObjectStorageInterface):
    """A platform offering all three capabilities."""


# =============================================================================
# EXCEPTIONS
# =============================================================================

class PlatformError(Exception):
    """
    Base exception for data platform errors.
    
    The message is the platform's own description of the failure and is
    safe to show to the user unmodified.
    """
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecordError(PlatformError):
    """Insert or query rejected by the platform."""
    pass


class AuthenticationError(PlatformError):
    """Credentials rejected or session could not be created."""
    pass


class StorageError(PlatformError):
    """Object storage write failed."""
    pass


class PlatformConfigurationError(PlatformError):
    """The platform client rejected its endpoint or credential."""
    pass
