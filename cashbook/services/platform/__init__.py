"""
Data Platform Package

Provides the abstract interfaces the application talks to and their
concrete implementations (Supabase for everything, Cloudinary for objects).
"""

from cashbook.services.platform.interface import (
    AuthInterface,
    AuthenticationError,
    DataPlatform,
    Filter,
    ObjectStorageInterface,
    Order,
    PlatformConfigurationError,
    PlatformError,
    RecordError,
    RecordStoreInterface,
    StorageError,
)

__all__ = [
    # Interfaces
    "AuthInterface",
    "DataPlatform",
    "ObjectStorageInterface",
    "RecordStoreInterface",
    "Filter",
    "Order",
    # Exceptions
    "AuthenticationError",
    "PlatformConfigurationError",
    "PlatformError",
    "RecordError",
    "StorageError",
]
