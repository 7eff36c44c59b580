"""
Upload Relay Application

A stateless FastAPI service: the only thing shared between requests is the
object storage handle, which is never modified after start-up.
"""

from typing import Optional

from fastapi import FastAPI

from cashbook.audit import AuditLogger
from cashbook.config import Settings
from cashbook.relay.routes import router
from cashbook.services.platform.interface import ObjectStorageInterface


def create_app(
    storage: ObjectStorageInterface,
    bucket: str = "receipts",
    audit_logger: Optional[AuditLogger] = None,
) -> FastAPI:
    """Build the relay around an already configured storage handle."""
    app = FastAPI(title="Cashbook Upload Relay")
    app.state.storage = storage
    app.state.bucket = bucket
    app.state.audit_logger = audit_logger or AuditLogger()
    app.include_router(router)
    return app


def build_object_storage(settings: Settings) -> ObjectStorageInterface:
    """
    Construct the storage backend named by STORAGE_BACKEND.
    
    Raises:
        pydantic.ValidationError: If the backend's settings are missing
            or malformed
        PlatformConfigurationError: If the SDK rejects them
    """
    relay = settings.relay
    if relay.storage_backend == "cloudinary":
        from cashbook.services.platform.cloudinary_storage import CloudinaryObjectStorage
        
        return CloudinaryObjectStorage.from_settings(settings.cloudinary)
    
    from cashbook.services.platform.supabase_client import SupabasePlatform
    
    return SupabasePlatform(relay.supabase_url, relay.supabase_service_role_key)
