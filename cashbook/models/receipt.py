"""Uploaded receipt: transient bytes on their way to object storage."""

from typing import Optional

from pydantic import BaseModel, Field


DEFAULT_CONTENT_TYPE = "application/octet-stream"


class UploadedReceipt(BaseModel):
    """
    A receipt file before it is stored.
    
    Never persisted as its own record; the caller keeps the public URL
    returned after storage.
    """
    
    filename: str = ""
    data: bytes = Field(..., repr=False)
    content_type: Optional[str] = None
    
    @property
    def size(self) -> int:
        return len(self.data)
    
    @property
    def effective_content_type(self) -> str:
        return self.content_type or DEFAULT_CONTENT_TYPE
