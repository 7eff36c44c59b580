"""Authenticated session returned by the data platform."""

from typing import Optional

from pydantic import BaseModel


class Session(BaseModel):
    user_id: str
    email: Optional[str] = None
    access_token: str
