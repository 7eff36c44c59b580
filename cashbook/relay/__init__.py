"""Receipt upload relay."""

from cashbook.relay.app import build_object_storage, create_app

__all__ = ["build_object_storage", "create_app"]
