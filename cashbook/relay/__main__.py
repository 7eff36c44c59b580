"""
Upload relay entry point.

    python -m cashbook.relay

Refuses to start, with exit status 1, when the storage endpoint or
credential is not configured.
"""

import sys

import structlog
import uvicorn

from cashbook.audit import configure_logging
from cashbook.config import get_settings
from cashbook.relay.app import build_object_storage, create_app
from cashbook.services.platform.interface import PlatformConfigurationError


logger = structlog.get_logger("cashbook.relay")


def main() -> None:
    settings = get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level, app_settings.log_json)
    
    try:
        relay_settings = settings.relay
        storage = build_object_storage(settings)
    except (ValueError, PlatformConfigurationError) as e:
        logger.error("relay_config_invalid", error=str(e))
        sys.exit(1)
    
    app = create_app(storage, bucket=relay_settings.receipts_bucket)
    logger.info(
        "relay_starting",
        host=relay_settings.host,
        port=relay_settings.port,
        backend=relay_settings.storage_backend,
    )
    uvicorn.run(app, host=relay_settings.host, port=relay_settings.port)


if __name__ == "__main__":
    main()
