"""
HeroForge Server - Main Application Entry Point.

Logging is configured before the application is built so that startup
messages use the configured renderer.
"""

import uvicorn

from .app.factory import create_app
from .config import get_config
from .structured_logging.enhanced_logging_config import get_logger, setup_enhanced_logging

config = get_config()
setup_enhanced_logging(config.to_legacy_dict())

logger = get_logger(__name__)
logger.info("Logging setup completed", environment=config.logging.environment)

app = create_app()


def main() -> None:
    """Run the server with uvicorn."""
    logger.info("Starting uvicorn", host=config.server.host, port=config.server.port)
    uvicorn.run(
        "heroforge.main:app",
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
