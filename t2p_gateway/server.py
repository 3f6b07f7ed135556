"""Command-line entry point: load settings and serve the gateway with uvicorn."""

import logging
import sys

import uvicorn

from t2p_gateway.app import create_app
from t2p_gateway.config import load_settings
from t2p_gateway.errors import ConfigurationError

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    logger.info("Server is running at http://localhost:%d", settings.port)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
