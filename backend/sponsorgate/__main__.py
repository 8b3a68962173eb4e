"""Run the sponsorgate API server."""

import logging
import sys

import uvicorn

from sponsorgate.api.app import create_app
from sponsorgate.config import Settings
from sponsorgate.errors import ConfigurationError

logger = logging.getLogger("sponsorgate")


def main() -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        logger.error(f"Refusing to start: {e}")
        return 1

    app = create_app(settings=settings)
    logger.info(f"Starting server on port {settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
