import logging
import sys

import uvicorn

from aliascheck.dns import ConfigError
from aliascheck.server._app import create_app
from aliascheck.server._settings import ServiceSettings

logger = logging.getLogger("aliascheck.server")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] - %(name)s - %(message)s",
    )


def main() -> int:
    settings = ServiceSettings()
    configure_logging(settings.log_level)

    try:
        app = create_app(settings)
    except ConfigError as exc:
        logger.critical(f"Error loading root config: {exc}")
        return 1

    logger.info(f"Listening on {settings.host}:{settings.port}")
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
