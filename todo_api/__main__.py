import logging

import uvicorn

from .app import create_app
from .config import Settings
from .logging_setup import setup_logging

logger = logging.getLogger("todo_api")


def main() -> None:
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    app = create_app(settings)
    logger.info("listening on port: %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
