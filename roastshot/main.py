"""Entry point — wires Config → RoastOrchestrator → FastAPI app → uvicorn."""
import logging

import uvicorn

from roastshot.api import create_app
from roastshot.config import Config
from roastshot.constants import MSG_SERVER_STARTING
from roastshot.log import setup_logging


def main() -> None:
    config = Config.from_env()
    setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_SERVER_STARTING, config.host, config.port, config.server_version)

    app = create_app(config)
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
