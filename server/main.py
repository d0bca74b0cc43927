"""Run the bot service with uvicorn."""
import logging

import uvicorn

from api.app import create_app
from config.settings import settings

logger = logging.getLogger(__name__)

app = create_app()


def main():
    logger.info(f"Serving bot turns at http://{settings.HOST}:{settings.PORT}/api/messages")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
