from __future__ import annotations

import logging
import os

import uvicorn

from app.config import load_settings
from app.ui.http.main import create_app


def main() -> None:
    """
    Entry point for the task tracker API.

    Settings are read once here; everything below receives them by injection.
    """
    pid = os.getpid()

    settings = load_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - [PID:%(process)d] - %(message)s'
    )

    logger = logging.getLogger(__name__)

    logger.info("=" * 60)
    logger.info("API starting - PID: %s", pid)
    logger.info("=" * 60)

    try:
        app = create_app(settings)
        logger.info("Listening on %s:%s", settings.host, settings.port)
        uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    except KeyboardInterrupt:
        logger.info("API stopped by user - PID: %s", pid)
    except Exception:
        logger.error("API crashed - PID: %s", pid, exc_info=True)
        raise
    finally:
        logger.info("API shutdown complete - PID: %s", pid)


if __name__ == "__main__":
    main()
