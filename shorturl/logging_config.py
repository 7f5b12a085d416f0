import logging
import sys

from .settings import settings


def setup_logging(level: str | None = None) -> logging.Logger:
    numeric_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    logger = logging.getLogger("url_shortener")
    logger.setLevel(numeric_level)

    # create_app() may run more than once per process (tests)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)

    logging.getLogger("uvicorn.access").disabled = True

    return logger
