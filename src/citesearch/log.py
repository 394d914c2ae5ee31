"""Rich console logging for citesearch.

Call setup_logging() once when the API or CLI starts; modules take a
"citesearch.<name>" logger from get_logger().
"""

import logging
from rich.logging import RichHandler
from .config import get_settings

def setup_logging():
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)]
    )

    # Every upstream call goes through httpx; one line per request is too much
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

def get_logger(name: str):
    return logging.getLogger(f"citesearch.{name}")
