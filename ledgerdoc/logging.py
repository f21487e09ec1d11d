import logging
import sys
from pathlib import Path

import structlog

from .config import settings


def setup_logging(level: str | None = None):
    """Route structlog events as JSON lines to stdout; errors also go to LOG_ERROR_FILE if set."""
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(log_level)
    handlers = [logging.StreamHandler(sys.stdout)]
    if settings.log_error_file:
        Path(settings.log_error_file).parent.mkdir(parents=True, exist_ok=True)
        error_handler = logging.FileHandler(settings.log_error_file)
        error_handler.setLevel(logging.ERROR)
        handlers.append(error_handler)
    for handler in handlers:
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )
