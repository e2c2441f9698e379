import logging
import sys

import structlog

from core.config import LOG_LEVEL

_configured = False


def setup_logging(level: str = LOG_LEVEL):
    """Configure structlog on top of the stdlib root logger (once)."""
    global _configured
    if _configured:
        return

    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    _configured = True


def get_logger(name: str | None = None):
    setup_logging()
    return structlog.get_logger(name)
