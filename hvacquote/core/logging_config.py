# hvacquote/core/logging_config.py
import logging
import sys
from typing import Optional

import structlog

from hvacquote.core.settings import Settings, settings as default_settings


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    structlog over stdlib logging, JSON lines on stdout.

    Context bound with `structlog.contextvars` (the request id, see
    RequestIdMiddleware) is merged into every event, so pricing and promo
    events logged deep in a request still carry it.
    """
    settings = settings or default_settings
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=settings.APP_NAME)


logger = structlog.get_logger("hvacquote")
