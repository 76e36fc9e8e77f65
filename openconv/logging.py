import logging
import os
import sys

import structlog


def setup_logging(level: str | None = None, debug: bool = False) -> None:
    """Configure structlog with JSON output.

    The level falls back to the ``OPENCONV_LOG_LEVEL`` environment variable and
    then to ``INFO``. Passing ``debug=True`` forces ``DEBUG``.
    """
    if debug:
        level_no = logging.DEBUG
    else:
        level_name = (level or os.getenv("OPENCONV_LOG_LEVEL", "INFO")).upper()
        level_no = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(level=level_no, stream=sys.stdout)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )
