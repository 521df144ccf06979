"""
Logging Setup - Project Evaluation Platform
project_eval/core/logging.py

Configures stdlib logging and structlog from LOG_LEVEL / LOG_FORMAT.
"""

import logging
from typing import Optional

import structlog

from project_eval.config import Settings, settings as default_settings


def configure_logging(app_settings: Optional[Settings] = None) -> None:
    """Configure stdlib logging and route structlog through it."""
    cfg = app_settings or default_settings
    level = logging.DEBUG if cfg.DEBUG else getattr(logging, cfg.LOG_LEVEL)

    logging.basicConfig(
        level=level,
        format="%(message)s" if cfg.LOG_FORMAT == "json" else "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if cfg.LOG_FORMAT == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
