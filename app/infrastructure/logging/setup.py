"""Structlog configuration and logger setup.

Logging is configured once on import: structlog renders events through the
stdlib ``logging`` root logger, as colored console lines in development and
JSON in production. Under pytest every record is dropped.

Usage:
    from infrastructure.logging import get_module_logger

    logger = get_module_logger()
    logger.info("bundle_written", bundle=name, entries=count)

Dependencies:
    - infrastructure.configuration.settings (LOG_LEVEL, is_production)
"""

import inspect
import logging
import sys
from types import FrameType
from typing import Any, List, Optional

import structlog
from structlog.stdlib import BoundLogger

from infrastructure.configuration import settings

# Records below this level are never emitted while tests run
_SILENT_LEVEL = logging.CRITICAL + 1


def _is_test_environment() -> bool:
    """Detect if running in a test environment.

    Returns:
        True if pytest is in sys.modules, False otherwise
    """
    return "pytest" in sys.modules


def _build_processors(prod_mode: bool) -> List[Any]:
    renderer = (
        structlog.processors.JSONRenderer()
        if prod_mode
        else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        # Background requests run on executor threads
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.THREAD_NAME,
            ]
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structured logging.

    Args:
        log_level: Level name overriding settings.LOG_LEVEL.
        is_production: Overrides settings.is_production; selects JSON output.

    Returns:
        Configured logger instance
    """
    if _is_test_environment():
        processors: List[Any] = [
            structlog.stdlib.add_log_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ]
        level = _SILENT_LEVEL
        force = True
    else:
        prod_mode = is_production if is_production is not None else settings.is_production
        processors = _build_processors(prod_mode)
        level_name = (log_level or settings.LOG_LEVEL).upper()
        level = getattr(logging, level_name, logging.INFO)
        force = False

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=level, force=force)

    return structlog.stdlib.get_logger()


# Module-level logger (auto-configured on import)
logger: BoundLogger = configure_logging()


def _caller_module_name(frame: Optional[FrameType]) -> Optional[str]:
    """Module name of the code that called the function running in ``frame``."""
    caller = frame.f_back if frame is not None else None
    if caller is None:
        return None
    module = inspect.getmodule(caller)
    return module.__name__ if module else None


def get_logger(name: Optional[str] = None) -> BoundLogger:
    """Get a logger bound to ``logger_name``.

    Args:
        name: Logger name; defaults to the calling module's name.
    """
    if name:
        return logger.bind(logger_name=name)
    return logger.bind(
        logger_name=_caller_module_name(inspect.currentframe()) or "unknown"
    )


def get_module_logger() -> BoundLogger:
    """Get a logger for the calling module.

    Binds ``component`` (last dotted part) and ``module_path`` (full name).

    Example:
        # In modules/lexicon/bundle_store.py
        logger = get_module_logger()
        # context: {"component": "bundle_store", "module_path": "modules.lexicon.bundle_store"}
    """
    module_name = _caller_module_name(inspect.currentframe())
    if module_name is None:
        return logger.bind(component="unknown")
    return logger.bind(component=module_name.split(".")[-1], module_path=module_name)
