"""Console logging for applications using the Hacker News client.

Library modules only create loggers with ``logging.getLogger(__name__)`` and
attach request context as ``extra={"extra_fields": {...}}``. Applications
(and the example scripts) call :func:`setup_logging` once to get a stdout
handler that renders that context.
"""

import json
import logging
import sys
from typing import Any

from src.utils.config import get_settings

# httpx logs every request at INFO; keep it quiet unless we are debugging
NOISY_LOGGERS = ("httpx", "httpcore")

TEXT_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s%(context)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _request_context(record: logging.LogRecord) -> dict[str, Any]:
    return dict(getattr(record, "extra_fields", None) or {})


class JsonFormatter(logging.Formatter):
    """One JSON object per line, request context merged at the top level."""

    def __init__(self, app_name: str, environment: str) -> None:
        super().__init__()
        self.app_name = app_name
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "app_name": self.app_name,
            "environment": self.environment,
            **_request_context(record),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class StandardFormatter(logging.Formatter):
    """Text lines; request context is appended as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__(fmt=TEXT_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        context = _request_context(record)
        record.context = "".join(f" {key}={value}" for key, value in context.items())
        return super().format(record)


_logging_configured = False


def _is_our_handler(handler: logging.Handler) -> bool:
    return isinstance(handler, logging.StreamHandler) and handler.stream == sys.stdout


def setup_logging(
    use_json: bool = False,
    force_reconfigure: bool = False,
    level: str | None = None,
) -> None:
    """
    Attach a stdout handler to the root logger.

    Idempotent unless ``force_reconfigure`` is set; other root handlers
    (pytest's caplog, for one) are left in place.

    Args:
        use_json: Emit JSON lines instead of text.
        force_reconfigure: Replace an existing configuration.
        level: Level name overriding LOG_LEVEL.
    """
    global _logging_configured

    if _logging_configured and not force_reconfigure:
        return

    settings = get_settings()
    level_name = (level or settings.LOG_LEVEL).upper()
    log_level = logging.getLevelName(level_name)

    root_logger = logging.getLogger()
    for handler in [h for h in root_logger.handlers if _is_our_handler(h)]:
        root_logger.removeHandler(handler)

    if use_json:
        formatter: logging.Formatter = JsonFormatter(settings.APP_NAME, settings.ENVIRONMENT)
    else:
        formatter = StandardFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    root_logger.setLevel(log_level)

    transport_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)

    _logging_configured = True
    logging.getLogger(__name__).debug(
        f"Logging configured: level={level_name}, format={'json' if use_json else 'text'}"
    )


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)``, configuring logging on first use."""
    if not _logging_configured:
        setup_logging()
    return logging.getLogger(name)


def reset_logging() -> None:
    """Drop all root handlers and transport levels. Used by tests."""
    global _logging_configured

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)

    _logging_configured = False
