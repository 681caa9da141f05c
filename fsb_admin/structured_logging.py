"""
Structured Logging: Per-subsystem structured logging with JSON output.

Loggers are tagged with a subsystem and correlated by request id. Services
take a SubsystemLogger in their constructor so callers (and tests) decide
where their output goes.
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from enum import Enum
from typing import Any, Dict

# Context variable for request correlation
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

ROOT_LOGGER_NAME = "fsb_admin"


class Subsystem(str, Enum):
    API = "api"
    DB = "db"
    REGISTRY = "registry"
    BROADCAST = "broadcast"


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "subsystem": getattr(record, "subsystem", "general"),
            "message": record.getMessage(),
            "logger": record.name,
        }

        req_id = request_id_var.get("")
        if req_id:
            log_entry["request_id"] = req_id

        extra = getattr(record, "extra_data", None)
        if extra:
            log_entry["data"] = extra

        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(log_entry, default=str)


class SubsystemLogger:
    """Logger wrapper that adds subsystem context."""

    def __init__(self, subsystem: Subsystem, logger: logging.Logger):
        self._subsystem = subsystem
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, msg: str, extra_data: Any = None, **kwargs):
        extra = {"subsystem": self._subsystem.value}
        if extra_data:
            extra["extra_data"] = extra_data
        self._logger.log(level, msg, extra=extra, **kwargs)

    def debug(self, msg: str, data: Any = None, **kwargs):
        self._log(logging.DEBUG, msg, data, **kwargs)

    def info(self, msg: str, data: Any = None, **kwargs):
        self._log(logging.INFO, msg, data, **kwargs)

    def warning(self, msg: str, data: Any = None, **kwargs):
        self._log(logging.WARNING, msg, data, **kwargs)

    def error(self, msg: str, data: Any = None, **kwargs):
        self._log(logging.ERROR, msg, data, **kwargs)

    def critical(self, msg: str, data: Any = None, **kwargs):
        self._log(logging.CRITICAL, msg, data, **kwargs)


# ── Logger Registry ──
_loggers: Dict[str, SubsystemLogger] = {}
_handler: logging.Handler = None


def get_subsystem_logger(subsystem: Subsystem) -> SubsystemLogger:
    """Get a structured logger for a subsystem."""
    key = subsystem.value
    if key not in _loggers:
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{key}")
        _loggers[key] = SubsystemLogger(subsystem, logger)
    return _loggers[key]


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Attach a single stdout handler to the fsb_admin logger tree.

    Calling it again replaces the handler, so the lifespan can run more
    than once in one process (tests).
    """
    global _handler

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is not None:
        root.removeHandler(_handler)

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)s [%(subsystem)s] %(message)s",
                defaults={"subsystem": "general"},
            )
        )

    root.addHandler(handler)
    root.setLevel(level.upper())
    _handler = handler


def set_request_context(request_id: str = ""):
    """Set context variables for the current request."""
    if request_id:
        request_id_var.set(request_id)


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())[:12]


# ── Convenience loggers ──
api_log = get_subsystem_logger(Subsystem.API)
db_log = get_subsystem_logger(Subsystem.DB)
registry_log = get_subsystem_logger(Subsystem.REGISTRY)
broadcast_log = get_subsystem_logger(Subsystem.BROADCAST)
