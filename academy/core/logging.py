"""Structured key=value logging for the Academy cohort service."""

import logging
import sys

# Extra attributes promoted into every log line when a call passes them
CONTEXT_FIELDS = ("participant_id", "task_force", "join_code", "intel_id")


class StructuredFormatter(logging.Formatter):
    """Render records as ``key=value`` pairs, context fields last."""

    def format(self, record: logging.LogRecord) -> str:
        fields = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                fields[name] = value

        line = " ".join(f"{key}={value}" for key, value in fields.items())
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def _level_for_env() -> int:
    try:
        from academy.core.config import get_settings

        env = get_settings().ACADEMY_ENV
    except Exception:
        # Settings can be incomplete in scripts run before .env is loaded
        return logging.INFO
    return logging.DEBUG if env == "dev" else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger writing structured lines to stdout.

    The handler is attached once per logger name; DEBUG in dev, INFO elsewhere.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.setLevel(_level_for_env())
    return logger
