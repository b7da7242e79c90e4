"""
Logging configuration for the Dynamic Pricing AI backend.

Environment Variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default INFO)
    LOG_FORMAT: 'text' (default) or 'json' for one JSON object per line
"""
import logging
import os
import sys

from flask import g, has_request_context
from pythonjsonlogger import jsonlogger

TEXT_FORMAT = '%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s'
JSON_FORMAT = '%(asctime)s %(levelname)s %(name)s %(request_id)s %(message)s'

_configured = False


class RequestIdFilter(logging.Filter):
    """Attach the current request ID (or '-') to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = '-'
        if has_request_context():
            request_id = getattr(g, 'request_id', None) or '-'
        record.request_id = request_id
        return True


def build_formatter(fmt: str) -> logging.Formatter:
    """Text formatter, or a JSON formatter that also renders `extra` fields."""
    if fmt == 'json':
        return jsonlogger.JsonFormatter(JSON_FORMAT)
    return logging.Formatter(TEXT_FORMAT)


def setup_logging(level: str = None, fmt: str = None) -> None:
    """
    Configure root logging once per process.

    Args:
        level: Log level name, falls back to LOG_LEVEL
        fmt: 'text' or 'json', falls back to LOG_FORMAT
    """
    global _configured
    if _configured:
        return

    level = (level or os.getenv('LOG_LEVEL', 'INFO')).upper()
    fmt = (fmt or os.getenv('LOG_FORMAT', 'text')).lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(build_formatter(fmt))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level, logging.INFO))

    # Keep HTTP client chatter out of INFO logs
    for noisy in ('httpx', 'httpcore', 'urllib3', 'openai'):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _configured = True
