"""Logging settings for BoxOffice.

Every structlog event is rendered as one JSON line. Django, Celery and other stdlib loggers go
through ``ProcessorFormatter`` so their records carry the same keys.
"""

import re
import typing as t

import structlog
from decouple import config

from .base import DEBUG, VERSION

ENABLE_OBSERVABILITY = config("ENABLE_OBSERVABILITY", default=True, cast=bool)

SERVICE_NAME = config("SERVICE_NAME", default="boxoffice")
SERVICE_VERSION = VERSION
DEPLOYMENT_ENVIRONMENT = config("DEPLOYMENT_ENVIRONMENT", default="development" if DEBUG else "production")
LOG_LEVEL = config("LOG_LEVEL", default="INFO")

# Substrings of keys whose values never reach the logs.
REDACTED_KEYS = (
    "password",
    "secret",
    "api_key",
    "token",
    "authorization",
    "cookie",
    "account_number",
)
EMAIL_PATTERN = re.compile(r"\b[\w\.-]+@[\w\.-]+\.\w+\b")


def _scrub(data: dict[str, t.Any]) -> dict[str, t.Any]:
    for key, value in list(data.items()):
        lowered = key.lower()
        if any(marker in lowered for marker in REDACTED_KEYS):
            data[key] = "[REDACTED]"
        elif isinstance(value, dict):
            data[key] = _scrub(value)
        elif isinstance(value, str) and "email" not in lowered:
            data[key] = EMAIL_PATTERN.sub("[EMAIL]", value)
    return data


def scrub_pii(logger: t.Any, method_name: str, event_dict: dict[str, t.Any]) -> dict[str, t.Any]:
    """Redact credentials and bank account numbers.

    Email addresses inside free-text values are masked too; keys that name an email keep theirs.
    """
    return _scrub(event_dict)


def add_app_context(logger: t.Any, method_name: str, event_dict: dict[str, t.Any]) -> dict[str, t.Any]:
    event_dict.update(service=SERVICE_NAME, version=SERVICE_VERSION, environment=DEPLOYMENT_ENVIRONMENT)
    return event_dict


SHARED_PROCESSORS: list[t.Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    add_app_context,
    scrub_pii,
]

structlog.configure(
    processors=[
        *SHARED_PROCESSORS[:2],
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        *SHARED_PROCESSORS[2:],
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

# stdlib logger name -> minimum level
_LOGGER_LEVELS = {
    "django": "INFO",
    "django.db.backends": "WARNING",
    "celery": "INFO",
    "urllib3": "WARNING",
}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": structlog.stdlib.ProcessorFormatter,
            "processor": structlog.processors.JSONRenderer(),
            "foreign_pre_chain": SHARED_PROCESSORS,
        },
    },
    "handlers": {"console": {"class": "logging.StreamHandler", "formatter": "json"}},
    "root": {"handlers": ["console"], "level": LOG_LEVEL},
    "loggers": {
        name: {"handlers": ["console"], "level": level, "propagate": False} for name, level in _LOGGER_LEVELS.items()
    },
}
