"""Logging helpers and filters.

Centralizes the small amount of logging setup globalenv needs so that
library callers and tests get the same behaviour.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from globalenv.observability.redaction import sanitize

if TYPE_CHECKING:
    from globalenv.config import GlobalEnvConfig

PACKAGE_LOGGER = "globalenv"

# Logger filters do not run for records propagated from child loggers,
# so the filter goes on every module logger that emits values.
PACKAGE_LOGGERS = (
    "globalenv.store",
    "globalenv.backends.rc_file",
    "globalenv.backends.registry",
)


class RedactSecretsFilter(logging.Filter):
    """Scrub token-looking values from record arguments.

    Store and backends already redact the values they log; this catches
    anything else (exception messages, URLs with credentials) passed as
    a log argument.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (filter)
        args: Any = record.args
        if isinstance(args, tuple):
            record.args = tuple(sanitize(a) for a in args)
        elif isinstance(args, dict):
            record.args = sanitize(args)
        return True


def install_log_filters(logger_names: tuple[str, ...] = PACKAGE_LOGGERS) -> None:
    """Install the redaction filter on each of *logger_names*.

    Safe to call multiple times.
    """

    for name in logger_names:
        logger = logging.getLogger(name)
        if any(isinstance(f, RedactSecretsFilter) for f in logger.filters):
            continue
        logger.addFilter(RedactSecretsFilter())


def remove_log_filters(logger_names: tuple[str, ...] = PACKAGE_LOGGERS) -> None:
    """Remove the redaction filter from each of *logger_names*.

    Safe to call when no filter is installed.
    """

    for name in logger_names:
        logger = logging.getLogger(name)
        for existing in list(logger.filters):
            if isinstance(existing, RedactSecretsFilter):
                logger.removeFilter(existing)


def configure_logging(config: "GlobalEnvConfig") -> logging.Logger:
    """Apply the configured level and redaction policy to the package loggers.

    Opt-in: call once from the application entry point. The store never
    calls this, so a host application's logging setup is left alone.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    level = getattr(logging, str(config.log_level).upper(), logging.WARNING)
    logger.setLevel(level)

    if config.redact_values:
        install_log_filters()
    else:
        remove_log_filters()
    return logger
