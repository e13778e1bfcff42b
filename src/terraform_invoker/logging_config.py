"""Structured logging setup for the invoker.

Events go to stderr as JSON (for log shipping) or console lines (for humans).
stdout is left to command results such as ``--json`` output.

Usage:
    from terraform_invoker.config import InvokerSettings
    from terraform_invoker.logging_config import setup_logging

    setup_logging(InvokerSettings())
"""

import logging
import sys

import structlog
from structlog.types import Processor

from .config import InvokerSettings


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=False)
    return structlog.dev.ConsoleRenderer(
        colors=False,
        exception_formatter=structlog.dev.plain_traceback,
    )


def setup_logging(settings: InvokerSettings | None = None) -> None:
    """Route structlog events through stdlib logging to stderr.

    Args:
        settings: Source of service name, format and level. Loaded from the
            environment when omitted, so invalid values fail validation.
    """
    settings = settings or InvokerSettings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level),
        force=True,
    )

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=False),
        # service and invocation_id
        structlog.contextvars.merge_contextvars,
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            }
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _renderer(settings.log_format),
    ]

    # Not cached: a host may reconfigure between invocations
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    structlog.contextvars.bind_contextvars(service=settings.service_name)

    structlog.get_logger(__name__).debug(
        "logging_initialized",
        log_format=settings.log_format,
        log_level=settings.log_level,
    )
