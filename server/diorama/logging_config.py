# ─────────────────────────────────────────────────────────────────────────────
# Logging Configuration — structlog over stdlib logging, API keys redacted
# ─────────────────────────────────────────────────────────────────────────────
# Imagery requests carry the Maps key as a `key=` query parameter, and that
# URL shows up in httpx's own request lines and in HTTPStatusError messages.
# Redaction runs in the formatter, so it covers structlog events and
# third-party stdlib records alike.
# ─────────────────────────────────────────────────────────────────────────────

import logging
import re
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

REDACTED = "[REDACTED]"

_KEY_PARAM = re.compile(r"([?&](?:key|api_key|apikey)=)[^&#\s'\"]+", re.IGNORECASE)


def redact_api_keys(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask API-key query parameters in every string field of the event."""
    for field, value in event_dict.items():
        if isinstance(value, str) and "key=" in value.lower():
            event_dict[field] = _KEY_PARAM.sub(rf"\g<1>{REDACTED}", value)
    return event_dict


def configure_logging(log_level: str = "INFO", json_output: bool = True) -> None:
    """Configure structlog for structured logging.

    JSON output emits one parseable object per line (timestamp, level,
    logger name, structured fields). Console output is for local development.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    # Tracebacks become text before redaction so URLs inside exception
    # messages are masked too. ConsoleRenderer formats exc_info itself.
    renderer_chain: list[structlog.types.Processor] = (
        [structlog.processors.format_exc_info, redact_api_keys, structlog.processors.JSONRenderer()]
        if json_output
        else [redact_api_keys, structlog.dev.ConsoleRenderer()]
    )

    # shared_processors already ran in structlog.configure() for structlog
    # events; foreign_pre_chain applies them to stdlib records only.
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderer_chain,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper()))

    # One INFO line per outbound call is noise; failures still come through.
    logging.getLogger("httpx").setLevel(logging.WARNING)
