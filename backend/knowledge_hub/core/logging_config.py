import logging
import sys
from opentelemetry import trace
from ..config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class TraceContextFormatter(logging.Formatter):
    """
    Formatter that appends the active OpenTelemetry trace id to each record

    Lines logged while a recording span is active end with ``[trace_id=...]``
    so they can be matched against exported traces.
    """

    def format(self, record):
        message = super().format(record)
        span = trace.get_current_span()
        if span is None or not span.is_recording():
            return message
        span_context = span.get_span_context()
        if not span_context or not span_context.trace_id:
            return message
        # First 16 hex chars of the 128-bit trace id are enough to correlate
        trace_id = format(span_context.trace_id, "032x")[:16]
        return f"{message} [trace_id={trace_id}]"


def setup_logging():
    """Configure root logging for the application"""
    log_level = settings.log_level.upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(TraceContextFormatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        handlers=[handler],
        force=True,
    )

    # Quieten noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured with level: {log_level}")
