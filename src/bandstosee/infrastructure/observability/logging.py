"""Logging setup: JSON or console output, tagged with the request's correlation ID."""

import contextvars
import logging
import sys
import traceback
import uuid
from pathlib import Path
from typing import Any

from pythonjsonlogger import jsonlogger

# One ID per HTTP request. The artist batches run as separate asyncio tasks but copy
# the request's context, so their log lines carry the same ID.
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)

# Loggers that drown ours at INFO (httpx logs every single request line).
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio", "uvicorn.access")

CONSOLE_FORMAT = "%(asctime)s │ %(levelname)-7s │ %(name)s:%(lineno)d │ %(message)s"
JSON_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"


def get_correlation_id() -> str:
    """Return the correlation ID of the running request ("" outside requests)."""
    return correlation_id_var.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation ID to the current context.

    Args:
        correlation_id: ID sent by the client, or None to mint a fresh UUID4

    Returns:
        The ID now bound to the context
    """
    bound = correlation_id or str(uuid.uuid4())
    correlation_id_var.set(bound)
    return bound


class CorrelationIdFilter(logging.Filter):
    """Stamp every record with the current correlation ID. Never drops records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        return True


class CompactExceptionFormatter(logging.Formatter):
    """Console formatter printing exception chains root cause first.

    Hey future me - every Spotify failure is re-raised as one of our errors
    (raise PlaylistFetchError(...) from e), so the interesting part is the
    chain, not Python's "The above exception was the direct cause..." noise.
    Only frames from this package are printed:

    ERROR │ bandstosee.api.exception_handlers:40 │ Request to /userdata failed
    ╰─► ConnectError: All connection attempts failed
    ╰─► PlaylistFetchError: Failed to fetch playlist abc: All connection attempts failed
        File "spotify_client.py", line 150, in get_playlist
          return await self._api_request("GET", url, access_token)
    """

    PACKAGE_MARKER = "bandstosee"

    def formatException(self, ei: Any) -> str:
        chain = self._chain(ei[1])
        lines: list[str] = []
        for exc in chain:
            lines.append(f"╰─► {type(exc).__name__}: {exc}")
            lines.extend(self._own_frames(exc))
        return "\n".join(lines)

    @staticmethod
    def _chain(exc: BaseException | None) -> list[BaseException]:
        """Exceptions linked via __cause__/__context__, root cause first."""
        chain: list[BaseException] = []
        while exc is not None and exc not in chain:
            chain.append(exc)
            exc = exc.__cause__ or exc.__context__
        chain.reverse()
        return chain

    def _own_frames(self, exc: BaseException) -> list[str]:
        if exc.__traceback__ is None:
            return []
        lines = []
        for frame in traceback.extract_tb(exc.__traceback__):
            if "/site-packages/" in frame.filename or self.PACKAGE_MARKER not in frame.filename:
                continue
            lines.append(
                f'    File "{Path(frame.filename).name}", line {frame.lineno}, in {frame.name}'
            )
            if frame.line:
                lines.append(f"      {frame.line.strip()}")
        return lines


class CustomJsonFormatter(jsonlogger.JsonFormatter):  # type: ignore[name-defined,misc]
    """JSON formatter emitting a flat, queryable record."""

    RECORD_FIELDS = {
        "level": "levelname",
        "logger": "name",
        "module": "module",
        "function": "funcName",
        "line": "lineno",
    }

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = self.formatTime(record, self.datefmt)
        for key, attribute in self.RECORD_FIELDS.items():
            log_record[key] = getattr(record, attribute)

        if getattr(record, "correlation_id", ""):
            log_record["correlation_id"] = record.correlation_id
        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            log_record["stack_info"] = self.formatStack(record.stack_info)


def _build_formatter(json_format: bool) -> logging.Formatter:
    if json_format:
        return CustomJsonFormatter(JSON_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    return CompactExceptionFormatter(fmt=CONSOLE_FORMAT, datefmt="%H:%M:%S")


# Listen future me, this is THE logging setup - the lifespan calls it once at startup.
# It REPLACES whatever handlers the root logger had, so calling it twice (tests, reloads)
# never duplicates output.
def configure_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    app_name: str = "bandstosee",
) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        log_level: Level name; unknown names fall back to INFO
        json_format: JSON lines (production) instead of console format
        app_name: Reported in the startup log line
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(_build_formatter(json_format))

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        "Logging configured for %s (level=%s, json=%s)",
        app_name,
        logging.getLevelName(level),
        json_format,
    )
