"""Structured Logging — JSON formatter and setup for production observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (account_id, subscription_id, error_code, path) surfaced when present
    - Exceptions serialize as {"type", "message", "stack"} with one stack entry per line
    - JSON format in production, human-readable in development

Design Decisions:
    - Standard-library logging end to end; file output and e-mail alerts are plain
      logging handlers enabled from settings
    - File and SMTP handlers sit behind a QueueHandler; a QueueListener thread
      does the blocking IO so a logger call on the event loop only enqueues
    - setup_logging called once on startup via lifespan, which stops the listener
"""

import logging
import json
import traceback
from datetime import datetime, timezone
from logging.handlers import QueueHandler, QueueListener, SMTPHandler
from queue import Queue
from types import TracebackType

EXTRA_FIELDS = (
    "account_id", "subscription_id", "error_code", "path", "recipient",
)

ALERT_LEVEL = logging.ERROR


def normalize_stack(tb: TracebackType | None) -> list[str]:
    """Traceback as a flat list of trimmed lines, without the 'File ' prefix."""
    lines: list[str] = []
    for chunk in traceback.format_tb(tb):
        for line in chunk.splitlines():
            line = line.strip()
            if not line:
                continue
            lines.append(line[5:] if line.startswith("File ") else line)
    return lines


def serialize_exception(exc: BaseException) -> dict:
    return {
        "type": type(exc).__name__,
        "message": str(exc),
        "stack": normalize_stack(exc.__traceback__),
    }


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info and record.exc_info[1] is not None:
            log["error"] = serialize_exception(record.exc_info[1])
        return json.dumps(log, ensure_ascii=False, default=str)


class RecordQueueHandler(QueueHandler):
    """Enqueue the record untouched; the listener's handlers do the formatting."""

    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        return record


def setup_logging(
    level: str = "INFO",
    fmt: str = "json",
    log_file: str | None = None,
    alert_to: list[str] | None = None,
    alert_from: str | None = None,
    smtp_host: str = "localhost",
    smtp_port: int = 587,
    smtp_credentials: tuple[str, str] | None = None,
) -> QueueListener | None:
    """Configure logging for the application.

    Returns the started listener feeding the file and alert handlers, or None
    when neither is configured. The caller stops it on shutdown.
    """
    if fmt == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logging.root.addHandler(console)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # File writes and SMTP sends run on the listener thread, off the event loop
    background: list[logging.Handler] = []
    if log_file:
        background.append(logging.FileHandler(log_file))
    if alert_to:
        alert = SMTPHandler(
            mailhost=(smtp_host, smtp_port),
            fromaddr=alert_from or alert_to[0],
            toaddrs=alert_to,
            subject="[directory-api] error",
            credentials=smtp_credentials,
            secure=() if smtp_credentials else None,
        )
        alert.setLevel(ALERT_LEVEL)
        background.append(alert)
    if not background:
        return None

    for handler in background:
        handler.setFormatter(formatter)
    records: Queue = Queue(-1)
    logging.root.addHandler(RecordQueueHandler(records))
    listener = QueueListener(records, *background, respect_handler_level=True)
    listener.start()
    return listener
