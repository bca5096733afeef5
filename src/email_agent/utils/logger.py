"""
Logging configuration and utilities for the Email Agent.

Console output is colored and shows the application being worked on; the
file handlers write one JSON object per line. Credentials passed as context
fields are redacted before any handler sees them.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime
import json

from ..config import get_config

SENSITIVE_FIELDS = {"password", "pass", "api_key", "apiKey", "groq_api_key", "openrouter_api_key"}
REDACTED = "[redacted]"

NOISY_LIBRARIES = ("aiohttp", "httpx", "urllib3", "uvicorn.access", "watchdog")

def redact(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of ``fields`` with credential values replaced."""
    return {key: (REDACTED if key in SENSITIVE_FIELDS and value else value) for key, value in fields.items()}

class StructuredFormatter(logging.Formatter):
    """JSON lines for the rotating log files."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "extra_fields", {}))

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)

class ColoredConsoleFormatter(logging.Formatter):
    """Colored single-line console output with the active application id."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, '')
        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')
        fields = getattr(record, "extra_fields", {})
        scope = f" [{fields['application_id']}]" if fields.get("application_id") else ""

        line = f"{color}[{timestamp}] {record.levelname:8} {record.name:16}{scope} | {record.getMessage()}{self.RESET}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line

class AgentLogger:
    """Logger that carries context fields such as the application being processed."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.context: Dict[str, Any] = {}

    def set_context(self, **kwargs) -> None:
        """Set context fields that will be included in all log messages."""
        self.context.update(kwargs)

    def clear_context(self) -> None:
        self.context.clear()

    def _emit(self, level: int, message: str, exc_info: bool = False, **fields) -> None:
        merged = redact({**self.context, **fields})
        self.logger.log(level, message, extra={"extra_fields": merged} if merged else None, exc_info=exc_info)

    def debug(self, message: str, **fields) -> None:
        self._emit(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields) -> None:
        self._emit(logging.INFO, message, **fields)

    def warning(self, message: str, **fields) -> None:
        self._emit(logging.WARNING, message, **fields)

    def error(self, message: str, **fields) -> None:
        self._emit(logging.ERROR, message, **fields)

    def exception(self, message: str, **fields) -> None:
        """Log at ERROR level with the active traceback."""
        self._emit(logging.ERROR, message, exc_info=True, **fields)

    def application_started(self, application_id: str, company: str, stage: str) -> None:
        """Scope the following records to one application."""
        self.set_context(application_id=application_id, company=company)
        self.info(f"Started {stage} for {company}")

    def application_completed(self, status: str) -> None:
        self.info(f"Application is now {status}")
        self.context.pop('application_id', None)
        self.context.pop('company', None)

    def batch_started(self, batch: str, item_count: int) -> None:
        self.set_context(batch=batch)
        self.info(f"Started {batch} for {item_count} applications")

    def batch_completed(self, batch: str, succeeded: int, failed: int) -> None:
        self.info(f"Completed {batch}: {succeeded} succeeded, {failed} failed")
        self.context.pop('batch', None)

class ProgressLogger:
    """Logs the 25/50/75/100% milestones of a bulk loop."""

    MILESTONES = (25, 50, 75, 100)

    def __init__(self, logger: AgentLogger, total: int, operation: str):
        self.logger = logger
        self.total = total
        self.operation = operation
        self.current = 0
        self.start_time = datetime.now()
        self._reached = set()

    def _elapsed(self) -> float:
        return (datetime.now() - self.start_time).total_seconds()

    def update(self, increment: int = 1, message: Optional[str] = None) -> None:
        self.current += increment
        if self.total <= 0:
            return

        percentage = self.current * 100 / self.total
        due = [m for m in self.MILESTONES if m <= percentage and m not in self._reached]
        if not due:
            return
        # A jump across several milestones logs only the highest one
        self._reached.update(due)
        milestone = due[-1]

        suffix = f" ({message})" if message else ""
        self.logger.info(
            f"{self.operation}: {milestone}% ({self.current}/{self.total}){suffix}",
            progress_percentage=milestone,
            items_processed=self.current,
            total_items=self.total,
            elapsed_seconds=self._elapsed()
        )

    def complete(self, message: Optional[str] = None) -> None:
        suffix = f" ({message})" if message else ""
        self.logger.info(
            f"{self.operation} finished: {self.current}/{self.total} items{suffix}",
            total_processed=self.current,
            total_time_seconds=self._elapsed()
        )

def _rotating_handler(path: Path, level: int, max_megabytes: int, backups: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=max_megabytes * 1024 * 1024, backupCount=backups)
    handler.setLevel(level)
    handler.setFormatter(StructuredFormatter())
    return handler

def setup_logging(config: Optional[Any] = None) -> None:
    """Configure the root logger for one of the entry points."""
    if config is None:
        config = get_config()

    level = getattr(logging, config.log_level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    if config.log_to_file:
        log_dir = Path(config.data_dir) / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating_handler(log_dir / "app.log", level, 10, 5))
        root_logger.addHandler(_rotating_handler(log_dir / "errors.log", logging.ERROR, 5, 3))

    for name in NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"Logging initialized at {logging.getLevelName(level)}")

def get_logger(name: str) -> AgentLogger:
    """Get a logger instance with context support."""
    return AgentLogger(name)

def get_progress_logger(logger: AgentLogger, total: int, operation: str) -> ProgressLogger:
    return ProgressLogger(logger, total, operation)

# Component-specific loggers
def get_ai_logger() -> AgentLogger:
    return get_logger("email_agent.ai")

def get_email_logger() -> AgentLogger:
    return get_logger("email_agent.composer")

def get_mail_logger() -> AgentLogger:
    return get_logger("email_agent.mailer")

def get_ui_logger() -> AgentLogger:
    return get_logger("email_agent.ui")

def get_api_logger() -> AgentLogger:
    return get_logger("email_agent.api")

def get_workflow_logger() -> AgentLogger:
    return get_logger("email_agent.workflow")
