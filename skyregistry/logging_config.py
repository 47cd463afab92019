"""
Logging configuration for the Skynet registry client.

Structured JSON logging and audit events for registry fetches and
publishes. Seeds, private keys and API keys are never logged.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from functools import wraps
from typing import Callable, Optional

# Context variable for tracking one fetch or publish across log lines
operation_id_var: ContextVar[str] = ContextVar('operation_id', default='')


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    One JSON object per line, suitable for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        operation_id = operation_id_var.get()
        if operation_id:
            log_data["operation_id"] = operation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class AuditLogger:
    """
    Logger for registry audit events.

    Signature rejections are security events and are logged at ERROR.
    """

    def __init__(self, name: str = "skyregistry.audit"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        if not self._logger.isEnabledFor(level):
            return
        extra = {
            "event_type": event_type,
            "operation_id": operation_id_var.get(),
            **kwargs
        }

        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "",
            0,
            f"{event_type}: {kwargs.get('message', '')}",
            (),
            None
        )
        record.extra_fields = extra
        self._logger.handle(record)

    def entry_fetched(self, public_key: str, data_key: str, revision: int) -> None:
        """Log a fetched and verified entry."""
        self._log(
            logging.INFO,
            "ENTRY_FETCHED",
            public_key=public_key,
            data_key=data_key,
            revision=revision,
            message=f"Verified entry {data_key} at revision {revision}"
        )

    def entry_published(self, public_key: str, data_key: str, revision: int) -> None:
        """Log a published entry."""
        self._log(
            logging.INFO,
            "ENTRY_PUBLISHED",
            public_key=public_key,
            data_key=data_key,
            revision=revision,
            message=f"Published entry {data_key} at revision {revision}"
        )

    def signature_rejected(self, public_key: str, data_key: str, portal_url: str) -> None:
        """Log a fetched entry whose signature did not verify."""
        self._log(
            logging.ERROR,
            "SECURITY_EVENT",
            security_event="INVALID_SIGNATURE",
            severity="high",
            public_key=public_key,
            data_key=data_key,
            portal_url=portal_url,
            message=f"Registry entry {data_key} failed signature verification"
        )

    def portal_response_rejected(self, url: str, reason: str) -> None:
        """Log an undecodable portal response."""
        self._log(
            logging.WARNING,
            "PORTAL_RESPONSE_REJECTED",
            url=url,
            reason=reason,
            message=f"Malformed response from {url}"
        )

    def transport_failure(
        self,
        method: str,
        url: str,
        status_code: Optional[int] = None,
        reason: str = ""
    ) -> None:
        """Log a failed HTTP exchange."""
        self._log(
            logging.WARNING,
            "TRANSPORT_FAILURE",
            method=method,
            url=url,
            status_code=status_code,
            reason=reason,
            message=f"{method} {url} failed"
        )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    # stderr keeps stdout free for CLI output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def with_operation_id(func: Callable) -> Callable:
    """
    Run func under a fresh operation ID.

    The previous ID is restored on return, so a long-lived thread does
    not carry a finished operation's ID into unrelated log lines.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        token = operation_id_var.set(str(uuid.uuid4()))
        try:
            return func(*args, **kwargs)
        finally:
            operation_id_var.reset(token)
    return wrapper


def get_operation_id() -> str:
    """Get the current operation ID."""
    return operation_id_var.get()


# Global audit logger instance
audit_log = AuditLogger()
