"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- user_id
- folder_id
- file_count
- duration_ms

Never pass passwords, password hashes, tokens or secrets to these helpers.

Usage:
    from app.utils.logging import configure_logging, log_account_created

    configure_logging('vaultix-api', 'INFO')
    log_account_created(logger, user_id='123', duration_ms=45.2)
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier (vaultix-api)
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(levelname)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        # Console handler (for docker logs)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True


def _build_log_extra(
    event: str,
    user_id: Optional[str] = None,
    folder_id: Optional[str] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Args:
        event: Event name (mandatory)
        user_id: Optional user ID
        folder_id: Optional folder ID
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {
        "event": event,
        **kwargs
    }

    if user_id:
        extra["user_id"] = user_id
    if folder_id:
        extra["folder_id"] = folder_id
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


# Account event functions

def log_account_created(
    logger: logging.Logger,
    user_id: str,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """Log a completed signup (user and root folder both exist)."""
    extra = _build_log_extra(
        event="account_created",
        user_id=user_id,
        duration_ms=duration_ms,
        **kwargs
    )
    logger.info(f"Account created: {user_id}", extra=extra)


def log_login_succeeded(logger: logging.Logger, user_id: str, **kwargs):
    extra = _build_log_extra(event="login_succeeded", user_id=user_id, **kwargs)
    logger.info(f"Login succeeded: {user_id}", extra=extra)


def log_login_failed(logger: logging.Logger, **kwargs):
    """
    Log a failed login.

    The email is deliberately not a parameter: failed attempts must not build
    a list of which addresses exist.
    """
    extra = _build_log_extra(event="login_failed", **kwargs)
    logger.warning("Login failed: invalid credentials", extra=extra)


def log_auth_rejected(logger: logging.Logger, path: str, reason: str, **kwargs):
    """Log a request stopped by the auth gateway."""
    extra = _build_log_extra(event="auth_rejected", path=path, reason=reason, **kwargs)
    logger.info(f"Request rejected by auth gateway: {reason}", extra=extra)


# Upload event functions

def log_upload_batch_initiated(
    logger: logging.Logger,
    user_id: str,
    folder_id: str,
    file_count: int,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """Log a batch whose upload URLs were all issued."""
    extra = _build_log_extra(
        event="upload_batch_initiated",
        user_id=user_id,
        folder_id=folder_id,
        duration_ms=duration_ms,
        file_count=file_count,
        **kwargs
    )
    logger.info(f"Upload batch initiated: {file_count} file(s)", extra=extra)


def log_upload_batch_failed(
    logger: logging.Logger,
    user_id: str,
    folder_id: str,
    created_file_ids: list,
    error: str,
    **kwargs
):
    """
    Log a batch that failed part-way through.

    created_file_ids lists the records left in "uploading" state.
    """
    extra = _build_log_extra(
        event="upload_batch_failed",
        user_id=user_id,
        folder_id=folder_id,
        created_file_ids=created_file_ids,
        error=str(error),
        **kwargs
    )
    logger.error(
        f"Upload batch failed after {len(created_file_ids)} record(s): {error}",
        extra=extra
    )


# Compensation event functions

def log_compensation_failed(
    logger: logging.Logger,
    operation: str,
    step: str,
    error: str,
    include_traceback: bool = True,
    **kwargs
):
    """
    Log an undo action that itself failed.

    This leaves data inconsistent and needs an operator; it is logged at
    ERROR with the stack trace when one is available.
    """
    extra = _build_log_extra(
        event="compensation_failed",
        operation=operation,
        step=step,
        error=str(error),
        **kwargs
    )
    message = f"Compensation failed: {operation}.{step} - {error}"

    if include_traceback:
        exc_info = sys.exc_info()
        if exc_info[0] is not None:
            logger.error(message, extra=extra, exc_info=exc_info)
            return
    logger.error(message, extra=extra)


def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)
