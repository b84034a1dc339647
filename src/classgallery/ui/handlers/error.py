"""
Centralized error handling and classification for classgallery.

Every failure the UI shows goes through one of the ``PortalError`` classes
below, which carry a category, a severity and a message that is safe to show
to the person at the keyboard.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from classgallery.logging_config import get_logger, log_error, log_security_event

logger = get_logger(__name__)


class ErrorCategory(Enum):
    """Error categories for classification and handling."""

    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    UPLOAD = "upload"
    DATABASE = "database"
    STORAGE = "storage"
    VALIDATION = "validation"
    NETWORK = "network"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ErrorInfo:
    """Structured error information."""

    category: ErrorCategory
    severity: ErrorSeverity
    code: str
    message: str
    user_message: str
    details: dict[str, Any]
    timestamp: datetime
    recoverable: bool = True
    retry_suggested: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert error info to dictionary."""
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "retry_suggested": self.retry_suggested,
        }


DEFAULT_USER_MESSAGES = {
    ErrorCategory.AUTHENTICATION: "Invalid credentials. Please try again.",
    ErrorCategory.AUTHORIZATION: "You do not have permission to do that.",
    ErrorCategory.UPLOAD: "Upload failed. Please try again.",
    ErrorCategory.DATABASE: "Could not reach the database. Please try again in a moment.",
    ErrorCategory.STORAGE: "The media host rejected the request.",
    ErrorCategory.VALIDATION: "Please check the form and try again.",
    ErrorCategory.NETWORK: "Network error. Check your connection.",
    ErrorCategory.UNKNOWN: "Something went wrong.",
}


class PortalError(Exception):
    """Base exception class for classgallery."""

    default_category = ErrorCategory.UNKNOWN
    default_severity = ErrorSeverity.MEDIUM
    default_code: str | None = None
    default_retry_suggested = False

    def __init__(
        self,
        message: str,
        category: ErrorCategory | None = None,
        severity: ErrorSeverity | None = None,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        recoverable: bool = True,
        retry_suggested: bool | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.category = category or self.default_category
        self.severity = severity or self.default_severity
        self.code = code or self.default_code or f"{self.category.value}_error"
        self.user_message = user_message or DEFAULT_USER_MESSAGES[self.category]
        self.details = details or {}
        self.recoverable = recoverable
        self.retry_suggested = self.default_retry_suggested if retry_suggested is None else retry_suggested
        self.original_exception = original_exception
        self.timestamp = datetime.now()

        self._log_error()

    def _log_error(self) -> None:
        error_context = {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "recoverable": self.recoverable,
            **self.details,
        }

        if self.original_exception:
            error_context["original_exception"] = str(self.original_exception)

        log_error(self, error_context)

        if self.category in [ErrorCategory.AUTHENTICATION, ErrorCategory.AUTHORIZATION]:
            log_security_event(self.category.value, context=error_context)

    def get_error_info(self) -> ErrorInfo:
        """Get structured error information."""
        return ErrorInfo(
            category=self.category,
            severity=self.severity,
            code=self.code,
            message=str(self),
            user_message=self.user_message,
            details=self.details,
            timestamp=self.timestamp,
            recoverable=self.recoverable,
            retry_suggested=self.retry_suggested,
        )


class AuthenticationError(PortalError):
    """Login failures and missing sessions."""

    default_category = ErrorCategory.AUTHENTICATION
    default_severity = ErrorSeverity.HIGH
    default_code = "auth_failed"


class AuthorizationError(PortalError):
    """A logged-in user tried something their role does not allow."""

    default_category = ErrorCategory.AUTHORIZATION
    default_severity = ErrorSeverity.HIGH
    default_code = "access_denied"


class UploadError(PortalError):
    """Upload pipeline failures."""

    default_category = ErrorCategory.UPLOAD
    default_code = "upload_failed"
    default_retry_suggested = True


class DatabaseError(PortalError):
    """Remote backend or local store failures."""

    default_category = ErrorCategory.DATABASE
    default_severity = ErrorSeverity.HIGH
    default_code = "database_error"
    default_retry_suggested = True


class StorageError(PortalError):
    """Media host failures, including missing host credentials."""

    default_category = ErrorCategory.STORAGE
    default_severity = ErrorSeverity.HIGH
    default_code = "storage_error"
    default_retry_suggested = True


class ValidationError(PortalError):
    """Input rejected before any call was made."""

    default_category = ErrorCategory.VALIDATION
    default_severity = ErrorSeverity.LOW
    default_code = "validation_failed"


class NetworkError(PortalError):
    """Transport-level failures."""

    default_category = ErrorCategory.NETWORK
    default_code = "network_error"
    default_retry_suggested = True


# Keyword buckets checked in order; the first bucket that matches wins.
CLASSIFICATION_RULES: list[tuple[type[PortalError], tuple[str, ...]]] = [
    (AuthenticationError, ("authentication", "login", "credential", "unauthorized")),
    (AuthorizationError, ("permission", "access denied", "forbidden", "not allowed")),
    (UploadError, ("upload", "file size", "too large")),
    (DatabaseError, ("database", "duckdb", "sql", "query", "table")),
    (StorageError, ("storage", "cloud", "media host")),
    (ValidationError, ("validation", "invalid", "required", "missing")),
    (NetworkError, ("network", "connection", "timeout", "unreachable")),
]


class ErrorHandler:
    """Centralized error handler for the application."""

    def __init__(self) -> None:
        self.error_counts: dict[str, int] = {}
        self.logger = get_logger(__name__)

    def handle_error(
        self,
        error: Exception | PortalError,
        context: dict[str, Any] | None = None,
    ) -> ErrorInfo:
        """
        Handle and classify errors.

        Args:
            error: Exception to handle
            context: Additional context information

        Returns:
            ErrorInfo: Structured error information
        """
        context = context or {}

        if isinstance(error, PortalError):
            error_info = error.get_error_info()
        else:
            error_info = self._classify_error(error, context).get_error_info()

        self._track_error(error_info.code)
        return error_info

    def _classify_error(self, error: Exception, context: dict[str, Any]) -> PortalError:
        """Wrap a plain exception in the best-matching PortalError."""
        error_message = str(error)
        lowered = error_message.lower()
        details = {"original_type": type(error).__name__, **context}

        for error_class, keywords in CLASSIFICATION_RULES:
            if any(keyword in lowered for keyword in keywords):
                return error_class(message=error_message, details=details, original_exception=error)

        return PortalError(message=error_message, details=details, original_exception=error)

    def _track_error(self, error_code: str) -> None:
        self.error_counts[error_code] = self.error_counts.get(error_code, 0) + 1

        if self.error_counts[error_code] % 10 == 0:
            self.logger.warning("frequent_error_detected", error_code=error_code, count=self.error_counts[error_code])

    def get_error_statistics(self) -> dict[str, int]:
        """Get error occurrence statistics."""
        return self.error_counts.copy()

    def reset_statistics(self) -> None:
        """Reset error statistics."""
        self.error_counts.clear()


error_handler = ErrorHandler()


def handle_error(
    error: Exception | PortalError,
    context: dict[str, Any] | None = None,
) -> ErrorInfo:
    """Classify ``error`` with the global handler and return its ErrorInfo."""
    return error_handler.handle_error(error, context)


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    return error_handler
