"""
Streamlit error display components.

Errors are shown as alerts sized by severity; ``error_context`` wraps a
block of page code so one failing operation does not take down the page.
"""

from typing import Any

import streamlit as st
from streamlit.runtime.scriptrunner_utils.exceptions import RerunException, StopException

from classgallery.ui.handlers.error import ErrorInfo, ErrorSeverity, handle_error
from ...logging_config import get_logger

# Type alias for Streamlit container
StreamlitContainer = Any

logger = get_logger(__name__)

SEVERITY_ALERTS = {
    ErrorSeverity.LOW: "info",
    ErrorSeverity.MEDIUM: "warning",
    ErrorSeverity.HIGH: "error",
    ErrorSeverity.CRITICAL: "error",
}


class ErrorDisplayManager:
    """Manager for displaying errors in Streamlit interface."""

    def display_error(
        self,
        error_info: ErrorInfo,
        container: StreamlitContainer | None = None,
        show_details: bool = False,
    ) -> None:
        """
        Display error information in the Streamlit interface.

        Args:
            error_info: Structured error information
            container: Streamlit container to display in (optional)
            show_details: Whether to show technical details
        """
        alert_type = SEVERITY_ALERTS.get(error_info.severity, "error")

        def _display_content() -> None:
            getattr(st, alert_type)(error_info.user_message)

            if show_details:
                with st.expander("Details", expanded=False):
                    st.write("**Error code:**", error_info.code)
                    st.write("**Category:**", error_info.category.value)
                    st.write("**Time:**", error_info.timestamp.strftime("%Y-%m-%d %H:%M:%S"))
                    st.write("**Message:**", error_info.message)

        if container is not None:
            with container:
                _display_content()
        else:
            _display_content()

        logger.info(
            "error_displayed_to_user",
            error_code=error_info.code,
            category=error_info.category.value,
            severity=error_info.severity.value,
        )

    def display_exception(
        self,
        exception: Exception,
        context: dict[str, Any] | None = None,
        container: StreamlitContainer | None = None,
        show_details: bool = False,
    ) -> None:
        """Classify an exception and display it."""
        self.display_error(handle_error(exception, context), container=container, show_details=show_details)

    def display_success_message(self, message: str) -> None:
        st.toast(message, icon="✅")

    def display_warning_message(self, message: str) -> None:
        st.warning(message)


class StreamlitErrorContext:
    """Context manager that shows errors raised inside a page block."""

    def __init__(
        self,
        error_message: str = "Something went wrong",
        show_details: bool = False,
        container: StreamlitContainer | None = None,
    ):
        self.error_message = error_message
        self.show_details = show_details
        self.container = container

    def __enter__(self) -> "StreamlitErrorContext":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        if exc_type is None:
            return False

        # Streamlit uses exceptions for rerun/stop control flow.
        if isinstance(exc_val, (RerunException, StopException)):
            return False

        if not isinstance(exc_val, Exception):
            return False

        error_display_manager.display_exception(
            exception=exc_val,
            context={"operation": self.error_message},
            container=self.container,
            show_details=self.show_details,
        )
        return True


error_display_manager = ErrorDisplayManager()


def get_error_display_manager() -> ErrorDisplayManager:
    """Get the global error display manager instance."""
    return error_display_manager


def error_context(
    error_message: str = "Something went wrong",
    show_details: bool = False,
    container: StreamlitContainer | None = None,
) -> StreamlitErrorContext:
    """Create an error context manager for Streamlit operations."""
    return StreamlitErrorContext(error_message, show_details, container)
