"""Live refresh for the dashboards.

With a backend configured, other devices can change the tables at any time.
A ``st.fragment`` polls each table's version marker on a timer and reruns
the whole page when one of them moves.
"""

from collections.abc import Callable

import streamlit as st
import structlog

from classgallery.config import get_live_refresh_seconds
from classgallery.services.backend import is_backend_configured
from classgallery.ui.handlers.error import PortalError

logger = structlog.get_logger(__name__)

VersionSource = Callable[[], str | None]


def collect_versions(sources: dict[str, VersionSource]) -> dict[str, str | None]:
    """
    Read every version marker.

    A source that fails keeps its name with a None value so one broken table
    does not hide changes in the others.
    """
    versions: dict[str, str | None] = {}
    for name, source in sources.items():
        try:
            versions[name] = source()
        except PortalError as e:
            logger.warning("live_refresh_poll_failed", table=name, error=str(e))
            versions[name] = None
    return versions


def versions_changed(previous: dict[str, str | None] | None, current: dict[str, str | None]) -> bool:
    """True when a table that had a known version now has a different one."""
    if previous is None:
        return False
    for name, version in current.items():
        before = previous.get(name)
        if before is not None and version is not None and before != version:
            return True
    return False


def live_refresh_enabled() -> bool:
    return is_backend_configured() and get_live_refresh_seconds() > 0


def render_live_refresh(sources: dict[str, VersionSource], state_key: str = "live_refresh_versions") -> None:
    """
    Start the polling fragment for the current page.

    Args:
        sources: Table name to version getter, e.g. ``{"media": media_service.get_version}``
        state_key: Session key holding the last seen versions
    """
    if not live_refresh_enabled():
        return

    interval = get_live_refresh_seconds()

    @st.fragment(run_every=interval)
    def _watch() -> None:
        current = collect_versions(sources)
        previous = st.session_state.get(state_key)
        st.session_state[state_key] = current

        if versions_changed(previous, current):
            logger.info("live_refresh_triggered", tables=sorted(current))
            st.rerun(scope="app")

    _watch()
