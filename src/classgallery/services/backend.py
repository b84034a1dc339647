"""Remote table backend client.

The hosted backend exposes each table over HTTP in the PostgREST dialect:
``GET /rest/v1/<table>?col=eq.value&order=created_at.desc`` and friends.
Only the handful of verbs the portal needs are implemented here.
"""

import hashlib
import json
import time
from typing import Any

import requests

from classgallery.config import get_backend_api_key, get_backend_timeout, get_backend_url
from classgallery.ui.handlers.error import DatabaseError
from ..logging_config import get_logger, log_performance

logger = get_logger(__name__)

REST_PATH = "/rest/v1"


def is_backend_configured(url: str | None = None, api_key: str | None = None) -> bool:
    """
    Check whether a usable remote backend is configured.

    Both values must be present and longer than a placeholder, and the URL
    must be an http(s) URL.
    """
    url = get_backend_url() if url is None else url
    api_key = get_backend_api_key() if api_key is None else api_key

    return bool(
        url
        and api_key
        and len(url) > 10
        and len(api_key) > 10
        and url.startswith(("http://", "https://"))
    )


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_filter_params(filters: dict[str, Any] | None) -> dict[str, str]:
    """Turn ``{"student_id": "STU001"}`` into ``{"student_id": "eq.STU001"}``."""
    return {column: f"eq.{_format_value(value)}" for column, value in (filters or {}).items()}


class BackendClient:
    """Thin client for the remote ``students`` / ``media`` / ``settings`` tables."""

    def __init__(self, url: str, api_key: str, timeout: float = 10.0, session: requests.Session | None = None):
        """
        Initialize the backend client.

        Args:
            url: Project base URL, e.g. ``https://abc.supabase.co``
            api_key: Anonymous API key
            timeout: Per-request timeout in seconds
            session: Optional pre-built session (used by tests)
        """
        self.base_url = url.rstrip("/") + REST_PATH
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
        )

        logger.info("backend_client_initialized", base_url=self.base_url, timeout=timeout)

    def _request(
        self,
        method: str,
        table: str,
        params: dict[str, str] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (or None)."""
        url = f"{self.base_url}/{table}"
        start_time = time.perf_counter()

        try:
            response = self.session.request(
                method, url, params=params, json=json_body, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise DatabaseError(
                f"Backend request failed: {method} {table}: {e}",
                details={"table": table, "method": method},
                original_exception=e,
            ) from e

        log_performance("backend_request", time.perf_counter() - start_time, table=table, method=method)

        if not response.ok:
            try:
                body = response.json()
                detail = body.get("message") or body.get("error") or response.text
            except ValueError:
                detail = response.text
            raise DatabaseError(
                f"Backend returned {response.status_code} for {method} {table}: {detail}",
                details={"table": table, "method": method, "status_code": response.status_code},
            )

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise DatabaseError(
                f"Backend returned invalid JSON for {method} {table}", original_exception=e
            ) from e

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        or_filter: str | None = None,
        order: str | None = None,
        ascending: bool = False,
        single: bool = False,
        limit: int | None = None,
        columns: str = "*",
    ) -> Any:
        """
        Read rows from a table.

        Args:
            table: Table name
            filters: Column equality filters
            or_filter: Raw PostgREST OR expression, without the ``or=`` prefix
            order: Column to order by
            ascending: Sort direction for ``order``
            single: Return the first row (or None) instead of a list
            limit: Maximum number of rows
            columns: Column list for ``select=``

        Returns:
            list[dict] of rows, or a single dict / None when ``single`` is set
        """
        params = {"select": columns, **build_filter_params(filters)}
        if or_filter:
            params["or"] = or_filter
        if order:
            params["order"] = f"{order}.{'asc' if ascending else 'desc'}"
        if single:
            limit = 1
        if limit is not None:
            params["limit"] = str(limit)

        rows = self._request("GET", table, params=params) or []
        if single:
            return rows[0] if rows else None
        return rows

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any] | None:
        """Insert one row and return it as stored by the backend."""
        rows = self._request("POST", table, json_body=row, headers={"Prefer": "return=representation"})
        return rows[0] if rows else None

    def update(self, table: str, values: dict[str, Any], filters: dict[str, Any]) -> list[dict[str, Any]]:
        """Update the rows matching ``filters``; returns the updated rows."""
        if not filters:
            raise DatabaseError(f"Refusing to update every row of {table}")
        return (
            self._request(
                "PATCH",
                table,
                params=build_filter_params(filters),
                json_body=values,
                headers={"Prefer": "return=representation"},
            )
            or []
        )

    def delete(self, table: str, filters: dict[str, Any]) -> None:
        """Delete the rows matching ``filters``."""
        if not filters:
            raise DatabaseError(f"Refusing to delete every row of {table}")
        self._request("DELETE", table, params=build_filter_params(filters))

    def upsert(self, table: str, row: dict[str, Any], on_conflict: str) -> dict[str, Any] | None:
        """Insert or merge one row keyed on ``on_conflict``."""
        rows = self._request(
            "POST",
            table,
            params={"on_conflict": on_conflict},
            json_body=row,
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
        )
        return rows[0] if rows else None

    def get_table_signature(self, table: str, columns: str = "*") -> str:
        """
        Change marker for live refresh.

        Args:
            table: Table name
            columns: Columns whose changes should count as a change

        Returns:
            Digest that changes whenever any selected value changes
        """
        rows = self.select(table, columns=columns, order="id", ascending=True)
        payload = json.dumps(rows, sort_keys=True, default=str).encode("utf-8")
        return hashlib.sha256(payload).hexdigest()


_backend_client: BackendClient | None = None


def get_backend_client() -> BackendClient | None:
    """
    Get the shared backend client.

    Returns:
        BackendClient, or None when no remote backend is configured
    """
    global _backend_client
    if _backend_client is None and is_backend_configured():
        _backend_client = BackendClient(get_backend_url(), get_backend_api_key(), timeout=get_backend_timeout())
    return _backend_client


def reset_backend_client() -> None:
    """Drop the shared client so the next call re-reads configuration."""
    global _backend_client
    _backend_client = None
