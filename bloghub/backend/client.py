"""REST/RPC client for the hosted backend-as-a-service (PostgREST dialect)."""

from __future__ import annotations

from typing import Any, Iterable, Literal, Sequence

import requests
from loguru import logger

from bloghub.config.backend import BackendConfig
from bloghub.errors import BackendError, NotFoundError

FilterOp = Literal["eq", "neq", "in", "ilike", "gte", "lte", "gt", "lt", "is"]
Filter = tuple[str, FilterOp, Any]


def _render_value(op: str, value: Any) -> str:
    if op == "in":
        items = value if isinstance(value, (list, tuple, set)) else [value]
        return "in.(" + ",".join(_quote(item) for item in items) + ")"
    if isinstance(value, bool):
        return f"{op}.{str(value).lower()}"
    if value is None:
        return f"{op}.null"
    return f"{op}.{value}"


def _quote(item: Any) -> str:
    text = str(item)
    if any(ch in text for ch in ',()"'):
        escaped = text.replace('"', '\\"')
        return f'"{escaped}"'
    return text


def build_query(
    columns: str = "*",
    filters: Iterable[Filter] | None = None,
    order: str | None = None,
    ascending: bool = True,
    limit: int | None = None,
) -> list[tuple[str, str]]:
    """Translate a select request into PostgREST query parameters."""

    params: list[tuple[str, str]] = [("select", columns)]
    for column, op, value in filters or ():
        params.append((column, _render_value(op, value)))
    if order:
        params.append(("order", f"{order}.{'asc' if ascending else 'desc'}"))
    if limit is not None:
        params.append(("limit", str(limit)))
    return params


def parse_content_range(header: str | None) -> int | None:
    """Return the total from a ``Content-Range: 0-9/42`` header (``*`` means unknown)."""

    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1].strip()
    return int(total) if total.isdigit() else None


class BackendClient:
    """Thin wrapper over the backend's table, RPC and edge-function endpoints.

    Each call is a single HTTP request. Failures are logged and raised as
    :class:`BackendError`; nothing is retried.
    """

    def __init__(self, config: BackendConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.base_url = config.url
        self.timeout = config.timeout
        key = config.anon_key_secret
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "User-Agent": "BlogHub/0.1",
                "Accept": "application/json",
            }
        )

    # -- tables -----------------------------------------------------------------

    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        filters: Sequence[Filter] | None = None,
        order: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
        single: bool = False,
        count: bool = False,
    ) -> Any:
        """Fetch rows from ``table``.

        Returns a list of rows, one row when ``single`` is set, or
        ``(rows, total)`` when ``count`` is set.
        """

        params = build_query(columns, filters, order, ascending, limit)
        headers: dict[str, str] = {}
        if count:
            headers["Prefer"] = "count=exact"
        response = self._request("GET", f"/rest/v1/{table}", params=params, headers=headers)
        rows = self._json(response) or []

        if single:
            if not rows:
                logger.warning("No row in '{}' matched {}", table, filters)
                raise NotFoundError(f"No matching row in '{table}'", status_code=406)
            return rows[0]
        if count:
            total = parse_content_range(response.headers.get("Content-Range"))
            return rows, total if total is not None else len(rows)
        return rows

    def insert(
        self,
        table: str,
        rows: dict[str, Any] | list[dict[str, Any]],
        *,
        returning: bool = True,
    ) -> list[dict[str, Any]]:
        payload = rows if isinstance(rows, list) else [rows]
        headers = {"Prefer": "return=representation" if returning else "return=minimal"}
        response = self._request("POST", f"/rest/v1/{table}", json=payload, headers=headers)
        return (self._json(response) or []) if returning else []

    def update(
        self,
        table: str,
        values: dict[str, Any],
        *,
        filters: Sequence[Filter],
    ) -> list[dict[str, Any]]:
        if not filters:
            raise ValueError("Refusing to update every row; pass at least one filter")
        params = [(column, _render_value(op, value)) for column, op, value in filters]
        response = self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=params,
            json=values,
            headers={"Prefer": "return=representation"},
        )
        return self._json(response) or []

    def delete(self, table: str, *, filters: Sequence[Filter]) -> None:
        if not filters:
            raise ValueError("Refusing to delete every row; pass at least one filter")
        params = [(column, _render_value(op, value)) for column, op, value in filters]
        self._request("DELETE", f"/rest/v1/{table}", params=params)

    # -- functions --------------------------------------------------------------

    def rpc(self, name: str, params: dict[str, Any] | None = None) -> Any:
        response = self._request("POST", f"/rest/v1/rpc/{name}", json=params or {})
        return self._json(response)

    def invoke_function(self, name: str, payload: dict[str, Any] | None = None) -> Any:
        response = self._request("POST", f"/functions/v1/{name}", json=payload or {})
        return self._json(response)

    # -- plumbing ---------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("{} {} failed: {}", method, path, exc)
            raise BackendError(f"Could not reach backend: {exc}") from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error("{} {} returned {}: {}", method, path, response.status_code, message)
            raise BackendError(message, status_code=response.status_code)
        logger.debug("{} {} -> {}", method, path, response.status_code)
        return response

    @staticmethod
    def _json(response: requests.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError("Backend returned malformed JSON", status_code=response.status_code) from exc

    def close(self) -> None:
        self.session.close()


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or "Unknown backend error"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body.get("msg") or body)
    return str(body)


__all__ = ["BackendClient", "Filter", "build_query", "parse_content_range"]
