"""
REST entity store speaking the PostgREST wire format.

All outbound HTTP calls to the hosted store go through this class:
  - Tables at  {url}/rest/v1/{table}, filters as `col=eq.value` / `col=in.(a,b)`
  - RPCs at    {url}/rest/v1/rpc/{function}
  - `apikey` and `Authorization: Bearer` headers on every request
  - Timeout per request, no retries (the caller re-triggers on failure)

Testability: pass a mock `session` to RestEntityStore() in tests instead of
letting it create a real requests.Session internally.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import requests

from ..core.exceptions import RowNotFoundError, StoreError
from ..core.result import Err, Ok, Result
from .base import EntityStore, Row, check_rpc_params

logger = logging.getLogger(__name__)

_SINGLE_OBJECT = "application/vnd.pgrst.object+json"
_RESERVED = set(',()"')


def _quote(value: Any) -> str:
    text = str(value)
    if any(ch in _RESERVED for ch in text):
        escaped = text.replace('"', '\\"')
        return f'"{escaped}"'
    return text


def _in_list(values: Sequence[Any]) -> str:
    return "(" + ",".join(_quote(v) for v in values) + ")"


def _filter_value(value: Any) -> str:
    if isinstance(value, (list, tuple, set, frozenset)):
        return f"in.{_in_list(sorted(value) if isinstance(value, (set, frozenset)) else value)}"
    if value is None:
        return "is.null"
    return f"eq.{value}"


class RestEntityStore(EntityStore):
    """
    PostgREST-backed entity store.

    Usage:
        store = RestEntityStore("https://xyz.supabase.co", api_key)
        rows = store.select("systems", {"parent_id": root_id}).unwrap_or([])
    """

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = url.rstrip("/") + "/rest/v1"
        self.api_key = api_key
        self.timeout = timeout
        # Inject custom session for testing; create real one lazily otherwise.
        self._session: requests.Session | None = session

    # ── HTTP session ─────────────────────────────────────────────────────────

    @property
    def session(self) -> requests.Session:
        """Return (or lazily create) the requests.Session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def _headers(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        if extra:
            headers.update(extra)
        return headers

    def _request(
        self,
        method: str,
        path: str,
        params: Any = None,
        json_body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> requests.Response:
        """Send one request; raise StoreError on network failure or non-2xx."""
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=self._headers(headers),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise StoreError(f"{method} {path} failed: {e}") from e

        if not response.ok:
            raise StoreError(self._error_message(response), status_code=response.status_code)
        return response

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict):
            return body.get("message") or body.get("error") or str(body)
        return str(body)

    @staticmethod
    def _json(response: requests.Response) -> Any:
        if not response.content:
            return None
        return response.json()

    # ── Reads ────────────────────────────────────────────────────────────────

    def select(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> Result[list[Row], StoreError]:
        params: list[tuple[str, str]] = [("select", "*")]
        for column, value in (filters or {}).items():
            params.append((column, _filter_value(value)))
        if order_by:
            params.append(("order", f"{order_by}.{'desc' if descending else 'asc'}"))

        try:
            rows = self._json(self._request("GET", table, params=params)) or []
        except StoreError as e:
            return Err(e)
        return Ok(rows)

    def select_any(
        self, table: str, columns: Sequence[str], values: Sequence[str]
    ) -> Result[list[Row], StoreError]:
        if not values:
            return Ok([])
        in_list = _in_list(values)
        clause = ",".join(f"{column}.in.{in_list}" for column in columns)
        params = [("select", "*"), ("or", f"({clause})")]

        try:
            rows = self._json(self._request("GET", table, params=params)) or []
        except StoreError as e:
            return Err(e)
        return Ok(rows)

    def get(self, table: str, row_id: str) -> Result[Row, StoreError]:
        params = [("select", "*"), ("id", f"eq.{row_id}")]
        try:
            response = self._request("GET", table, params=params, headers={"Accept": _SINGLE_OBJECT})
        except StoreError as e:
            # PostgREST answers 406 when a single-object request matches no rows
            if e.status_code == 406:
                return Err(RowNotFoundError(table, row_id))
            return Err(e)
        return Ok(self._json(response))

    # ── Direct writes (legacy, unaudited) ────────────────────────────────────

    def insert(self, table: str, row: Row) -> Row:
        response = self._request(
            "POST", table, json_body=[row], headers={"Prefer": "return=representation"}
        )
        created = self._json(response) or [row]
        return created[0]

    def update(self, table: str, row_id: str, values: Row) -> Row:
        response = self._request(
            "PATCH",
            table,
            params=[("id", f"eq.{row_id}")],
            json_body=values,
            headers={"Prefer": "return=representation"},
        )
        updated = self._json(response) or []
        if not updated:
            raise RowNotFoundError(table, row_id)
        return updated[0]

    def delete(self, table: str, row_id: str) -> None:
        self._request("DELETE", table, params=[("id", f"eq.{row_id}")])

    # ── RPC ──────────────────────────────────────────────────────────────────

    def rpc(self, name: str, params: Mapping[str, Any]) -> Any:
        check_rpc_params(name, params)
        body = {key: value for key, value in params.items() if value is not None}
        logger.debug("Calling %s with %s", name, body)
        return self._json(self._request("POST", f"rpc/{name}", json_body=body))
