"""
Client for a hosted PostgREST store (the REST layer behind Supabase).

Filters are sent in PostgREST's query dialect, e.g. ``?id=eq.abc`` or
``?todo_id=in.("a","b")``, and writes ask for the affected rows back with
``Prefer: return=representation``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import httpx

from ..errors import StorageError
from .base import Filter, Row, Store, Table

logger = logging.getLogger(__name__)

_RETURN_REPRESENTATION = {"Prefer": "return=representation"}


def _literal(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quoted(value: Any) -> str:
    text = _literal(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def _filter_params(filters: Sequence[Filter]) -> List[Tuple[str, str]]:
    params: List[Tuple[str, str]] = []
    for f in filters:
        if f.op == "eq":
            params.append((f.column, f"eq.{_literal(f.value)}"))
        elif f.op == "neq":
            params.append((f.column, f"neq.{_literal(f.value)}"))
        elif f.op == "in":
            params.append((f.column, f"in.({','.join(_quoted(v) for v in f.value)})"))
        else:
            params.append((f.column, "not.is.null"))
    return params


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)


class PostgrestTable(Table):
    def __init__(self, client: httpx.Client, name: str) -> None:
        self.name = name
        self._client = client

    def _send(
        self,
        method: str,
        params: Sequence[Tuple[str, str]],
        json: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> List[Row]:
        logger.debug("postgrest %s /%s %s", method, self.name, list(params))
        try:
            response = self._client.request(
                method, f"/{self.name}", params=list(params), json=json, headers=headers
            )
        except httpx.HTTPError as e:
            raise StorageError(str(e), table=self.name) from e
        if response.is_error:
            raise StorageError(_error_message(response), table=self.name)
        if not response.content:
            return []
        return list(response.json())

    def select(
        self,
        filters: Sequence[Filter] = (),
        order: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Row]:
        params = [("select", "*"), *_filter_params(filters)]
        if order is not None:
            params.append(("order", f"{order}.{'desc' if descending else 'asc'}"))
        if limit is not None:
            params.append(("limit", str(max(limit, 0))))
        return self._send("GET", params)

    def insert(self, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        if not rows:
            return []
        return self._send("POST", [], json=[dict(r) for r in rows], headers=_RETURN_REPRESENTATION)

    def update(self, values: Mapping[str, Any], filters: Sequence[Filter]) -> List[Row]:
        self._require_filters(filters, "UPDATE")
        return self._send("PATCH", _filter_params(filters), json=dict(values), headers=_RETURN_REPRESENTATION)

    def delete(self, filters: Sequence[Filter]) -> List[Row]:
        self._require_filters(filters, "DELETE")
        return self._send("DELETE", _filter_params(filters), headers=_RETURN_REPRESENTATION)


# PUBLIC_INTERFACE
class PostgrestStore(Store):
    """
    Store backed by a hosted PostgREST endpoint.

    Server defaults (ids, timestamps, booleans) and cascade rules come from
    the remote schema.
    """

    backend = "postgrest"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        headers: Dict[str, str] = {"Accept": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.Client(base_url=base_url.rstrip("/"), headers=headers, transport=transport)

    def table(self, name: str) -> Table:
        return PostgrestTable(self._client, name)

    def close(self) -> None:
        self._client.close()
