from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Sequence


def _parse_timestamp(value: str) -> datetime | None:
    s = (value or "").strip()
    if not s:
        return None
    # fromisoformat rejects a trailing 'Z' before Python 3.11
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


# PUBLIC_INTERFACE
def format_datetime(value: str) -> str:
    """
    Render a store timestamp as 'dd/mm/yyyy, HH:MM' (24h clock).

    Unparseable values are returned unchanged.
    """
    parsed = _parse_timestamp(value)
    if parsed is None:
        return value
    return parsed.strftime("%d/%m/%Y, %H:%M")


# PUBLIC_INTERFACE
def format_date(value: str) -> str:
    """Render a store timestamp as 'dd/mm/yyyy'."""
    parsed = _parse_timestamp(value)
    if parsed is None:
        return value
    return parsed.strftime("%d/%m/%Y")


# PUBLIC_INTERFACE
def available_users(
    users: Iterable[Mapping[str, Any]],
    assigned: Sequence[Mapping[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Return the users that are not already in ``assigned``, keeping their order.

    Args:
        users: The full user directory.
        assigned: The users currently linked to a todo.
    """
    taken = {u["id"] for u in assigned}
    return [dict(u) for u in users if u["id"] not in taken]
