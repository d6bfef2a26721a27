"""Display ordering for session (fancy) entries and markets."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

SESSION_GTYPE = "session"

T = TypeVar("T")


def _as_number(value: Any) -> float:
    """Missing, falsy or non-numeric values order as 0."""
    if not value or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0


def _name_key(name: str) -> tuple[str, str]:
    """Dictionary-style collation: letters group case-insensitively, lowercase first on ties."""
    return name.casefold(), name.swapcase()


def _session_key(entry: dict[str, Any]) -> tuple[float, float, tuple[str, str]]:
    return (
        _as_number(entry.get("sr_no")),
        _as_number(entry.get("SelectionId")),
        _name_key(str(entry.get("RunnerName") or "")),
    )


def order_sessions(entries: list[Any]) -> list[dict[str, Any]]:
    """Keep ``gtype == "session"`` entries, ordered by sr_no, SelectionId, RunnerName."""
    sessions = [
        entry for entry in entries
        if isinstance(entry, dict) and entry.get("gtype") == SESSION_GTYPE
    ]
    return sorted(sessions, key=_session_key)


def market_sequence(market: dict[str, Any]) -> float:
    return _as_number(market.get("sr_no"))


def order_markets(items: list[T], market_of: Callable[[T], dict[str, Any]]) -> list[T]:
    # sorted() is stable, ties keep upstream order
    return sorted(items, key=lambda item: market_sequence(market_of(item)))
