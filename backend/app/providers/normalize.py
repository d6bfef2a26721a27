"""
backend/app/providers/normalize.py

Purpose:
    Coerce upstream response bodies into lists. The sports provider returns
    arrays whose elements may be objects or JSON-encoded strings; how a
    string that fails to decode is treated depends on the endpoint.

Dependencies:
    - json
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any


class EntryKind(str, Enum):
    structured = "structured"
    encoded = "encoded"
    other = "other"


class DecodePolicy(str, Enum):
    DROP_ON_ERROR = "drop_on_error"                  # sessions
    PASS_THROUGH_ON_ERROR = "pass_through_on_error"  # odds, bookmaker odds


_DROP = object()


@dataclass(frozen=True)
class RawEntry:
    kind: EntryKind
    value: Any

    @classmethod
    def classify(cls, item: Any) -> "RawEntry":
        if isinstance(item, str):
            return cls(EntryKind.encoded, item)
        if item is None:
            return cls(EntryKind.other, item)
        return cls(EntryKind.structured, item)

    def resolve(self, policy: DecodePolicy) -> Any:
        """Return the decoded value, or ``_DROP`` when the policy discards it."""
        if self.kind is not EntryKind.encoded:
            return self.value
        try:
            return json.loads(self.value)
        except ValueError:
            if policy is DecodePolicy.DROP_ON_ERROR:
                return _DROP
            return self.value


def ensure_list(data: Any, default: list | None = None) -> list:
    """Return ``data`` if it is a list, else ``default`` (empty list when omitted)."""
    if isinstance(data, list):
        return data
    return list(default) if default is not None else []


def decode_entries(data: Any, policy: DecodePolicy) -> list:
    """Decode every element of a list body according to ``policy``."""
    decoded = []
    for item in ensure_list(data):
        value = RawEntry.classify(item).resolve(policy)
        if value is _DROP:
            continue
        decoded.append(value)
    return decoded
