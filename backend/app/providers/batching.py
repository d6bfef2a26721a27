"""
backend/app/providers/batching.py

Purpose:
    Market-ID list handling for provider endpoints that take a
    comma-separated ``marketId`` parameter. Odds endpoints split long lists
    into concurrent chunk requests; results endpoints only look up the first
    30 IDs; the raw bookmakers lookup sends everything in one request.

Dependencies:
    - asyncio
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Sequence, Union

MAX_IDS_PER_REQUEST = 30

IdInput = Union[str, Sequence[Any]]


class IdListPolicy(str, Enum):
    BATCH_ALL = "batch_all"
    TRUNCATE_TO_30 = "truncate_to_30"
    JOIN_ALL = "join_all"


def as_id_list(ids: IdInput) -> list[Any]:
    if isinstance(ids, str):
        return [ids]
    return list(ids)


def chunk_ids(ids: IdInput, size: int = MAX_IDS_PER_REQUEST) -> list[list[Any]]:
    """Split into consecutive chunks of at most ``size`` IDs, keeping order."""
    id_list = as_id_list(ids)
    return [id_list[i:i + size] for i in range(0, len(id_list), size)]


def _join(ids: Sequence[Any]) -> str:
    # upstream IDs may be numbers
    return ",".join(str(i) for i in ids)


def request_id_params(ids: IdInput, policy: IdListPolicy) -> list[str]:
    """Comma-joined ``marketId`` values, one per upstream request."""
    id_list = as_id_list(ids)
    if policy is IdListPolicy.BATCH_ALL:
        return [_join(chunk) for chunk in chunk_ids(id_list)]
    if policy is IdListPolicy.TRUNCATE_TO_30:
        return [_join(id_list[:MAX_IDS_PER_REQUEST])]
    return [_join(id_list)]


async def fan_out(
    ids: IdInput,
    fetch_chunk: Callable[[str], Awaitable[list[Any]]],
) -> list[Any]:
    """Fetch every chunk concurrently and concatenate results in chunk order.

    Any chunk failure propagates; callers treat the whole lookup as failed.
    """
    joined = request_id_params(ids, IdListPolicy.BATCH_ALL)
    if not joined:
        return []
    results = await asyncio.gather(*(fetch_chunk(value) for value in joined))
    return [item for chunk in results for item in chunk]
