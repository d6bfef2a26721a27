"""
backend/app/routers/sports.py

Purpose:
    Read API for the betting front-end: sports, series, matches, markets,
    odds, bookmakers, sessions, premium fancy, scores, results and the
    composed match detail bundle. Upstream failures never surface as HTTP
    errors; the services already degrade to empty payloads.

Dependencies:
    - app.services.sports_service
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Query, status

from app.services.sports_service import sports_service

logger = logging.getLogger("oddsfeed.sports")

router = APIRouter(prefix="/api/sports", tags=["sports"])

_RESULT_KINDS = {
    "odds": "get_odds_results",
    "bookmakers": "get_bookmaker_results",
    "sessions": "get_session_results",
    "fancy": "get_fancy_results",
}


def _market_ids(values: list[str]) -> list[str]:
    """Accept repeated ``market_id`` params and/or comma-separated values."""
    ids: list[str] = []
    for value in values:
        ids.extend(part.strip() for part in value.split(",") if part.strip())
    return ids


@router.get("/")
async def list_sports() -> list[Any]:
    return await sports_service.provider.get_sports()


@router.get("/{event_type_id}/series")
async def list_series(event_type_id: str) -> list[Any]:
    return await sports_service.provider.get_series_list(event_type_id)


@router.get("/{event_type_id}/series/tree")
async def series_tree(event_type_id: str) -> list[dict[str, Any]]:
    """Series with their matches and each match's markets-with-odds."""
    tree = await sports_service.get_series_with_matches(event_type_id)
    return [node.flatten() for node in tree]


@router.get("/{event_type_id}/series/{competition_id}/matches")
async def list_matches(event_type_id: str, competition_id: str) -> list[Any]:
    return await sports_service.provider.get_match_list(event_type_id, competition_id)


@router.get("/{event_type_id}/events/{event_id}/markets")
async def list_markets(event_type_id: str, event_id: str) -> list[Any]:
    return await sports_service.provider.get_markets(event_type_id, event_id)


@router.get("/{event_type_id}/events/{event_id}/markets/odds")
async def markets_with_odds(event_type_id: str, event_id: str) -> list[dict[str, Any]]:
    markets = await sports_service.get_markets_with_odds(event_type_id, event_id)
    return [m.flatten() for m in markets]


@router.get("/{event_type_id}/events/{event_id}/bookmakers")
async def list_bookmaker_markets(event_type_id: str, event_id: str) -> list[Any]:
    return await sports_service.provider.get_bookmakers_list(event_type_id, event_id)


@router.get("/{event_type_id}/events/{event_id}/bookmakers/odds")
async def bookmakers_with_odds(event_type_id: str, event_id: str) -> list[dict[str, Any]]:
    markets = await sports_service.get_bookmakers_with_odds(event_type_id, event_id)
    return [m.flatten() for m in markets]


@router.get("/{event_type_id}/odds")
async def market_odds(
    event_type_id: str,
    market_id: list[str] = Query(..., description="Market IDs, repeated or comma-separated"),
) -> list[Any]:
    return await sports_service.provider.get_odds(event_type_id, _market_ids(market_id))


@router.get("/{event_type_id}/bookmaker-odds")
async def bookmaker_odds(
    event_type_id: str,
    market_id: list[str] = Query(..., description="Market IDs, repeated or comma-separated"),
) -> list[Any]:
    return await sports_service.provider.get_bookmaker_odds(event_type_id, _market_ids(market_id))


@router.get("/{event_type_id}/bookmakers")
async def bookmakers(
    event_type_id: str,
    market_id: list[str] = Query(..., description="Market IDs, repeated or comma-separated"),
) -> list[Any]:
    return await sports_service.provider.get_bookmakers(event_type_id, _market_ids(market_id))


@router.get("/{event_type_id}/matches/{match_id}/sessions")
async def sessions(
    event_type_id: str,
    match_id: str,
    gtype: Optional[str] = Query(None, description="Upstream game type filter"),
) -> list[Any]:
    return await sports_service.provider.get_sessions(event_type_id, match_id, gtype=gtype)


@router.get("/{event_type_id}/matches/{match_id}/premium-fancy")
async def premium_fancy(event_type_id: str, match_id: str) -> list[Any]:
    return await sports_service.provider.get_premium_fancy(event_type_id, match_id)


@router.get("/{event_type_id}/matches/{match_id}/score")
async def score(event_type_id: str, match_id: str) -> Optional[dict[str, Any]]:
    return await sports_service.provider.get_score(event_type_id, match_id)


@router.get("/{event_type_id}/matches/{match_id}/details")
async def match_details(event_type_id: str, match_id: str) -> dict[str, Any]:
    bundle = await sports_service.get_match_details(event_type_id, match_id)
    return bundle.to_payload()


@router.get("/{event_type_id}/score-matches")
async def score_matches(event_type_id: str) -> list[Any]:
    return await sports_service.provider.get_score_matches(event_type_id)


@router.get("/{event_type_id}/results/{kind}")
async def results(
    event_type_id: str,
    kind: str,
    market_id: list[str] = Query(..., description="Market IDs; only the first 30 are looked up"),
) -> list[Any]:
    operation = _RESULT_KINDS.get(kind)
    if operation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown result kind: {kind}",
        )
    ids = _market_ids(market_id)
    logger.debug("Results lookup %s for %s: %d market IDs", kind, event_type_id, len(ids))
    return await getattr(sports_service.provider, operation)(event_type_id, ids)
