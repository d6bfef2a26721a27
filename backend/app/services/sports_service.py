"""
backend/app/services/sports_service.py

Purpose:
    Composed sports views for the betting front-end: markets joined to odds,
    bookmaker markets joined to bookmaker odds, the series -> matches -> odds
    tree and the match detail bundle. Sub-fetches that do not depend on each
    other run concurrently.

Dependencies:
    - app.providers.sports_provider
    - app.models.sports
    - app.utils.ordering
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from app.config import settings
from app.models.sports import (
    MarketWithOdds,
    MatchDetailBundle,
    MatchWithOdds,
    SeriesWithMatches,
)
from app.providers.sports_provider import SportsProvider, sports_provider
from app.utils.ordering import order_markets

logger = logging.getLogger("oddsfeed.sports_service")


def join_odds(markets: list[dict[str, Any]], odds: list[Any]) -> list[MarketWithOdds]:
    """Left-join each market to the first odds record with the same ``marketId``."""
    joined = []
    for market in markets:
        market_id = market.get("marketId")
        match = next(
            (o for o in odds if isinstance(o, dict) and o.get("marketId") == market_id),
            None,
        )
        joined.append(MarketWithOdds(market=market, odds=match))
    return joined


def _ids_of(markets: list[dict[str, Any]]) -> list[Any]:
    return [m.get("marketId") for m in markets if m.get("marketId")]


class SportsService:
    def __init__(self, provider: Optional[SportsProvider] = None, racing_event_type_ids=None):
        self.provider = provider or sports_provider
        self.racing_event_type_ids = frozenset(
            racing_event_type_ids
            if racing_event_type_ids is not None
            else settings.racing_event_type_ids
        )

    def is_racing(self, event_type_id: str) -> bool:
        return event_type_id in self.racing_event_type_ids

    async def _join_with(
        self,
        operation: str,
        markets: list[dict[str, Any]],
        fetch_odds: Callable[[list[Any]], Awaitable[list[Any]]],
    ) -> list[MarketWithOdds]:
        market_ids = _ids_of(markets)
        if not market_ids:
            return [MarketWithOdds(market=m) for m in markets]
        odds = await fetch_odds(market_ids)
        logger.debug("%s: %d markets, %d odds records", operation, len(markets), len(odds))
        return join_odds(markets, odds)

    async def get_markets_with_odds(self, event_type_id: str, event_id: str) -> list[MarketWithOdds]:
        """Markets for an event with their odds attached, ordered by ``sr_no``."""
        try:
            markets = await self.provider.get_markets(event_type_id, event_id)
            if not markets:
                return []
            if not _ids_of(markets):
                return [MarketWithOdds(market=m) for m in markets]
            joined = await self._join_with(
                "markets_with_odds",
                markets,
                lambda ids: self.provider.get_odds(event_type_id, ids),
            )
            return order_markets(joined, lambda item: item.market)
        except Exception as e:
            logger.error("get_markets_with_odds error for %s/%s: %s", event_type_id, event_id, e)
            return []

    async def get_bookmakers_with_odds(
        self, event_type_id: str, event_id: str,
    ) -> list[MarketWithOdds]:
        """Bookmaker markets with bookmaker odds attached, in upstream order."""
        try:
            markets = await self.provider.get_bookmakers_list(event_type_id, event_id)
            if not markets:
                return []
            return await self._join_with(
                "bookmakers_with_odds",
                markets,
                lambda ids: self.provider.get_bookmaker_odds(event_type_id, ids),
            )
        except Exception as e:
            logger.error("get_bookmakers_with_odds error for %s/%s: %s", event_type_id, event_id, e)
            return []

    async def _series_matches(self, event_type_id: str, series: dict[str, Any]) -> SeriesWithMatches:
        competition = series["competition"]
        matches = await self.provider.get_match_list(event_type_id, competition["id"])
        return SeriesWithMatches(
            id=competition["id"],
            name=competition.get("name"),
            matches=[MatchWithOdds(match=m) for m in matches],
        )

    async def _attach_odds(self, event_type_id: str, match: MatchWithOdds) -> MatchWithOdds:
        odds = await self.get_markets_with_odds(event_type_id, match.match["event"]["id"])
        return MatchWithOdds(match=match.match, odds=odds)

    async def get_series_with_matches(self, event_type_id: str) -> list[SeriesWithMatches]:
        """Full series -> matches -> markets-with-odds tree. Any failure empties the tree."""
        try:
            series_list = await self.provider.get_series_list(event_type_id)
            tree = await asyncio.gather(
                *(self._series_matches(event_type_id, series) for series in series_list)
            )

            async def with_odds(node: SeriesWithMatches) -> SeriesWithMatches:
                matches = await asyncio.gather(
                    *(self._attach_odds(event_type_id, match) for match in node.matches)
                )
                return SeriesWithMatches(id=node.id, name=node.name, matches=list(matches))

            return list(await asyncio.gather(*(with_odds(node) for node in tree)))
        except Exception as e:
            logger.error("Series with matches fetch failed for %s: %s", event_type_id, e)
            return []

    async def get_match_details(self, event_type_id: str, match_id: str) -> MatchDetailBundle:
        """Markets, score, premium fancy, bookmakers and sessions for one match.

        Racing event types have no premium fancy or bookmaker markets, so those
        lookups are skipped entirely and lay prices are hidden.
        """
        try:
            racing = self.is_racing(event_type_id)

            async def skipped() -> None:
                return None

            premium_fancy = (
                skipped() if racing
                else self.provider.get_premium_fancy(event_type_id, match_id)
            )
            bookmakers = (
                skipped() if racing
                else self.get_bookmakers_with_odds(event_type_id, match_id)
            )

            (
                match_odds,
                score,
                premium_fancy_data,
                bookmakers_data,
                sessions,
            ) = await asyncio.gather(
                self.get_markets_with_odds(event_type_id, match_id),
                self.provider.get_score(event_type_id, match_id),
                premium_fancy,
                bookmakers,
                self.provider.get_sessions(event_type_id, match_id),
            )

            return MatchDetailBundle(
                match_odds=match_odds,
                score=score,
                premium_fancy=premium_fancy_data,
                bookmakers=bookmakers_data,
                sessions=sessions,
                show_lay=not racing,
            )
        except Exception as e:
            logger.error("get_match_details error for %s/%s: %s", event_type_id, match_id, e)
            return MatchDetailBundle.empty()


sports_service = SportsService()
