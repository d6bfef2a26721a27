"""
backend/app/providers/sports_provider.py

Purpose:
    Adapter for the sports game provider REST API: sports, competitions,
    events, markets, odds, bookmakers, sessions, premium fancy, scores and
    results. Every call is fail-soft: errors are logged and the caller gets
    an empty list (or None for the single-object score endpoint).

Dependencies:
    - app.providers.http_client
    - app.providers.batching
    - app.providers.normalize
    - app.services.cache_service
    - app.utils.ordering
"""

import logging
from typing import Any, Optional

from app.config import settings
from app.providers.batching import IdInput, IdListPolicy, fan_out, request_id_params
from app.providers.http_client import ProviderClient, ProviderClientConfig, describe_error
from app.providers.normalize import DecodePolicy, decode_entries, ensure_list
from app.services.cache_service import CacheBackend, cache_service
from app.utils.ordering import order_sessions

logger = logging.getLogger("oddsfeed.sports_provider")

PROVIDER_NAME = "sports_game_provider"


class CacheTTL:
    SERIES = settings.SPORTS_SERIES_CACHE_TTL_SECONDS
    MATCHES = settings.SPORTS_MATCHES_CACHE_TTL_SECONDS
    MARKETS = settings.SPORTS_MARKETS_CACHE_TTL_SECONDS
    BOOKMAKERS = settings.SPORTS_BOOKMAKERS_CACHE_TTL_SECONDS


def _log_failure(operation: str, exc: Exception, **context: Any) -> None:
    status, message = describe_error(exc)
    details = " ".join(f"{k}={v}" for k, v in context.items())
    logger.error("%s error (status=%s): %s %s", operation, status, message, details)


def default_client_config() -> ProviderClientConfig:
    return ProviderClientConfig(
        base_url=settings.SPORTS_GAME_PROVIDER_BASE_URL,
        timeout_seconds=settings.SPORTS_PROVIDER_TIMEOUT_SECONDS,
    )


class SportsProvider:
    """Raw endpoint access for one sports game provider."""

    def __init__(
        self,
        client: Optional[ProviderClient] = None,
        cache: Optional[CacheBackend] = None,
    ):
        self._client = client or ProviderClient(PROVIDER_NAME, default_client_config())
        self._cache = cache if cache is not None else cache_service

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Live data
    # ------------------------------------------------------------------

    async def get_sports(self) -> list[dict[str, Any]]:
        try:
            data = await self._client.get_json("/getSport")
            return ensure_list(data)
        except Exception as e:
            _log_failure("get_sports", e)
            return []

    async def _get_decoded_odds(self, path: str, event_type_id: str, market_ids: IdInput) -> list[Any]:
        async def fetch_chunk(joined_ids: str) -> list[Any]:
            data = await self._client.get_json(
                path, params={"EventTypeID": event_type_id, "marketId": joined_ids},
            )
            return decode_entries(data, DecodePolicy.PASS_THROUGH_ON_ERROR)

        return await fan_out(market_ids, fetch_chunk)

    async def get_odds(self, event_type_id: str, market_ids: IdInput) -> list[Any]:
        """Market odds, fetched in chunks of 30 market IDs."""
        try:
            return await self._get_decoded_odds("/getMarketsOdds", event_type_id, market_ids)
        except Exception as e:
            _log_failure("get_odds", e, event_type_id=event_type_id)
            return []

    async def get_bookmaker_odds(self, event_type_id: str, market_ids: IdInput) -> list[Any]:
        """Bookmaker odds, fetched in chunks of 30 market IDs."""
        try:
            return await self._get_decoded_odds("/getBookmakerOdds", event_type_id, market_ids)
        except Exception as e:
            _log_failure("get_bookmaker_odds", e, event_type_id=event_type_id)
            return []

    async def get_bookmakers(self, event_type_id: str, market_ids: IdInput) -> list[Any]:
        """Bookmaker odds in a single unchunked request, without decoding string entries."""
        try:
            [joined_ids] = request_id_params(market_ids, IdListPolicy.JOIN_ALL)
            data = await self._client.get_json(
                "/getBookmakerOdds",
                params={"EventTypeID": event_type_id, "marketId": joined_ids},
            )
            return ensure_list(data)
        except Exception as e:
            _log_failure("get_bookmakers", e, event_type_id=event_type_id)
            return []

    async def get_sessions(
        self, event_type_id: str, match_id: str, gtype: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        try:
            params = {"EventTypeID": event_type_id, "matchId": match_id}
            if gtype:
                params["gtype"] = gtype
            data = await self._client.get_json("/getSessions", params=params)
            sessions = order_sessions(decode_entries(data, DecodePolicy.DROP_ON_ERROR))
            logger.debug("Sessions for %s/%s: %d", event_type_id, match_id, len(sessions))
            return sessions
        except Exception as e:
            _log_failure("get_sessions", e, event_type_id=event_type_id, match_id=match_id)
            return []

    async def get_premium_fancy(self, event_type_id: str, match_id: str) -> list[Any]:
        try:
            data = await self._client.get_json(
                "/getPremium", params={"EventTypeID": event_type_id, "matchId": match_id},
            )
            return ensure_list(data)
        except Exception as e:
            logger.debug("get_premium_fancy failed for %s/%s: %s", event_type_id, match_id, e)
            return []

    async def get_score(self, event_type_id: str, match_id: str) -> Optional[dict[str, Any]]:
        """Live score object, or None when the match has no score feed."""
        try:
            data = await self._client.get_json(
                "/score", params={"EventTypeID": event_type_id, "matchId": match_id},
            )
            return data if isinstance(data, dict) else None
        except Exception as e:
            logger.debug("get_score failed for %s/%s: %s", event_type_id, match_id, e)
            return None

    async def get_score_matches(self, event_type_id: str) -> list[Any]:
        try:
            data = await self._client.get_json(
                "/matches/list", params={"EventTypeID": event_type_id},
            )
            return ensure_list(data)
        except Exception as e:
            _log_failure("get_score_matches", e, event_type_id=event_type_id)
            return []

    # ------------------------------------------------------------------
    # Results (first 30 market IDs only)
    # ------------------------------------------------------------------

    async def _get_results(
        self, operation: str, path: str, event_type_id: str, market_ids: IdInput,
    ) -> list[Any]:
        try:
            [joined_ids] = request_id_params(market_ids, IdListPolicy.TRUNCATE_TO_30)
            data = await self._client.get_json(
                path, params={"EventTypeID": event_type_id, "marketId": joined_ids},
            )
            return ensure_list(data)
        except Exception as e:
            _log_failure(operation, e, event_type_id=event_type_id)
            return []

    async def get_odds_results(self, event_type_id: str, market_ids: IdInput) -> list[Any]:
        return await self._get_results("get_odds_results", "/oddsResults", event_type_id, market_ids)

    async def get_bookmaker_results(self, event_type_id: str, market_ids: IdInput) -> list[Any]:
        return await self._get_results(
            "get_bookmaker_results", "/bookmakersResults", event_type_id, market_ids,
        )

    async def get_session_results(self, event_type_id: str, market_ids: IdInput) -> list[Any]:
        return await self._get_results(
            "get_session_results", "/sessionsResults", event_type_id, market_ids,
        )

    async def get_fancy_results(self, event_type_id: str, market_ids: IdInput) -> list[Any]:
        return await self._get_results("get_fancy_results", "/fancy1Results", event_type_id, market_ids)

    # ------------------------------------------------------------------
    # Cached lists
    # ------------------------------------------------------------------

    async def _cached_list(
        self,
        operation: str,
        cache_key: str,
        ttl: int,
        path: str,
        params: dict[str, Any],
    ) -> list[Any]:
        try:
            cached = await self._cache.get(cache_key)
            if cached is not None:
                return cached

            data = ensure_list(await self._client.get_json(path, params=params))
            await self._cache.set(cache_key, data, ttl)
            return data
        except Exception as e:
            _log_failure(
                operation, e, base_url=self._client.base_url, cache_key=cache_key,
            )
            return []

    async def get_series_list(self, event_type_id: str) -> list[dict[str, Any]]:
        return await self._cached_list(
            "get_series_list",
            f"series:{event_type_id}",
            CacheTTL.SERIES,
            "/fetch_data",
            {"Action": "listCompetitions", "EventTypeID": event_type_id},
        )

    async def get_match_list(self, event_type_id: str, competition_id: str) -> list[dict[str, Any]]:
        return await self._cached_list(
            "get_match_list",
            f"matches:{event_type_id}:{competition_id}",
            CacheTTL.MATCHES,
            "/fetch_data",
            {"Action": "listEvents", "EventTypeID": event_type_id, "CompetitionID": competition_id},
        )

    async def get_markets(self, event_type_id: str, event_id: str) -> list[dict[str, Any]]:
        return await self._cached_list(
            "get_markets",
            f"markets:{event_type_id}:{event_id}",
            CacheTTL.MARKETS,
            "/getMarkets",
            {"EventTypeID": event_type_id, "EventID": event_id},
        )

    async def get_bookmakers_list(self, event_type_id: str, event_id: str) -> list[dict[str, Any]]:
        return await self._cached_list(
            "get_bookmakers_list",
            f"bookmakers:{event_type_id}:{event_id}",
            CacheTTL.BOOKMAKERS,
            "/getBookmakers",
            {"EventTypeID": event_type_id, "EventID": event_id},
        )


sports_provider = SportsProvider()
