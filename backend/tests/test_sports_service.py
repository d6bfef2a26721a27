"""
backend/tests/test_sports_service.py

Purpose:
    Composed sports views: market/odds joins, bookmaker joins, the series
    tree and the match detail bundle (including racing event types).
"""

from __future__ import annotations

import pytest

from app.models.sports import MarketWithOdds
from app.providers.sports_provider import SportsProvider
from app.services.cache_service import InMemoryTTLCache
from app.services.sports_service import SportsService, join_odds


class _FakeClient:
    base_url = "http://upstream.test"

    def __init__(self, routes: dict) -> None:
        self.routes = routes
        self.calls: list[dict] = []

    async def get_json(self, path, params=None):
        params = dict(params or {})
        self.calls.append({"path": path, "params": params})
        if path not in self.routes:
            raise AssertionError(f"unexpected upstream call: {path}")
        handler = self.routes[path]
        result = handler(params) if callable(handler) else handler
        if isinstance(result, Exception):
            raise result
        return result

    def paths(self) -> set[str]:
        return {c["path"] for c in self.calls}

    def calls_to(self, path: str) -> list[dict]:
        return [c for c in self.calls if c["path"] == path]

    async def aclose(self) -> None:
        return None


def _service(routes: dict) -> tuple[SportsService, _FakeClient]:
    client = _FakeClient(routes)
    provider = SportsProvider(client=client, cache=InMemoryTTLCache())
    return SportsService(provider=provider, racing_event_type_ids={"7", "4339"}), client


_MARKETS = [
    {"marketId": "m1", "marketName": "Match Odds", "sr_no": 2},
    {"marketId": "m2", "marketName": "Tied Match", "sr_no": 1},
]


def _odds_for(params: dict) -> list:
    return [
        {"marketId": m, "runners": [{"back": 1.9}]}
        for m in params["marketId"].split(",")
        if m == "m1"
    ]


def test_join_odds_first_match_wins_and_ids_compare_exactly():
    markets = [{"marketId": "1"}, {"marketId": 2}]
    odds = ["garbage", {"marketId": 1, "v": "int"}, {"marketId": "1", "v": "first"}, {"marketId": "1", "v": "second"}]

    joined = join_odds(markets, odds)

    assert joined[0].odds == {"marketId": "1", "v": "first"}
    assert joined[1].odds is None


@pytest.mark.asyncio
async def test_markets_with_odds_joins_and_orders_by_sr_no():
    service, client = _service({"/getMarkets": _MARKETS, "/getMarketsOdds": _odds_for})

    result = await service.get_markets_with_odds("4", "33")

    assert [m.market_id for m in result] == ["m2", "m1"]
    assert result[0].odds is None
    assert result[1].odds == {"marketId": "m1", "runners": [{"back": 1.9}]}
    assert client.calls_to("/getMarketsOdds")[0]["params"]["marketId"] == "m1,m2"
    assert result[1].flatten() == {**_MARKETS[0], "odds": result[1].odds}


@pytest.mark.asyncio
async def test_markets_with_odds_accepts_numeric_market_ids():
    markets = [{"marketId": 101, "sr_no": 2}, {"marketId": 102, "sr_no": 1}]
    odds = [{"marketId": 101, "runners": []}]
    service, client = _service({"/getMarkets": markets, "/getMarketsOdds": odds})

    result = await service.get_markets_with_odds("4", "33")

    assert [m.market_id for m in result] == [102, 101]
    assert result[0].odds is None
    assert result[1].odds == {"marketId": 101, "runners": []}
    assert client.calls_to("/getMarketsOdds")[0]["params"]["marketId"] == "101,102"


@pytest.mark.asyncio
async def test_markets_with_odds_empty_markets_skip_odds_lookup():
    service, client = _service({"/getMarkets": []})
    assert await service.get_markets_with_odds("4", "33") == []
    assert client.paths() == {"/getMarkets"}


@pytest.mark.asyncio
async def test_markets_without_ids_returned_unjoined_in_upstream_order():
    markets = [{"marketName": "b", "sr_no": 2}, {"marketName": "a", "sr_no": 1, "marketId": ""}]
    service, client = _service({"/getMarkets": markets})

    result = await service.get_markets_with_odds("4", "33")

    assert [m.market["marketName"] for m in result] == ["b", "a"]
    assert all(m.odds is None for m in result)
    assert client.paths() == {"/getMarkets"}


@pytest.mark.asyncio
async def test_markets_with_odds_is_idempotent_with_warm_cache():
    service, client = _service({"/getMarkets": _MARKETS, "/getMarketsOdds": _odds_for})

    first = await service.get_markets_with_odds("4", "33")
    second = await service.get_markets_with_odds("4", "33")

    assert [m.flatten() for m in first] == [m.flatten() for m in second]
    assert len(client.calls_to("/getMarkets")) == 1


@pytest.mark.asyncio
async def test_odds_failure_leaves_markets_unpriced():
    service, _ = _service({"/getMarkets": _MARKETS, "/getMarketsOdds": RuntimeError("down")})

    result = await service.get_markets_with_odds("4", "33")

    assert [m.market_id for m in result] == ["m2", "m1"]
    assert all(m.odds is None for m in result)


@pytest.mark.asyncio
async def test_bookmakers_with_odds_keeps_upstream_order():
    bookmakers = [
        {"marketId": "b2", "sr_no": 5},
        {"marketId": "b1", "sr_no": 1},
    ]
    odds = ['{"marketId":"b1","bm":1}', {"marketId": "b2", "bm": 2}]
    service, client = _service({"/getBookmakers": bookmakers, "/getBookmakerOdds": odds})

    result = await service.get_bookmakers_with_odds("4", "33")

    assert [m.market_id for m in result] == ["b2", "b1"]
    assert [m.odds["bm"] for m in result] == [2, 1]
    assert client.calls_to("/getBookmakerOdds")[0]["params"]["marketId"] == "b2,b1"


@pytest.mark.asyncio
async def test_series_tree_nests_matches_and_market_odds():
    def fetch_data(params):
        if params["Action"] == "listCompetitions":
            return [
                {"competition": {"id": "101", "name": "IPL"}},
                {"competition": {"id": "102", "name": "BBL"}},
            ]
        if params["CompetitionID"] == "101":
            return [{"event": {"id": "33", "name": "CSK v MI"}}]
        return []

    service, _ = _service({
        "/fetch_data": fetch_data,
        "/getMarkets": _MARKETS,
        "/getMarketsOdds": _odds_for,
    })

    tree = await service.get_series_with_matches("4")

    assert [(s.id, s.name) for s in tree] == [("101", "IPL"), ("102", "BBL")]
    assert tree[1].matches == []
    [match] = tree[0].matches
    assert match.match["event"]["id"] == "33"
    assert [m.market_id for m in match.odds] == ["m2", "m1"]

    flat = tree[0].flatten()
    assert flat["matches"][0]["event"]["name"] == "CSK v MI"
    assert flat["matches"][0]["odds"][1]["odds"]["marketId"] == "m1"


@pytest.mark.asyncio
async def test_series_tree_malformed_entry_empties_whole_tree():
    def fetch_data(params):
        if params["Action"] == "listCompetitions":
            return [{"competition": {"id": "101", "name": "IPL"}}, {"name": "no competition"}]
        return []

    service, _ = _service({"/fetch_data": fetch_data})

    assert await service.get_series_with_matches("4") == []


@pytest.mark.asyncio
async def test_match_details_bundle_for_cricket():
    service, client = _service({
        "/getMarkets": _MARKETS,
        "/getMarketsOdds": _odds_for,
        "/score": {"runs": 180},
        "/getPremium": [{"marketId": "p1"}],
        "/getBookmakers": [{"marketId": "b1"}],
        "/getBookmakerOdds": [{"marketId": "b1", "bm": 1}],
        "/getSessions": [{"gtype": "session", "sr_no": 1, "RunnerName": "6 over"}],
    })

    bundle = await service.get_match_details("4", "33")

    assert bundle.show_lay is True
    assert [m.market_id for m in bundle.match_odds] == ["m2", "m1"]
    assert bundle.score == {"runs": 180}
    assert bundle.premium_fancy == [{"marketId": "p1"}]
    assert bundle.bookmakers == [MarketWithOdds(market={"marketId": "b1"}, odds={"marketId": "b1", "bm": 1})]
    assert bundle.sessions == [{"gtype": "session", "sr_no": 1, "RunnerName": "6 over"}]

    payload = bundle.to_payload()
    assert set(payload) == {"matchOdds", "score", "premiumFancy", "bookmakers", "sessions", "showLay"}
    assert payload["bookmakers"] == [{"marketId": "b1", "odds": {"marketId": "b1", "bm": 1}}]


@pytest.mark.asyncio
@pytest.mark.parametrize("event_type_id", ["7", "4339"])
async def test_match_details_racing_skips_premium_and_bookmakers(event_type_id):
    service, client = _service({
        "/getMarkets": [{"marketId": "r1", "sr_no": 1}],
        "/getMarketsOdds": [{"marketId": "r1"}],
        "/score": {"status": "off"},
        "/getSessions": [],
    })

    bundle = await service.get_match_details(event_type_id, "900")

    assert bundle.premium_fancy is None
    assert bundle.bookmakers is None
    assert bundle.show_lay is False
    assert bundle.score == {"status": "off"}
    assert bundle.sessions == []
    assert client.paths() == {"/getMarkets", "/getMarketsOdds", "/score", "/getSessions"}


@pytest.mark.asyncio
async def test_match_details_failure_returns_null_bundle(monkeypatch):
    service, _ = _service({
        "/getMarkets": [],
        "/getPremium": [],
        "/getBookmakers": [],
        "/getSessions": [],
    })

    async def _broken_score(*_args, **_kwargs):
        raise RuntimeError("score feed crashed")

    monkeypatch.setattr(service.provider, "get_score", _broken_score)

    payload = (await service.get_match_details("4", "33")).to_payload()

    assert payload == {
        "matchOdds": None,
        "score": None,
        "premiumFancy": None,
        "bookmakers": None,
        "sessions": None,
        "showLay": False,
    }
