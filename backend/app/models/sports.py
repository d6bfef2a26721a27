"""
backend/app/models/sports.py

Purpose:
    Typed views over upstream sports payloads. Upstream entities stay plain
    dicts; the joins built on top of them are explicit models that flatten
    back into the shape the betting front-end reads.

Dependencies:
    - pydantic
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class MarketWithOdds(BaseModel):
    """A market (or bookmaker market) left-joined to its odds record."""

    market: dict[str, Any]
    odds: Optional[Any] = None

    @property
    def market_id(self) -> Any:
        return self.market.get("marketId")

    def flatten(self) -> dict[str, Any]:
        return {**self.market, "odds": self.odds}


class MatchWithOdds(BaseModel):
    match: dict[str, Any]
    odds: list[MarketWithOdds] = Field(default_factory=list)

    def flatten(self) -> dict[str, Any]:
        return {**self.match, "odds": [m.flatten() for m in self.odds]}


class SeriesWithMatches(BaseModel):
    id: Any
    name: Any = None
    matches: list[MatchWithOdds] = Field(default_factory=list)

    def flatten(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "matches": [m.flatten() for m in self.matches],
        }


class MatchDetailBundle(BaseModel):
    """Everything the match page needs in one payload.

    ``show_lay`` is False for racing event types and for the fallback bundle
    returned when composing the details fails.
    """

    model_config = ConfigDict(populate_by_name=True)

    match_odds: Optional[list[MarketWithOdds]] = Field(default=None, alias="matchOdds")
    score: Optional[dict[str, Any]] = None
    premium_fancy: Optional[list[Any]] = Field(default=None, alias="premiumFancy")
    bookmakers: Optional[list[MarketWithOdds]] = None
    sessions: Optional[list[dict[str, Any]]] = None
    show_lay: bool = Field(default=False, alias="showLay")

    @classmethod
    def empty(cls) -> "MatchDetailBundle":
        return cls()

    def to_payload(self) -> dict[str, Any]:
        return {
            "matchOdds": _flatten_markets(self.match_odds),
            "score": self.score,
            "premiumFancy": self.premium_fancy,
            "bookmakers": _flatten_markets(self.bookmakers),
            "sessions": self.sessions,
            "showLay": self.show_lay,
        }


def _flatten_markets(markets: Optional[list[MarketWithOdds]]) -> Optional[list[dict[str, Any]]]:
    if markets is None:
        return None
    return [m.flatten() for m in markets]
