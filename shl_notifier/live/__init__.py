"""Live feed collaborators: the SHL API client and the live session."""

from typing import Protocol

from ..models import Game, GameStats, Standing
from .session import LiveSession, LoggingLiveSession
from .shl import FeedError, SHLFeedClient


class FeedClient(Protocol):
    def fetch_schedule(self, season: int) -> list[Game]: ...

    def fetch_snapshot(self, game_uuid: str, game_id: int) -> GameStats: ...

    def fetch_standings(self, season: int) -> list[Standing]: ...


__all__ = ["FeedClient", "FeedError", "LiveSession", "LoggingLiveSession", "SHLFeedClient"]
