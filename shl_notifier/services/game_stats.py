"""Game stats fetcher with cache fallback.

The cache always holds the last complete snapshot per game. A failed fetch or
an incomplete payload (no recap) leaves the cache untouched and returns the
cached snapshot, so callers always diff against the last accepted state.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import TypeAdapter

from ..live import FeedClient
from ..logging import logger
from ..models import GameStats
from ..persistence import KeyValueStore

GameStatsByUuid = dict[str, GameStats]

game_stats_adapter: TypeAdapter[GameStatsByUuid] = TypeAdapter(GameStatsByUuid)


@dataclass(frozen=True)
class StatsRefresh:
    """Outcome of one refresh: the snapshot to use and whether it is new."""

    stats: GameStats | None
    updated: bool = False
    error: str | None = None


class GameStatsService:
    def __init__(self, client: FeedClient, db: KeyValueStore[GameStatsByUuid]) -> None:
        self.client = client
        self.db = db

    def get_from_cache(self, game_uuid: str) -> GameStats | None:
        """Pure cache read, no network I/O."""
        return self.db.read_cached().get(game_uuid)

    def update_game(self, game_uuid: str, game_id: int) -> GameStats | None:
        """Fetch the latest snapshot for a game, falling back to the cache."""
        return self.refresh(game_uuid, game_id).stats

    def refresh(self, game_uuid: str, game_id: int) -> StatsRefresh:
        """Fetch the latest snapshot and cache it when complete.

        Never raises for feed problems: on failure or incomplete data the
        previously cached snapshot (or None) is returned. Store failures
        propagate.
        """
        try:
            stats = self.client.fetch_snapshot(game_uuid, game_id)
        except Exception as exc:
            logger.warning("game_stats_fetch_error", game_uuid=game_uuid, game_id=game_id, error=str(exc))
            return StatsRefresh(stats=self.get_from_cache(game_uuid), error=str(exc))

        if stats is None or not stats.is_complete():
            logger.info("game_stats_incomplete", game_uuid=game_uuid, game_id=game_id)
            return StatsRefresh(stats=self.get_from_cache(game_uuid))

        cached = self.db.read()
        cached[game_uuid] = stats
        self.db.write(cached)
        logger.debug(
            "game_stats_updated",
            game_uuid=game_uuid,
            score=f"{stats.home_result}-{stats.away_result}",
            period=stats.current_period_number,
            played=stats.played,
        )
        return StatsRefresh(stats=stats, updated=True)
