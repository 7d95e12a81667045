"""Season schedule with cache fallback and live-window selection."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

from pydantic import TypeAdapter

from ..live import FeedClient
from ..logging import logger
from ..models import Game, GameStats, GameStatus
from ..persistence import KeyValueStore
from ..utils.datetime_utils import ensure_utc, now_utc

games_adapter: TypeAdapter[list[Game]] = TypeAdapter(list[Game])


def decorate_game(game: Game, stats: GameStats | None) -> Game:
    """Overlay the scores, played flag and status of a game's snapshot."""
    if stats is None:
        status = GameStatus.played if game.played else game.status
        return game.model_copy(update={"status": status})

    played = game.played or stats.played
    return game.model_copy(
        update={
            "home_team_result": stats.home_result,
            "away_team_result": stats.away_result,
            "played": played,
            "status": GameStatus.played if played else stats.status,
        }
    )


def get_live_games(games: list[Game], window_minutes: int, now: datetime | None = None) -> list[Game]:
    """Return games starting within ``window_minutes`` (or already started) that are not played."""
    cutoff = (now or now_utc()) + timedelta(minutes=window_minutes)
    return [
        g for g in games
        if not g.played and ensure_utc(g.start_date_time) <= cutoff
    ]


class SeasonService:
    """Schedule for one season, refreshed from the feed each loop tick.

    Schedule reads are decorated with the cached snapshot of each game so a
    score or end seen only in game stats is reflected in the schedule.
    """

    def __init__(
        self,
        season: int,
        client: FeedClient,
        db: KeyValueStore[list[Game]],
        get_stats: Callable[[str], GameStats | None],
    ) -> None:
        self.season = season
        self.client = client
        self.db = db
        self.get_stats = get_stats

    def update(self) -> bool:
        """Refresh the schedule from the feed. Returns False when the feed failed."""
        try:
            games = self.client.fetch_schedule(self.season)
        except Exception as exc:
            logger.warning("season_update_error", season=self.season, error=str(exc))
            return False

        self.db.write(games)
        logger.debug("season_updated", season=self.season, games=len(games))
        return True

    def read(self) -> list[Game]:
        return self.db.read()

    def get_decorated(self) -> list[Game]:
        return [decorate_game(g, self.get_stats(g.game_uuid)) for g in self.db.read_cached()]

    def get_live_games(self, window_minutes: int, now: datetime | None = None) -> list[Game]:
        return get_live_games(self.get_decorated(), window_minutes, now)

    def get_game(self, game_uuid: str) -> Game | None:
        """Schedule entry for a game as last fetched, without decoration."""
        return next((g for g in self.db.read_cached() if g.game_uuid == game_uuid), None)
