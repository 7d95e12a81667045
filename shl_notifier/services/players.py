"""Season player statistics, refreshed whenever a tracked game ends."""

from __future__ import annotations

from typing import Callable

from pydantic import TypeAdapter

from ..logging import logger
from ..models import Game, GameStats, PlayerStats
from ..persistence import KeyValueStore

player_stats_adapter: TypeAdapter[list[PlayerStats]] = TypeAdapter(list[PlayerStats])


def _player_key(team_code: str, player_id: int | None, first_name: str, family_name: str) -> tuple:
    if player_id is not None:
        return (team_code, player_id)
    return (team_code, first_name, family_name)


def aggregate_players(snapshots: list[GameStats]) -> list[PlayerStats]:
    """Sum goals, assists and penalty minutes per player over the given games."""
    totals: dict[tuple, PlayerStats] = {}
    for stats in snapshots:
        for team_code, roster in stats.players_by_team.items():
            for player in roster.players:
                key = _player_key(team_code, player.player_id, player.first_name, player.family_name)
                entry = totals.get(key)
                if entry is None:
                    entry = PlayerStats(
                        player_id=player.player_id,
                        first_name=player.first_name,
                        family_name=player.family_name,
                        team_code=team_code,
                    )
                    totals[key] = entry
                entry.games_played += 1
                entry.goals += player.goals
                entry.assists += player.assists
                entry.penalty_minutes += player.penalty_minutes

    return sorted(
        totals.values(),
        key=lambda p: (-(p.goals + p.assists), -p.goals, p.family_name, p.first_name),
    )


class PlayerService:
    def __init__(
        self,
        db: KeyValueStore[list[PlayerStats]],
        read_games: Callable[[], list[Game]],
        get_stats: Callable[[str], GameStats | None],
    ) -> None:
        self.db = db
        self.read_games = read_games
        self.get_stats = get_stats

    def update(self) -> list[PlayerStats]:
        """Rebuild season totals from the cached snapshots of played games."""
        snapshots = []
        for game in self.read_games():
            if not game.played:
                continue
            stats = self.get_stats(game.game_uuid)
            if stats is not None:
                snapshots.append(stats)

        players = aggregate_players(snapshots)
        self.db.write(players)
        logger.info("players_updated", games=len(snapshots), players=len(players))
        return players

    def read(self) -> list[PlayerStats]:
        return self.db.read()
