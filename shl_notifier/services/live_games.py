"""Tracker for the set of games currently polled for live updates."""

from __future__ import annotations

from ..logging import logger
from ..models import Game


class LiveGameTracker:
    """Insertion-ordered set of games keyed by game uuid."""

    def __init__(self) -> None:
        self._games: dict[str, Game] = {}

    def add_games(self, candidates: list[Game]) -> list[Game]:
        """Add games not already tracked. Returns the games that were added."""
        added: list[Game] = []
        for game in candidates:
            if game.game_uuid in self._games:
                continue
            self._games[game.game_uuid] = game
            added.append(game)

        if added:
            logger.info(
                "live_games_added",
                games=[f"{g.game_id} {g.status.value} {g.played}" for g in added],
                tracked=len(self._games),
            )
        return added

    def remove_game(self, game_uuid: str) -> None:
        """Stop tracking a game; no-op if it is not tracked."""
        if self._games.pop(game_uuid, None) is not None:
            logger.info("live_game_removed", game_uuid=game_uuid, tracked=len(self._games))

    def current(self) -> list[Game]:
        """Copy of the tracked games in insertion order."""
        return list(self._games.values())

    def __len__(self) -> int:
        return len(self._games)

    def __contains__(self, game_uuid: object) -> bool:
        return game_uuid in self._games
