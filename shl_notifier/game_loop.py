"""Polling loop: track live games, derive events, notify subscribers.

One tick runs to completion before the next is scheduled, and games are
processed one at a time in the order they started being tracked:

    standings -> schedule -> live window -> per game:
        fetch stats -> derive events -> dedup -> store -> notify -> evict if played

The next tick comes after ``live_poll_seconds`` while games are tracked,
``idle_poll_seconds`` otherwise, and ``error_backoff_seconds`` after a tick
that raised or saw a feed failure. The loop never stops on errors.
"""

from __future__ import annotations

import time
from typing import Callable

from .config import LoopConfig, settings
from .live import LiveSession, LoggingLiveSession
from .logging import logger
from .models import Game, GameStats
from .notifications import Notifier
from .services.event_deriver import derive_events
from .services.events import EventService
from .services.game_stats import GameStatsService
from .services.live_games import LiveGameTracker
from .services.players import PlayerService
from .services.season import SeasonService
from .services.standings import StandingService
from .services.users import UserService


class GameLoop:
    def __init__(
        self,
        season_service: SeasonService,
        standings_service: StandingService,
        game_stats_service: GameStatsService,
        event_service: EventService,
        user_service: UserService,
        player_service: PlayerService,
        notifier: Notifier,
        session: LiveSession | None = None,
        loop_config: LoopConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.season_service = season_service
        self.standings_service = standings_service
        self.game_stats_service = game_stats_service
        self.event_service = event_service
        self.user_service = user_service
        self.player_service = player_service
        self.notifier = notifier
        self.session = session or LoggingLiveSession()
        self.config = loop_config or settings.loop_config
        self._sleep = sleep

        self.tracker = LiveGameTracker()
        self._session_open = False
        self._fetch_errors = 0

    def get_live_games(self) -> list[Game]:
        return self.tracker.current()

    def tick(self) -> int:
        """Run one polling iteration. Returns the number of games still tracked."""
        self._fetch_errors = 0

        if not self.standings_service.update():
            self._fetch_errors += 1
        if not self.season_service.update():
            self._fetch_errors += 1

        live = self.season_service.get_live_games(self.config.live_window_minutes)
        added = self.tracker.add_games(live)

        if len(self.tracker) > 0:
            if not self._session_open:
                self.session.open()
                self._session_open = True
            for game in added:
                self.session.join(game.game_id)

        for game in self.tracker.current():
            self._process_game(game)

        if len(self.tracker) == 0 and self._session_open:
            self.session.close()
            self._session_open = False

        return len(self.tracker)

    def _process_game(self, game: Game) -> None:
        previous = self.game_stats_service.get_from_cache(game.game_uuid)
        refresh = self.game_stats_service.refresh(game.game_uuid, game.game_id)
        if refresh.error is not None:
            self._fetch_errors += 1

        stats = refresh.stats
        if stats is None:
            # Nothing to diff yet; the schedule alone can still end the game
            scheduled = self.season_service.get_game(game.game_uuid)
            if scheduled is not None and scheduled.played:
                self._evict(game)
            return
        stats = self._with_schedule_result(stats)

        for event in derive_events(previous, stats):
            if self.event_service.is_duplicate(event):
                logger.debug("event_duplicate", game_uuid=game.game_uuid, identity=event.identity)
                continue
            self.event_service.store(game.game_uuid, event)
            if event.should_notify():
                self.notifier.notify(event, self.user_service.subscribers())

        if stats.is_played():
            self._evict(game)

    def _evict(self, game: Game) -> None:
        self.tracker.remove_game(game.game_uuid)
        self.player_service.update()

    def _with_schedule_result(self, stats: GameStats) -> GameStats:
        """Mark the snapshot played when the schedule already reports the game as played."""
        scheduled = self.season_service.get_game(stats.game_uuid)
        if scheduled is not None and scheduled.played and not stats.played:
            return stats.model_copy(update={"played": True})
        return stats

    def next_delay(self, live_games: int) -> int:
        if self._fetch_errors:
            return self.config.error_backoff_seconds
        if live_games > 0:
            return self.config.live_poll_seconds
        return self.config.idle_poll_seconds

    def run_once(self) -> int:
        """Run one tick, swallowing any error. Returns seconds until the next tick."""
        logger.info("game_loop_tick_start", tracked=len(self.tracker))
        try:
            live_games = self.tick()
        except Exception:
            delay = self.config.error_backoff_seconds
            logger.exception("game_loop_tick_error", next_in=delay)
            return delay

        delay = self.next_delay(live_games)
        logger.info(
            "game_loop_tick_complete",
            live_games=live_games,
            fetch_errors=self._fetch_errors,
            next_in=delay,
        )
        return delay

    def run_forever(self) -> None:
        """Poll for the lifetime of the process."""
        while True:
            delay = self.run_once()
            self._sleep(delay)
