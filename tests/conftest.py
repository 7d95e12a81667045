"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import os
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

# Set required environment variables before any imports
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("SEASON", "2024")
os.environ.setdefault("MUTE_NOTIFICATIONS", "false")

from shl_notifier.config import LoopConfig  # noqa: E402
from shl_notifier.game_loop import GameLoop  # noqa: E402
from shl_notifier.live import LoggingLiveSession  # noqa: E402
from shl_notifier.models import Game, GameRecap, GameStats, GoalRecord, PenaltyRecord, RecordPlayer, User  # noqa: E402
from shl_notifier.notifications import LoggingTransport, Notifier  # noqa: E402
from shl_notifier.persistence import MemoryStore  # noqa: E402
from shl_notifier.services.events import EventService  # noqa: E402
from shl_notifier.services.game_stats import GameStatsService  # noqa: E402
from shl_notifier.services.players import PlayerService  # noqa: E402
from shl_notifier.services.season import SeasonService  # noqa: E402
from shl_notifier.services.standings import StandingService  # noqa: E402
from shl_notifier.services.users import UserService  # noqa: E402

GAME_UUID = "qQ9-abc123"
GAME_ID = 1001


def make_game(**kwargs) -> Game:
    start = kwargs.pop("start_date_time", datetime.now(timezone.utc) + timedelta(minutes=2))
    return Game(
        game_uuid=kwargs.pop("game_uuid", GAME_UUID),
        game_id=kwargs.pop("game_id", GAME_ID),
        start_date_time=start,
        home_team_code=kwargs.pop("home_team_code", "LHF"),
        away_team_code=kwargs.pop("away_team_code", "FBK"),
        **kwargs,
    )


def make_stats(
    home: int = 0,
    away: int = 0,
    period: int = 1,
    played: bool = False,
    goals: list[GoalRecord] | None = None,
    penalties: list[PenaltyRecord] | None = None,
    home_penalties: int = 0,
    away_penalties: int = 0,
    game_time: str = "05:00",
    **kwargs,
) -> GameStats:
    return GameStats(
        game_uuid=kwargs.pop("game_uuid", GAME_UUID),
        game_id=kwargs.pop("game_id", GAME_ID),
        home_team_code=kwargs.pop("home_team_code", "LHF"),
        away_team_code=kwargs.pop("away_team_code", "FBK"),
        played=played,
        recap=GameRecap(
            home_goals=home,
            away_goals=away,
            home_penalties=home_penalties,
            away_penalties=away_penalties,
            period=period,
            game_time=game_time,
        ),
        goals=goals or [],
        penalties=penalties or [],
        **kwargs,
    )


def make_goal(team: str = "LHF", period: int = 1, game_time: str = "04:12", family_name: str = "Doe") -> GoalRecord:
    return GoalRecord(
        team_code=team,
        period=period,
        game_time=game_time,
        player=RecordPlayer(player_id=7, first_name="John", family_name=family_name, jersey=7),
    )


def make_penalty(team: str = "FBK", period: int = 1, reason: str = "Hooking") -> PenaltyRecord:
    return PenaltyRecord(
        team_code=team,
        period=period,
        game_time="08:00",
        player=RecordPlayer(player_id=22, first_name="Erik", family_name="Berg", jersey=22),
        penalty_minutes=2,
        penalty_long="2 min",
        reason=reason,
    )


@pytest.fixture
def feed_client():
    """Mock feed client returning one upcoming LHF-FBK game and an empty table."""
    client = MagicMock()
    client.fetch_schedule.return_value = [make_game()]
    client.fetch_standings.return_value = []
    client.fetch_snapshot.return_value = make_stats()
    return client


@pytest.fixture
def transport():
    return LoggingTransport()


@pytest.fixture
def subscriber():
    return User(id="user-1", teams=["LHF"], apn_token="token-lhf")


@pytest.fixture
def services(feed_client, transport):
    """All services wired over in-memory stores."""
    game_stats = GameStatsService(feed_client, MemoryStore("game_stats", {}))
    season = SeasonService(2024, feed_client, MemoryStore("season", []), game_stats.get_from_cache)
    standings = StandingService(2024, feed_client, MemoryStore("standings", None))
    events = EventService(MemoryStore("events", {}))
    users = UserService(MemoryStore("users", []))
    players = PlayerService(MemoryStore("players", []), season.get_decorated, game_stats.get_from_cache)
    notifier = Notifier(transport, topic="se.shl.live")
    return {
        "game_stats": game_stats,
        "season": season,
        "standings": standings,
        "events": events,
        "users": users,
        "players": players,
        "notifier": notifier,
    }


@pytest.fixture
def game_loop(services):
    return GameLoop(
        services["season"],
        services["standings"],
        services["game_stats"],
        services["events"],
        services["users"],
        services["players"],
        services["notifier"],
        session=LoggingLiveSession(),
        loop_config=LoopConfig(),
        sleep=MagicMock(),
    )
