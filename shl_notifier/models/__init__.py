"""Typed models shared across the notifier."""

from .events import (
    EventPlayer,
    EventType,
    GameEndEvent,
    GameEvent,
    GameStartEvent,
    GoalEvent,
    PenaltyEvent,
    PeriodEndEvent,
    PeriodStartEvent,
    game_event_adapter,
)
from .schemas import (
    Game,
    GameRecap,
    GameStats,
    GameStatus,
    GoalRecord,
    PenaltyRecord,
    Player,
    PlayerStats,
    RecordPlayer,
    Standing,
    TeamRoster,
    User,
    status_from_period,
)

__all__ = [
    "EventPlayer",
    "EventType",
    "Game",
    "GameEndEvent",
    "GameEvent",
    "GameRecap",
    "GameStartEvent",
    "GameStats",
    "GameStatus",
    "GoalEvent",
    "GoalRecord",
    "PenaltyEvent",
    "PenaltyRecord",
    "PeriodEndEvent",
    "PeriodStartEvent",
    "Player",
    "PlayerStats",
    "RecordPlayer",
    "Standing",
    "TeamRoster",
    "User",
    "game_event_adapter",
    "status_from_period",
]
