"""Notification copy per event kind.

Titles are personalized: a subscriber of the scoring or winning team gets
the excited variant. Copy is Swedish, as shown in the app.
"""

from __future__ import annotations

from ..models import (
    GameEndEvent,
    GameEvent,
    GameStartEvent,
    GameStatus,
    GoalEvent,
    PenaltyEvent,
    PeriodEndEvent,
    PeriodStartEvent,
)
from ..teams import get_short_name


def time_label(event: GameEvent) -> str:
    """Period label plus game clock, e.g. "P2 12:34" or "Övertid 02:10"."""
    status = event.status
    if status == GameStatus.shootout:
        return "Straffar"
    if status == GameStatus.overtime:
        return f"Övertid {event.game_time}".strip()
    if status == GameStatus.period3:
        return f"P3 {event.game_time}".strip()
    if status == GameStatus.period2:
        return f"P2 {event.game_time}".strip()
    if status == GameStatus.period1:
        return f"P1 {event.game_time}".strip()
    return event.game_time


def render_title(event: GameEvent, user_teams: list[str] | None = None) -> str:
    user_teams = user_teams or []

    if isinstance(event, GameStartEvent):
        return "Matchen började"
    if isinstance(event, GameEndEvent):
        winner = event.winner
        if winner is None:
            return "Matchen slutade"
        if winner in user_teams:
            return f"{get_short_name(winner)} vinner! 🎉"
        return f"{get_short_name(winner)} vann matchen"
    if isinstance(event, GoalEvent):
        if event.team in user_teams:
            return f"MÅÅÅL för {get_short_name(event.team)}! 🎉"
        return f"Mål för {get_short_name(event.team)}"
    if isinstance(event, PenaltyEvent):
        if event.penalty_long:
            return f"Utvisning - {event.penalty_long}"
        return "Utvisning"
    if isinstance(event, PeriodStartEvent):
        return f"Period {event.period_number} började"
    if isinstance(event, PeriodEndEvent):
        return f"Period {event.period_number} slutade"
    raise TypeError(f"Unknown event type: {type(event).__name__}")


def render_body(event: GameEvent) -> str | None:
    if isinstance(event, GameStartEvent):
        return f"{get_short_name(event.home_team_code)} - {get_short_name(event.away_team_code)}"
    if isinstance(event, GameEndEvent):
        return event.score_string
    if isinstance(event, GoalEvent):
        detail = ""
        if event.player is not None:
            detail += f"{event.player.short_name} • "
        if event.power_play:
            detail += "PP • "
        detail += time_label(event)
        return f"{event.score_string}\n{detail}".rstrip()
    if isinstance(event, PenaltyEvent):
        detail = ""
        if event.player is not None:
            detail += f"{event.player.short_name} • "
        detail += event.reason or (f"{event.penalty_minutes} min" if event.penalty_minutes else "")
        return detail.rstrip(" •") or None
    return None
