"""Derive game events from two successive snapshots of the same game.

Events come out in a fixed order: game start, goals, penalties, period end
and start, game end. Deriving from identical snapshots yields nothing.
"""

from __future__ import annotations

from ..models import (
    EventPlayer,
    GameEndEvent,
    GameEvent,
    GameStartEvent,
    GameStats,
    GameStatus,
    GoalEvent,
    GoalRecord,
    PenaltyEvent,
    PenaltyRecord,
    PeriodEndEvent,
    PeriodStartEvent,
)


def derive_events(previous: GameStats | None, current: GameStats) -> list[GameEvent]:
    """Return the new events implied by moving from ``previous`` to ``current``.

    Without a previous snapshot the only event derived is a game start, and
    only when the game is already under way.
    """
    info = GameStartEvent.game_info(current)

    if previous is None:
        if current.is_live():
            return [GameStartEvent(**info)]
        return []

    events: list[GameEvent] = []

    if previous.status == GameStatus.coming and current.status != GameStatus.coming:
        events.append(GameStartEvent(**info))

    events.extend(_derive_goals(previous, current))
    events.extend(_derive_penalties(previous, current))
    events.extend(_derive_periods(previous, current))

    if not previous.played and current.played:
        events.append(GameEndEvent(**info))

    return events


def _derive_goals(previous: GameStats, current: GameStats) -> list[GoalEvent]:
    """One goal per unit of score increase, home side first.

    Each goal carries the scoreline right after it, so a feed gap of two
    goals yields two distinct scorelines.
    """
    goals: list[GoalEvent] = []
    home_result = previous.home_result
    away_result = previous.away_result

    for team, is_home in ((current.home_team_code, True), (current.away_team_code, False)):
        old = previous.result_for(team)
        new = current.result_for(team)
        records = current.goals_for(team)

        for goal_number in range(old + 1, new + 1):
            if is_home:
                home_result = goal_number
            else:
                away_result = goal_number
            record = _goal_record(records, goal_number, is_last=goal_number == new)

            info = GoalEvent.game_info(current)
            info.update(home_result=home_result, away_result=away_result)
            if record is not None:
                info.update(period_number=record.period or info["period_number"], game_time=record.game_time)
            goals.append(
                GoalEvent(
                    **info,
                    team=team,
                    player=EventPlayer.from_record(record.player) if record else None,
                    assist=record.assist if record else None,
                    power_play=record.power_play if record else False,
                )
            )

        # Away goals are rendered with the final home score
        if is_home:
            home_result = new

    return goals


def _goal_record(records: list[GoalRecord], goal_number: int, is_last: bool) -> GoalRecord | None:
    if len(records) >= goal_number:
        return records[goal_number - 1]
    if is_last and records:
        return records[-1]
    return None


def _derive_penalties(previous: GameStats, current: GameStats) -> list[PenaltyEvent]:
    penalties: list[PenaltyEvent] = []

    for team in (current.home_team_code, current.away_team_code):
        old = previous.penalty_count(team)
        new = current.penalty_count(team)
        records = current.penalties_for(team)

        for penalty_number in range(old + 1, new + 1):
            record = records[penalty_number - 1] if len(records) >= penalty_number else None
            info = PenaltyEvent.game_info(current)
            if record is None:
                # Unrecorded penalties are counted as taken in the current period
                in_period = sum(1 for r in records if r.period == info["period_number"])
                sequence = in_period + penalty_number - len(records)
                penalties.append(PenaltyEvent(**info, team=team, sequence=sequence))
                continue

            period = record.period or info["period_number"]
            info.update(period_number=period, game_time=record.game_time)
            penalties.append(
                PenaltyEvent(
                    **info,
                    team=team,
                    player=EventPlayer.from_record(record.player),
                    penalty_minutes=record.penalty_minutes,
                    penalty_long=record.penalty_long,
                    reason=record.reason,
                    sequence=_period_sequence(records[:penalty_number], period),
                )
            )

    return penalties


def _period_sequence(records: list[PenaltyRecord], period: int) -> int:
    """Ordinal of the last record among the team's penalties in ``period``."""
    return sum(1 for r in records if r.period == period) or len(records)


def _derive_periods(previous: GameStats, current: GameStats) -> list[GameEvent]:
    old = previous.current_period_number
    new = current.current_period_number
    if new <= old:
        return []

    events: list[GameEvent] = []
    info = PeriodStartEvent.game_info(current)
    if old >= 1:
        events.append(PeriodEndEvent(**{**info, "period_number": old}))
    events.append(PeriodStartEvent(**{**info, "period_number": new}))
    return events
