"""Tests for deriving game events from two successive snapshots."""

from __future__ import annotations

from conftest import make_goal, make_penalty, make_stats

from shl_notifier.models import (
    GameEndEvent,
    GameStartEvent,
    GoalEvent,
    PenaltyEvent,
    PeriodEndEvent,
    PeriodStartEvent,
)
from shl_notifier.services.event_deriver import derive_events


def _types(events) -> list[str]:
    return [e.type for e in events]


# ---------------------------------------------------------------------------
# No previous snapshot
# ---------------------------------------------------------------------------
class TestFirstSnapshot:
    def test_live_game_yields_game_start_only(self):
        current = make_stats(home=1, period=1, goals=[make_goal()])
        events = derive_events(None, current)
        assert _types(events) == ["GameStart"]

    def test_coming_game_yields_nothing(self):
        assert derive_events(None, make_stats(period=0)) == []

    def test_already_played_game_yields_nothing(self):
        assert derive_events(None, make_stats(home=3, away=2, period=3, played=True)) == []


# ---------------------------------------------------------------------------
# Identical snapshots
# ---------------------------------------------------------------------------
class TestIdenticalSnapshots:
    def test_no_events(self):
        stats = make_stats(home=2, away=1, period=2, goals=[make_goal(), make_goal(), make_goal("FBK")])
        assert derive_events(stats, stats) == []

    def test_no_events_for_coming_game(self):
        stats = make_stats(period=0)
        assert derive_events(stats, stats) == []


# ---------------------------------------------------------------------------
# Game start
# ---------------------------------------------------------------------------
class TestGameStart:
    def test_coming_to_period1(self):
        events = derive_events(make_stats(period=0), make_stats(period=1))
        assert _types(events) == ["GameStart", "PeriodStart"]
        assert isinstance(events[0], GameStartEvent)
        assert isinstance(events[1], PeriodStartEvent)
        assert events[1].period_number == 1

    def test_no_start_once_live(self):
        events = derive_events(make_stats(period=1), make_stats(period=2))
        assert "GameStart" not in _types(events)


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------
class TestGoals:
    def test_single_goal_attributed_to_scorer(self):
        previous = make_stats(period=1)
        current = make_stats(home=1, period=1, goals=[make_goal("LHF", game_time="04:12")])

        events = derive_events(previous, current)

        assert len(events) == 1
        goal = events[0]
        assert isinstance(goal, GoalEvent)
        assert goal.team == "LHF"
        assert goal.home_result == 1
        assert goal.away_result == 0
        assert goal.game_time == "04:12"
        assert goal.player is not None
        assert goal.player.family_name == "Doe"

    def test_two_goal_gap_yields_two_scorelines(self):
        previous = make_stats(home=1, period=2, goals=[make_goal()])
        current = make_stats(
            home=3,
            period=2,
            goals=[make_goal(family_name="A"), make_goal(family_name="B"), make_goal(family_name="C")],
        )

        events = derive_events(previous, current)

        assert _types(events) == ["Goal", "Goal"]
        assert [e.score_string for e in events] == ["LHF 2 - 0 FBK", "LHF 3 - 0 FBK"]
        assert [e.player.family_name for e in events] == ["B", "C"]
        assert len({e.identity for e in events}) == 2

    def test_home_goals_come_before_away_goals(self):
        previous = make_stats(period=1)
        current = make_stats(home=1, away=1, period=1, goals=[make_goal("FBK"), make_goal("LHF")])

        events = derive_events(previous, current)

        assert [e.team for e in events] == ["LHF", "FBK"]
        assert [e.score_string for e in events] == ["LHF 1 - 0 FBK", "LHF 1 - 1 FBK"]

    def test_goal_without_record_is_team_only(self):
        events = derive_events(make_stats(period=1), make_stats(away=1, period=1))
        assert len(events) == 1
        assert events[0].team == "FBK"
        assert events[0].player is None

    def test_score_decrease_yields_no_goal(self):
        events = derive_events(make_stats(home=2, period=2), make_stats(home=1, period=2))
        assert events == []


# ---------------------------------------------------------------------------
# Penalties
# ---------------------------------------------------------------------------
class TestPenalties:
    def test_new_penalty(self):
        previous = make_stats(period=1)
        current = make_stats(period=1, away_penalties=1, penalties=[make_penalty("FBK")])

        events = derive_events(previous, current)

        assert len(events) == 1
        penalty = events[0]
        assert isinstance(penalty, PenaltyEvent)
        assert penalty.team == "FBK"
        assert penalty.reason == "Hooking"
        assert penalty.player.family_name == "Berg"

    def test_penalty_identity_is_stable_across_snapshots(self):
        previous = make_stats(period=1)
        first = make_stats(period=1, away_penalties=1, penalties=[make_penalty("FBK")])
        later = make_stats(period=1, away_penalties=1, penalties=[make_penalty("FBK")], game_time="15:00")

        a = derive_events(previous, first)[0]
        b = derive_events(previous, later)[0]

        assert a.identity == b.identity

    def test_unrecorded_penalty_sequence_counts_current_period(self):
        previous = make_stats(period=2, away_penalties=2, penalties=[make_penalty("FBK", period=1)] * 2)
        current = make_stats(
            period=2,
            away_penalties=4,
            penalties=[make_penalty("FBK", period=1)] * 2 + [make_penalty("FBK", period=2)],
        )

        events = derive_events(previous, current)

        assert [e.sequence for e in events] == [1, 2]
        assert all(e.period_number == 2 for e in events)
        assert events[1].player is None

    def test_same_player_twice_has_distinct_identities(self):
        previous = make_stats(period=1)
        current = make_stats(
            period=1,
            away_penalties=2,
            penalties=[make_penalty("FBK"), make_penalty("FBK")],
        )

        events = derive_events(previous, current)

        assert len(events) == 2
        assert events[0].identity != events[1].identity


# ---------------------------------------------------------------------------
# Periods
# ---------------------------------------------------------------------------
class TestPeriods:
    def test_period_change_yields_end_then_start(self):
        events = derive_events(make_stats(period=1), make_stats(period=2))
        assert isinstance(events[0], PeriodEndEvent)
        assert events[0].period_number == 1
        assert isinstance(events[1], PeriodStartEvent)
        assert events[1].period_number == 2

    def test_period_events_are_not_notified(self):
        events = derive_events(make_stats(period=1), make_stats(period=2))
        assert all(not e.should_notify() for e in events)


# ---------------------------------------------------------------------------
# Game end and ordering
# ---------------------------------------------------------------------------
class TestGameEnd:
    def test_played_transition_yields_game_end_last(self):
        previous = make_stats(home=2, away=1, period=3)
        current = make_stats(home=3, away=1, period=3, played=True, goals=[make_goal()] * 3)

        events = derive_events(previous, current)

        assert _types(events) == ["Goal", "GameEnd"]
        end = events[-1]
        assert isinstance(end, GameEndEvent)
        assert end.winner == "LHF"
        assert end.score_string == "LHF 3 - 1 FBK"

    def test_no_game_end_when_already_played(self):
        stats = make_stats(home=3, away=1, period=3, played=True)
        assert derive_events(stats, stats) == []

    def test_full_ordering(self):
        previous = make_stats(period=0)
        current = make_stats(
            home=1,
            period=2,
            played=True,
            goals=[make_goal()],
            away_penalties=1,
            penalties=[make_penalty("FBK")],
        )

        events = derive_events(previous, current)

        assert _types(events) == ["GameStart", "Goal", "Penalty", "PeriodStart", "GameEnd"]
