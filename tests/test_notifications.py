"""Tests for notification copy, dispatch and the push transports."""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest
from conftest import GAME_UUID

from shl_notifier.models import EventPlayer, GameEndEvent, GameStartEvent, GoalEvent, PenaltyEvent, User
from shl_notifier.notifications import (
    ApnsTransport,
    LoggingTransport,
    Notification,
    Notifier,
    Outcome,
    SendResult,
    TransportError,
)
from shl_notifier.notifications.templates import render_body, render_title, time_label


def _info(**kwargs) -> dict:
    return {
        "game_uuid": GAME_UUID,
        "home_team_code": "LHF",
        "away_team_code": "FBK",
        "home_result": kwargs.pop("home_result", 1),
        "away_result": kwargs.pop("away_result", 0),
        "period_number": kwargs.pop("period_number", 1),
        "game_time": kwargs.pop("game_time", "04:12"),
        **kwargs,
    }


def _goal(team: str = "LHF", **kwargs) -> GoalEvent:
    return GoalEvent(**_info(**kwargs), team=team, player=EventPlayer(first_name="John", family_name="Doe"))


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------
class TestTemplates:
    def test_goal_title_personalized(self):
        assert render_title(_goal(), ["LHF"]) == "MÅÅÅL för Luleå! 🎉"
        assert render_title(_goal(), ["FBK"]) == "Mål för Luleå"

    def test_goal_body(self):
        assert render_body(_goal()) == "LHF 1 - 0 FBK\nJ. Doe • P1 04:12"

    def test_power_play_goal_body(self):
        event = _goal().model_copy(update={"power_play": True})
        assert "PP" in render_body(event)

    def test_game_end_titles(self):
        win = GameEndEvent(**_info(home_result=3, away_result=1))
        tie = GameEndEvent(**_info(home_result=2, away_result=2))
        assert render_title(win, ["LHF"]) == "Luleå vinner! 🎉"
        assert render_title(win, ["FBK"]) == "Luleå vann matchen"
        assert render_title(tie, ["LHF"]) == "Matchen slutade"

    def test_game_start(self):
        event = GameStartEvent(**_info(home_result=0))
        assert render_title(event) == "Matchen började"
        assert render_body(event) == "Luleå - Färjestad"

    def test_penalty(self):
        event = PenaltyEvent(
            **_info(),
            team="FBK",
            player=EventPlayer(first_name="Erik", family_name="Berg"),
            penalty_long="2 min",
            reason="Hooking",
        )
        assert render_title(event) == "Utvisning - 2 min"
        assert render_body(event) == "E. Berg • Hooking"

    def test_time_labels(self):
        assert time_label(_goal(period_number=4, game_time="02:10")) == "Övertid 02:10"
        assert time_label(_goal(period_number=5)) == "Straffar"


# ---------------------------------------------------------------------------
# Notifier
# ---------------------------------------------------------------------------
class TestNotifier:
    def test_sends_to_subscribed_users_only(self):
        transport = LoggingTransport()
        notifier = Notifier(transport, topic="se.shl.live")
        users = [
            User(id="a", teams=["LHF"], apn_token="tok-a"),
            User(id="b", teams=["HV71"], apn_token="tok-b"),
        ]

        results = notifier.notify(_goal(), users)

        assert [r.user.id for r in results] == ["a"]
        assert results[0].outcome == Outcome.delivered
        assert [token for _, token in transport.sent] == ["tok-a"]

    def test_game_level_events_reach_both_teams(self):
        transport = LoggingTransport()
        notifier = Notifier(transport, topic="se.shl.live")
        users = [
            User(id="a", teams=["LHF"], apn_token="tok-a"),
            User(id="b", teams=["FBK"], apn_token="tok-b"),
        ]
        results = notifier.notify(GameStartEvent(**_info()), users)
        assert len(results) == 2

    def test_muted_reports_every_user(self):
        transport = LoggingTransport()
        notifier = Notifier(transport, topic="se.shl.live", muted=True)
        users = [User(id="a", teams=["LHF"], apn_token="tok-a"), User(id="b", teams=["HV71"])]

        results = notifier.notify(_goal(), users)

        assert [r.outcome for r in results] == [Outcome.muted, Outcome.muted]
        assert transport.sent == []

    def test_user_without_token_skipped(self):
        transport = LoggingTransport()
        notifier = Notifier(transport, topic="se.shl.live")
        results = notifier.notify(_goal(), [User(id="a", teams=["LHF"])])
        assert results[0].outcome == Outcome.skipped
        assert transport.sent == []

    def test_failure_for_one_user_does_not_block_others(self):
        transport = MagicMock()
        transport.send.side_effect = [TransportError("reset"), SendResult(failed_tokens=["tok-b"], reason="BadDeviceToken"), SendResult()]
        notifier = Notifier(transport, topic="se.shl.live")
        users = [User(id=uid, teams=["LHF"], apn_token=f"tok-{uid}") for uid in ("a", "b", "c")]

        results = notifier.notify(_goal(), users)

        assert [r.outcome for r in results] == [Outcome.failed, Outcome.failed, Outcome.delivered]
        assert results[1].reason == "BadDeviceToken"
        assert transport.send.call_count == 3

    def test_rendered_note(self):
        notifier = Notifier(LoggingTransport(), topic="se.shl.live", sound="ping.aiff", expiry_seconds=3600)
        note = notifier.render(_goal(), User(id="a", teams=["LHF"], apn_token="tok"))
        assert note.topic == "se.shl.live"
        assert note.sound == "ping.aiff"
        assert note.expiry > 0
        assert note.to_apns()["aps"]["alert"]["title"] == "MÅÅÅL för Luleå! 🎉"
        assert note.to_apns()["eventType"] == "Goal"


# ---------------------------------------------------------------------------
# ApnsTransport
# ---------------------------------------------------------------------------
class TestApnsTransport:
    @pytest.fixture
    def key_file(self, tmp_path):
        path = tmp_path / "AuthKey.p8"
        path.write_text("fake-key")
        return path

    def _transport(self, key_file, client):
        transport = ApnsTransport(key_file, key_id="KEY", team_id="TEAM", client=client)
        transport._provider_token = MagicMock(return_value="jwt")
        return transport

    def _note(self) -> Notification:
        return Notification(title="Mål för Luleå", body="LHF 1 - 0 FBK", topic="se.shl.live", expiry=123)

    def test_success(self, key_file):
        client = MagicMock()
        client.post.return_value = MagicMock(status_code=200)
        result = self._transport(key_file, client).send(self._note(), "device")

        assert result.failed_tokens == []
        path = client.post.call_args.args[0]
        headers = client.post.call_args.kwargs["headers"]
        assert path == "/3/device/device"
        assert headers["apns-topic"] == "se.shl.live"
        assert headers["apns-expiration"] == "123"
        assert headers["authorization"] == "bearer jwt"

    def test_rejection_reports_reason(self, key_file):
        client = MagicMock()
        client.post.return_value = MagicMock(status_code=410, json=lambda: {"reason": "Unregistered"})
        result = self._transport(key_file, client).send(self._note(), "device")
        assert result.failed_tokens == ["device"]
        assert result.reason == "Unregistered"

    def test_network_error_raises_transport_error(self, key_file):
        client = MagicMock()
        client.post.side_effect = httpx.ConnectError("refused")
        with pytest.raises(TransportError):
            self._transport(key_file, client).send(self._note(), "device")
