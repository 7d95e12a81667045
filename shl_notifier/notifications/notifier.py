"""Fan one game event out to the subscribers who follow its teams."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..logging import logger
from ..models import GameEvent, User
from ..utils.datetime_utils import now_utc
from .templates import render_body, render_title
from .transport import Notification, NotificationTransport


class Outcome(str, Enum):
    delivered = "delivered"
    failed = "failed"
    skipped = "skipped"
    muted = "muted"


@dataclass(frozen=True)
class NotificationResult:
    """Outcome of one dispatch attempt, for logging only; never retried."""

    user: User
    outcome: Outcome
    reason: str | None = None


def user_has_subscribed(user: User, event: GameEvent) -> bool:
    return any(team in user.teams for team in event.teams)


class Notifier:
    def __init__(
        self,
        transport: NotificationTransport,
        topic: str,
        muted: bool = False,
        sound: str = "ping.aiff",
        expiry_seconds: int = 3600,
    ) -> None:
        self.transport = transport
        self.topic = topic
        self.muted = muted
        self.sound = sound
        self.expiry_seconds = expiry_seconds

    def notify(self, event: GameEvent, users: list[User]) -> list[NotificationResult]:
        """Send ``event`` to every subscribed user, one independent send per user."""
        if self.muted:
            logger.info("notify_muted", event_type=event.type, users=len(users))
            return [NotificationResult(user=u, outcome=Outcome.muted) for u in users]

        results: list[NotificationResult] = []
        for user in users:
            if not user_has_subscribed(user, event):
                continue
            if user.apn_token is None:
                results.append(NotificationResult(user=user, outcome=Outcome.skipped, reason="no push token"))
                continue
            results.append(self._send(user, user.apn_token, event))

        delivered = sum(1 for r in results if r.outcome == Outcome.delivered)
        logger.info(
            "notify_complete",
            event_type=event.type,
            game_uuid=event.game_uuid,
            targets=len(results),
            delivered=delivered,
        )
        return results

    def render(self, event: GameEvent, user: User) -> Notification:
        return Notification(
            title=render_title(event, user.teams),
            body=render_body(event),
            topic=self.topic,
            sound=self.sound,
            expiry=int(now_utc().timestamp()) + self.expiry_seconds,
            payload={"gameUuid": event.game_uuid, "eventType": event.type},
        )

    def _send(self, user: User, token: str, event: GameEvent) -> NotificationResult:
        note = self.render(event, user)
        try:
            result = self.transport.send(note, token)
        except Exception as exc:
            logger.error("push_send_error", user_id=user.id, event_type=event.type, error=str(exc))
            return NotificationResult(user=user, outcome=Outcome.failed, reason=str(exc))

        if result.failed_tokens:
            logger.error(
                "push_send_failed",
                user_id=user.id,
                event_type=event.type,
                failed=result.failed_tokens,
                reason=result.reason,
            )
            return NotificationResult(user=user, outcome=Outcome.failed, reason=result.reason or "rejected")

        logger.info("push_sent", user_id=user.id, title=note.title)
        return NotificationResult(user=user, outcome=Outcome.delivered)
