"""Push transports.

``ApnsTransport`` talks to Apple Push Notification service over HTTP/2 with
token (JWT) authentication. It is created once at startup and only used to
send. ``LoggingTransport`` stands in when no APNs credentials are configured.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import httpx
import jwt

from ..logging import logger

APNS_PRODUCTION_URL = "https://api.push.apple.com"
APNS_SANDBOX_URL = "https://api.sandbox.push.apple.com"

# Apple rejects provider tokens older than one hour
_TOKEN_TTL_SECONDS = 50 * 60


class TransportError(RuntimeError):
    """Raised when the push provider cannot be reached."""


@dataclass
class Notification:
    """A rendered push note ready to hand to a transport."""

    title: str
    body: str | None
    topic: str
    sound: str = "ping.aiff"
    expiry: int = 0
    payload: dict[str, Any] = field(default_factory=dict)

    def to_apns(self) -> dict[str, Any]:
        alert: dict[str, str] = {"title": self.title}
        if self.body:
            alert["body"] = self.body
        return {"aps": {"alert": alert, "sound": self.sound}, **self.payload}


@dataclass
class SendResult:
    failed_tokens: list[str] = field(default_factory=list)
    reason: str | None = None


class NotificationTransport(Protocol):
    def send(self, note: Notification, token: str) -> SendResult: ...


class LoggingTransport:
    """Transport that only logs; keeps the sent notes for inspection."""

    def __init__(self) -> None:
        self.sent: list[tuple[Notification, str]] = []

    def send(self, note: Notification, token: str) -> SendResult:
        self.sent.append((note, token))
        logger.info("push_logged", title=note.title, body=note.body, token=token[:8])
        return SendResult()


class ApnsTransport:
    """APNs provider connection using httpx over HTTP/2."""

    def __init__(
        self,
        key_path: str | Path,
        key_id: str,
        team_id: str,
        production: bool = False,
        timeout_seconds: int = 10,
        client: httpx.Client | None = None,
    ) -> None:
        self.key_id = key_id
        self.team_id = team_id
        self._signing_key = Path(key_path).read_text(encoding="utf-8")
        self.client = client or httpx.Client(
            base_url=APNS_PRODUCTION_URL if production else APNS_SANDBOX_URL,
            http2=True,
            timeout=timeout_seconds,
        )
        self._token: str | None = None
        self._token_issued_at = 0.0

    def _provider_token(self) -> str:
        now = time.time()
        if self._token is None or now - self._token_issued_at > _TOKEN_TTL_SECONDS:
            self._token = jwt.encode(
                {"iss": self.team_id, "iat": int(now)},
                self._signing_key,
                algorithm="ES256",
                headers={"kid": self.key_id},
            )
            self._token_issued_at = now
        return self._token

    def send(self, note: Notification, token: str) -> SendResult:
        headers = {
            "authorization": f"bearer {self._provider_token()}",
            "apns-topic": note.topic,
            "apns-push-type": "alert",
            "apns-expiration": str(note.expiry),
        }
        try:
            response = self.client.post(f"/3/device/{token}", json=note.to_apns(), headers=headers)
        except httpx.HTTPError as exc:
            raise TransportError(f"APNs request failed: {exc}") from exc

        if response.status_code == 200:
            return SendResult()

        reason = f"HTTP {response.status_code}"
        try:
            reason = response.json().get("reason", reason)
        except ValueError:
            # Non-JSON error body, keep the status as the reason
            pass
        if reason == "ExpiredProviderToken":
            self._token = None
        return SendResult(failed_tokens=[token], reason=reason)

    def close(self) -> None:
        self.client.close()
