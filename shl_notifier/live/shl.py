"""SHL open API client (season schedule, game stats, standings).

Uses OAuth client credentials against the SHL open API. Every call either
returns parsed models or raises FeedError; callers decide how to fall back.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config import settings
from ..logging import logger
from ..models import Game, GameStats, Standing

SHL_TOKEN_PATH = "/oauth2/token"
SHL_SCHEDULE_PATH = "/seasons/{season}/games.json"
SHL_GAME_STATS_PATH = "/gamecenter/{game_uuid}/statistics/{game_id}.json"
SHL_STANDINGS_PATH = "/seasons/{season}/statistics/teams/standings.json"

# Refresh the access token this many seconds before it expires
_TOKEN_EXPIRY_MARGIN_SECONDS = 60

_games_adapter = TypeAdapter(list[Game])
_standings_adapter = TypeAdapter(list[Standing])


class FeedError(RuntimeError):
    """Raised when the SHL feed cannot be reached or returns unusable data."""


class SHLFeedClient:
    """Client for the SHL open API using httpx."""

    def __init__(
        self,
        base_url: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        feed = settings.feed_config
        self.client_id = client_id or feed.client_id
        self.client_secret = client_secret or feed.client_secret
        self.client = client or httpx.Client(
            base_url=base_url or feed.base_url,
            timeout=feed.request_timeout_seconds,
            headers={"User-Agent": "shl-notifier/1.0", "Accept": "application/json"},
        )
        self._access_token: str | None = None
        self._token_expires_at = 0.0

    def fetch_schedule(self, season: int) -> list[Game]:
        """Fetch every game of a season."""
        payload = self._get_json(SHL_SCHEDULE_PATH.format(season=season))
        games = self._parse(_games_adapter, payload, "schedule")
        logger.info("shl_schedule_parsed", season=season, count=len(games))
        return games

    def fetch_snapshot(self, game_uuid: str, game_id: int) -> GameStats:
        """Fetch the full stats snapshot of one game."""
        payload = self._get_json(SHL_GAME_STATS_PATH.format(game_uuid=game_uuid, game_id=game_id))
        if isinstance(payload, dict):
            payload.setdefault("gameUuid", game_uuid)
            payload.setdefault("gameId", game_id)
        return self._parse(GameStats, payload, "game_stats")

    def fetch_standings(self, season: int) -> list[Standing]:
        """Fetch the league table for a season."""
        payload = self._get_json(SHL_STANDINGS_PATH.format(season=season))
        standings = self._parse(_standings_adapter, payload, "standings")
        logger.info("shl_standings_parsed", season=season, count=len(standings))
        return standings

    def close(self) -> None:
        self.client.close()

    def _parse(self, model: Any, payload: Any, kind: str) -> Any:
        try:
            if isinstance(model, TypeAdapter):
                return model.validate_python(payload)
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.warning("shl_payload_invalid", kind=kind, error=str(exc))
            raise FeedError(f"Invalid {kind} payload: {exc.error_count()} errors") from exc

    def _auth_headers(self) -> dict[str, str]:
        if not self.client_id or not self.client_secret:
            return {}
        if self._access_token is None or time.time() >= self._token_expires_at:
            self._refresh_token()
        return {"Authorization": f"Bearer {self._access_token}"}

    def _refresh_token(self) -> None:
        response = self.client.post(
            SHL_TOKEN_PATH,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "grant_type": "client_credentials",
            },
        )
        if response.status_code != 200:
            logger.warning("shl_token_failed", status=response.status_code, body=response.text[:200])
            raise FeedError(f"Token request failed ({response.status_code})")

        data = response.json()
        self._access_token = data["access_token"]
        expires_in = int(data.get("expires_in", 3600))
        self._token_expires_at = time.time() + max(expires_in - _TOKEN_EXPIRY_MARGIN_SECONDS, 0)
        logger.debug("shl_token_refreshed", expires_in=expires_in)

    def _get_json(self, path: str) -> Any:
        try:
            response = self._get(path)
        except httpx.HTTPError as exc:
            logger.warning("shl_fetch_error", path=path, error=str(exc))
            raise FeedError(f"Request to {path} failed: {exc}") from exc

        if response.status_code == 401:
            # Token revoked or expired early; fetch a new one next call
            self._access_token = None
        if response.status_code != 200:
            logger.warning(
                "shl_fetch_failed",
                path=path,
                status=response.status_code,
                body=response.text[:200] if response.text else "",
            )
            raise FeedError(f"Failed to fetch {path} ({response.status_code})")

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("shl_fetch_undecodable", path=path, error=str(exc))
            raise FeedError(f"Undecodable response from {path}") from exc

    @retry(
        wait=wait_exponential(multiplier=0.5, max=2),
        stop=stop_after_attempt(settings.feed_config.retry_attempts),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    def _get(self, path: str) -> httpx.Response:
        logger.debug("shl_fetch", path=path)
        return self.client.get(path, headers=self._auth_headers())
