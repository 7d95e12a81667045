"""Live session resource held open while games are being tracked.

The game loop opens the session when the first game becomes live, joins it
once per tracked game and closes it when the last game is evicted. The
session itself (a streaming socket to the feed) is a collaborator; the
default implementation only records and logs the lifecycle.
"""

from __future__ import annotations

from typing import Protocol

from ..logging import logger


class LiveSession(Protocol):
    def open(self) -> None: ...

    def join(self, game_id: int) -> None: ...

    def close(self) -> None: ...


class LoggingLiveSession:
    """Session that tracks joined games without holding a connection."""

    def __init__(self) -> None:
        self.is_open = False
        self.joined: list[int] = []

    def open(self) -> None:
        if self.is_open:
            return
        self.is_open = True
        logger.info("live_session_opened")

    def join(self, game_id: int) -> None:
        if game_id in self.joined:
            return
        self.joined.append(game_id)
        logger.info("live_session_joined", game_id=game_id)

    def close(self) -> None:
        if not self.is_open:
            return
        self.is_open = False
        self.joined = []
        logger.info("live_session_closed")
