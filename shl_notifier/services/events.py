"""Append-only per-game event log used to gate at-most-once emission.

``store`` never deduplicates by itself: the game loop checks ``is_duplicate``
first and only stores and notifies events that are new.
"""

from __future__ import annotations

from pydantic import TypeAdapter

from ..logging import logger
from ..models.events import EventLog, GameEvent
from ..persistence import KeyValueStore

event_log_adapter: TypeAdapter[EventLog] = TypeAdapter(EventLog)


class EventService:
    def __init__(self, db: KeyValueStore[EventLog]) -> None:
        self.db = db

    def store(self, game_uuid: str, event: GameEvent) -> list[GameEvent]:
        """Append an event to the game's log and return the updated log."""
        events = self.db.read()
        game_events = events.get(game_uuid, [])
        game_events.append(event)
        events[game_uuid] = game_events
        self.db.write(events)
        logger.info("event_stored", game_uuid=game_uuid, game_event=str(event), count=len(game_events))
        return game_events

    def get_events(self, game_uuid: str) -> list[GameEvent]:
        return self.db.read().get(game_uuid, [])

    def get_cached_events(self, game_uuid: str) -> list[GameEvent]:
        return self.db.read_cached().get(game_uuid, [])

    def is_duplicate(self, event: GameEvent) -> bool:
        """True if an event with the same identity is already logged for the game."""
        identity = event.identity
        return any(e.identity == identity for e in self.get_cached_events(event.game_uuid))
