"""League standings with cache fallback."""

from __future__ import annotations

from pydantic import TypeAdapter

from ..live import FeedClient
from ..logging import logger
from ..models import Standing
from ..persistence import KeyValueStore

standings_adapter: TypeAdapter[list[Standing] | None] = TypeAdapter(list[Standing] | None)


class StandingService:
    def __init__(self, season: int, client: FeedClient, db: KeyValueStore[list[Standing] | None]) -> None:
        self.season = season
        self.client = client
        self.db = db

    def update(self) -> bool:
        """Refresh standings from the feed. On failure the stored table is kept."""
        try:
            standings = self.client.fetch_standings(self.season)
        except Exception as exc:
            logger.warning("standings_update_error", season=self.season, error=str(exc))
            return False

        self.db.write(sorted(standings, key=lambda s: s.rank))
        logger.debug("standings_updated", season=self.season, teams=len(standings))
        return True

    def read(self) -> list[Standing] | None:
        """Stored standings, or None if they were never fetched."""
        return self.db.read()
