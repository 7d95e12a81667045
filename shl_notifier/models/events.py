"""Game events derived from successive game stats snapshots.

Each event kind is its own model; ``GameEvent`` is the tagged union over them,
discriminated by ``type``. Every event has a dedup identity that never
includes the creation timestamp.
"""

from __future__ import annotations

import hashlib
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter

from ..utils.datetime_utils import now_utc
from .schemas import CamelModel, GameStats, GameStatus, RecordPlayer, status_from_period


class EventType(str, Enum):
    game_start = "GameStart"
    game_end = "GameEnd"
    goal = "Goal"
    penalty = "Penalty"
    period_start = "PeriodStart"
    period_end = "PeriodEnd"


class EventPlayer(CamelModel):
    first_name: str = ""
    family_name: str = ""
    jersey: int | None = None

    @classmethod
    def from_record(cls, player: RecordPlayer | None) -> EventPlayer | None:
        if player is None:
            return None
        return cls(first_name=player.first_name, family_name=player.family_name, jersey=player.jersey)

    @property
    def short_name(self) -> str:
        """"J. Doe" style name used in notification bodies."""
        if self.first_name:
            return f"{self.first_name[0]}. {self.family_name}".strip()
        return self.family_name


class _GameEventBase(CamelModel):
    game_uuid: str
    home_team_code: str
    away_team_code: str
    home_result: int
    away_result: int
    period_number: int = 0
    game_time: str = ""
    timestamp: datetime = Field(default_factory=now_utc)

    @classmethod
    def game_info(cls, stats: GameStats) -> dict:
        return {
            "game_uuid": stats.game_uuid,
            "home_team_code": stats.home_team_code,
            "away_team_code": stats.away_team_code,
            "home_result": stats.home_result,
            "away_result": stats.away_result,
            "period_number": stats.current_period_number,
            "game_time": stats.game_time,
        }

    @property
    def event_type(self) -> EventType:
        return EventType(self.type)

    @property
    def score_string(self) -> str:
        """Scoreline such as "LHF 3 - 0 FBK"."""
        return f"{self.home_team_code} {self.home_result} - {self.away_result} {self.away_team_code}"

    @property
    def status(self) -> GameStatus:
        return status_from_period(self.period_number)

    @property
    def teams(self) -> tuple[str, ...]:
        """Team codes a subscriber can follow to receive this event."""
        return (self.home_team_code, self.away_team_code)

    @property
    def identity(self) -> str:
        raise NotImplementedError

    def should_notify(self) -> bool:
        return True

    def __str__(self) -> str:
        return f"{self.game_time} {self.score_string} - {self.type} [{self.identity}]"


class GameStartEvent(_GameEventBase):
    type: Literal["GameStart"] = "GameStart"

    @property
    def identity(self) -> str:
        return self.type


class GameEndEvent(_GameEventBase):
    type: Literal["GameEnd"] = "GameEnd"

    @property
    def identity(self) -> str:
        return self.type

    @property
    def winner(self) -> str | None:
        if self.home_result == self.away_result:
            return None
        return self.home_team_code if self.home_result > self.away_result else self.away_team_code


class GoalEvent(_GameEventBase):
    type: Literal["Goal"] = "Goal"
    team: str
    player: EventPlayer | None = None
    assist: str | None = None
    power_play: bool = False

    @property
    def identity(self) -> str:
        # Same resulting scoreline means same goal
        return f"{self.type}:{self.score_string}"

    @property
    def teams(self) -> tuple[str, ...]:
        return (self.team,)


class PenaltyEvent(_GameEventBase):
    type: Literal["Penalty"] = "Penalty"
    team: str
    player: EventPlayer | None = None
    penalty_minutes: int | None = None
    penalty_long: str | None = None
    reason: str | None = None
    # Ordinal of this penalty among the team's penalties in the period
    sequence: int = 1

    @property
    def identity(self) -> str:
        player = ""
        if self.player is not None:
            player = f"{self.player.jersey}:{self.player.first_name}:{self.player.family_name}"
        penalty_type = self.penalty_long or self.reason or str(self.penalty_minutes or "")
        key = "|".join(
            [
                self.game_uuid,
                str(self.period_number),
                self.team,
                player,
                penalty_type,
                str(self.sequence),
            ]
        )
        return f"{self.type}:{hashlib.sha1(key.encode()).hexdigest()[:16]}"

    @property
    def teams(self) -> tuple[str, ...]:
        return (self.team,)


class PeriodStartEvent(_GameEventBase):
    type: Literal["PeriodStart"] = "PeriodStart"

    @property
    def identity(self) -> str:
        return f"{self.type}:{self.period_number}"

    def should_notify(self) -> bool:
        return False


class PeriodEndEvent(_GameEventBase):
    type: Literal["PeriodEnd"] = "PeriodEnd"

    @property
    def identity(self) -> str:
        return f"{self.type}:{self.period_number}"

    def should_notify(self) -> bool:
        return False


GameEvent = Annotated[
    Union[
        GameStartEvent,
        GameEndEvent,
        GoalEvent,
        PenaltyEvent,
        PeriodStartEvent,
        PeriodEndEvent,
    ],
    Field(discriminator="type"),
]

EventLog = dict[str, list[GameEvent]]

game_event_adapter: TypeAdapter[GameEvent] = TypeAdapter(GameEvent)
