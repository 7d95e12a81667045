"""Pydantic models for feed payloads and stored entities.

Field names are snake_case in Python and camelCase on the wire, both for the
SHL feed and for the JSON stores.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GameStatus(str, Enum):
    coming = "Coming"
    period1 = "Period1"
    period2 = "Period2"
    period3 = "Period3"
    overtime = "Overtime"
    shootout = "Shootout"
    played = "Played"


LIVE_STATUSES = frozenset(
    {
        GameStatus.period1,
        GameStatus.period2,
        GameStatus.period3,
        GameStatus.overtime,
        GameStatus.shootout,
    }
)


def status_from_period(period_number: int, played: bool = False) -> GameStatus:
    """Map a period number (0 before face-off, 4 overtime, 5+ shootout) to a status."""
    if played:
        return GameStatus.played
    if period_number <= 0:
        return GameStatus.coming
    if period_number == 1:
        return GameStatus.period1
    if period_number == 2:
        return GameStatus.period2
    if period_number == 3:
        return GameStatus.period3
    if period_number == 4:
        return GameStatus.overtime
    return GameStatus.shootout


class Game(CamelModel):
    """A scheduled game as listed in the season schedule."""

    game_uuid: str
    game_id: int
    season: int | None = None
    start_date_time: datetime
    home_team_code: str
    away_team_code: str
    home_team_result: int = 0
    away_team_result: int = 0
    played: bool = False
    status: GameStatus = GameStatus.coming


class RecordPlayer(CamelModel):
    player_id: int | None = None
    first_name: str = ""
    family_name: str = ""
    jersey: int | None = None


class Player(RecordPlayer):
    """Roster entry with the per-game counting stats."""

    position: str | None = None
    goals: int = 0
    assists: int = 0
    penalty_minutes: int = 0


class TeamRoster(CamelModel):
    players: list[Player] = Field(default_factory=list)


class GoalRecord(CamelModel):
    team_code: str
    period: int = 0
    game_time: str = ""
    player: RecordPlayer | None = None
    assist: str | None = None
    power_play: bool = False


class PenaltyRecord(CamelModel):
    team_code: str
    period: int = 0
    game_time: str = ""
    player: RecordPlayer | None = None
    penalty_minutes: int | None = None
    penalty_long: str | None = None
    reason: str | None = None


class GameRecap(CamelModel):
    """Summary section of a game stats payload; its absence marks a payload as incomplete."""

    home_goals: int = 0
    away_goals: int = 0
    home_penalties: int = 0
    away_penalties: int = 0
    period: int = 0
    game_time: str = ""


class GameStats(CamelModel):
    """The fullest known state of one game (a snapshot)."""

    game_uuid: str
    game_id: int
    home_team_code: str
    away_team_code: str
    played: bool = False
    recap: GameRecap | None = None
    goals: list[GoalRecord] = Field(default_factory=list)
    penalties: list[PenaltyRecord] = Field(default_factory=list)
    players_by_team: dict[str, TeamRoster] = Field(default_factory=dict)

    def is_complete(self) -> bool:
        return self.recap is not None

    def is_played(self) -> bool:
        return self.played

    @property
    def home_result(self) -> int:
        return self.recap.home_goals if self.recap else 0

    @property
    def away_result(self) -> int:
        return self.recap.away_goals if self.recap else 0

    @property
    def current_period_number(self) -> int:
        return self.recap.period if self.recap else 0

    @property
    def game_time(self) -> str:
        return self.recap.game_time if self.recap else ""

    @property
    def status(self) -> GameStatus:
        return status_from_period(self.current_period_number, self.played)

    def is_live(self) -> bool:
        return self.status in LIVE_STATUSES

    def result_for(self, team_code: str) -> int:
        if team_code == self.home_team_code:
            return self.home_result
        if team_code == self.away_team_code:
            return self.away_result
        return 0

    def penalty_count(self, team_code: str) -> int:
        if not self.recap:
            return 0
        if team_code == self.home_team_code:
            return self.recap.home_penalties
        if team_code == self.away_team_code:
            return self.recap.away_penalties
        return 0

    def goals_for(self, team_code: str) -> list[GoalRecord]:
        return [g for g in self.goals if g.team_code == team_code]

    def penalties_for(self, team_code: str) -> list[PenaltyRecord]:
        return [p for p in self.penalties if p.team_code == team_code]


class Standing(CamelModel):
    team_code: str
    rank: int
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    points: int = 0
    goal_difference: int = 0


class PlayerStats(CamelModel):
    """Season totals for one player, aggregated from played games."""

    player_id: int | None = None
    first_name: str = ""
    family_name: str = ""
    team_code: str
    games_played: int = 0
    goals: int = 0
    assists: int = 0
    penalty_minutes: int = 0


class User(CamelModel):
    """A push subscriber.

    Only users with both a team subscription and a push token are kept in
    the subscriber store; see UserService.add_user.
    """

    id: str
    teams: list[str] = Field(default_factory=list)
    apn_token: str | None = None

    @field_validator("id")
    @classmethod
    def _require_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("user id must not be empty")
        return v

    @field_validator("teams")
    @classmethod
    def _normalize_teams(cls, v: list[str]) -> list[str]:
        teams: list[str] = []
        for code in v:
            code = code.strip().upper()
            if not code:
                raise ValueError("team codes must not be empty")
            if code not in teams:
                teams.append(code)
        return teams

    @field_validator("apn_token")
    @classmethod
    def _blank_token_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()

    def is_notifiable(self) -> bool:
        return bool(self.teams) and self.apn_token is not None
