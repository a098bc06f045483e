# match_model.py
# Defines Match (tournament fixtures), ChallengeMatch (ad-hoc matches)
# and the read schemas returned by settlement.

from typing import Optional, Dict, Any
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict
from sqlmodel import SQLModel, Field, JSON, Column

from gully_backend.core.time_utils import UTCDateTime, utcnow
from gully_backend.models.tournament_model import Sport, BallType


class MatchStatus(str, Enum):
    SCHEDULED = "scheduled"
    CURRENT = "current"    # live scoring has started
    PLAYED = "played"      # settled, terminal


class ChallengeStatus(str, Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    DENIED = "Denied"
    PLAYED = "played"


class Match(SQLModel, table=True):
    """
    A fixture between two teams inside a tournament.
    scheduled_at is stored as UTC and loads back timezone-aware.
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    # Foreign keys
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    team1_id: int = Field(foreign_key="team.id")
    team2_id: int = Field(foreign_key="team.id")
    match_authority_id: int = Field(foreign_key="app_user.id")  # May submit results

    # Fixture details
    round: str
    match_no: int = 0
    scheduled_at: datetime = Field(sa_column=Column(UTCDateTime, nullable=False, index=True))
    match_length: Optional[int] = None
    venue: Optional[str] = None

    # Live scoring & result
    status: MatchStatus = Field(default=MatchStatus.SCHEDULED)
    score_board: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    winning_team_id: Optional[int] = Field(default=None, foreign_key="team.id")
    is_match_draw: bool = False
    is_match_ended: bool = False

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime, nullable=False))


class ChallengeMatch(SQLModel, table=True):
    """
    An ad-hoc match one team's captain challenges another team to.
    Settles exactly like Match but has no tournament behind it.
    """
    id: Optional[int] = Field(default=None, primary_key=True)

    challenged_by_id: int = Field(foreign_key="app_user.id")
    team1_id: int = Field(foreign_key="team.id")
    team2_id: int = Field(foreign_key="team.id")
    captain1_id: int = Field(foreign_key="app_user.id")
    captain2_id: int = Field(foreign_key="app_user.id")
    match_authority_id: int = Field(foreign_key="app_user.id")

    sport: Sport = Field(default=Sport.CRICKET)
    ball_type: BallType = Field(default=BallType.TENNIS)
    status: ChallengeStatus = Field(default=ChallengeStatus.PENDING)
    match_length: Optional[int] = None

    score_board: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    winning_team_id: Optional[int] = Field(default=None, foreign_key="team.id")
    is_match_draw: bool = False
    is_match_ended: bool = False

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime, nullable=False))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(UTCDateTime, nullable=False))


# -------------------------------
# Pydantic schemas for API responses
# -------------------------------
class MatchRead(BaseModel):
    """Match record returned after cricket settlement and scoreboard writes."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    tournament_id: int
    team1_id: int
    team2_id: int
    round: str
    match_no: int
    scheduled_at: datetime
    status: MatchStatus
    winning_team_id: Optional[int] = None
    is_match_draw: bool
    is_match_ended: bool


class ChallengeMatchRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    team1_id: int
    team2_id: int
    captain1_id: int
    captain2_id: int
    sport: Sport
    ball_type: BallType
    status: ChallengeStatus
    winning_team_id: Optional[int] = None
    is_match_draw: bool
    is_match_ended: bool
