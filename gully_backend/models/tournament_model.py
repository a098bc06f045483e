# tournament_model.py
# Defines Tournament and RegisteredTeam (a team's entry into a tournament).

from typing import Optional
from datetime import datetime
from enum import Enum
from sqlmodel import SQLModel, Field, Column

from gully_backend.core.time_utils import UTCDateTime


class Sport(str, Enum):
    CRICKET = "cricket"
    FOOTBALL = "football"


class BallType(str, Enum):
    """Cricket equipment variant. Each one has its own statistic bucket."""
    LEATHER = "leather"
    TENNIS = "tennis"


class RegistrationStatus(str, Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    DENIED = "Denied"


class Tournament(SQLModel, table=True):
    """
    A tournament hosted at a location for a date window.
    Cricket tournaments carry the ball type their matches are played with.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    sport: Sport = Field(default=Sport.CRICKET)
    ball_type: Optional[BallType] = Field(default=None)  # None for football
    organizer_id: Optional[int] = Field(default=None, foreign_key="app_user.id")

    # Venue location (decimal degrees)
    latitude: float = 0.0
    longitude: float = 0.0

    # Window (UTC)
    start_at: datetime = Field(sa_column=Column(UTCDateTime, nullable=False))
    end_at: datetime = Field(sa_column=Column(UTCDateTime, nullable=False))

    is_deleted: bool = Field(default=False)


class RegisteredTeam(SQLModel, table=True):
    """A team's registration into a tournament, made by a user."""
    id: Optional[int] = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournament.id", index=True)
    team_id: int = Field(foreign_key="team.id")
    user_id: Optional[int] = Field(default=None, foreign_key="app_user.id")
    status: RegistrationStatus = Field(default=RegistrationStatus.PENDING)
