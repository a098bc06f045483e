# team_model.py
# Defines Team and TeamStat (cumulative per-bucket team counters).

from typing import Optional
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field

from gully_backend.models.tournament_model import Sport


class Team(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    logo: Optional[str] = None
    sport: Sport = Field(default=Sport.CRICKET)
    owner_id: Optional[int] = Field(default=None, foreign_key="app_user.id")


class TeamStat(SQLModel, table=True):
    """
    Cumulative counters for one team in one bucket.

    bucket is the ball type for cricket ("leather" / "tennis") and "football"
    for football. Rows are only ever incremented by match settlement.
    """
    __table_args__ = (UniqueConstraint("team_id", "bucket"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="team.id", index=True)
    bucket: str

    matches_played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0

    # Cricket
    runs: int = 0
    wickets: int = 0
    balls: int = 0     # overs * 6 + balls, summed over innings
    innings: int = 0

    # Football
    goals: int = 0
    goals_conceded: int = 0
    clean_sheets: int = 0
