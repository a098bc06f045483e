# gully_backend/models/player_model.py
from typing import Optional
from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Player(SQLModel, table=True):
    """
    A player registered on one team. The same person on another team is a
    different Player row; phone_number is what ties them together.
    """
    id: Optional[int] = Field(default=None, primary_key=True)
    team_id: int = Field(foreign_key="team.id", index=True)
    user_id: Optional[int] = Field(default=None, foreign_key="app_user.id")
    name: str
    phone_number: Optional[str] = Field(default=None, index=True)
    role: str = "Batsman"


class PlayerBattingStat(SQLModel, table=True):
    """Career batting counters for one ball type."""
    __table_args__ = (UniqueConstraint("player_id", "ball_type"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    player_id: int = Field(foreign_key="player.id", index=True)
    ball_type: str

    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    century: int = 0        # sum of century tiers (1..4 per match)
    half_century: int = 0
    out: int = 0
    innings: int = 0


class PlayerBowlingStat(SQLModel, table=True):
    """Career bowling counters for one ball type."""
    __table_args__ = (UniqueConstraint("player_id", "ball_type"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    player_id: int = Field(foreign_key="player.id", index=True)
    ball_type: str

    runs: int = 0
    wickets: int = 0
    overs: int = 0
    balls: int = 0          # legal deliveries recorded in the over log
    maidens: int = 0
    fours: int = 0
    sixes: int = 0
    wides: int = 0
    no_balls: int = 0
    innings: int = 0


class PlayerFootballStat(SQLModel, table=True):
    """Career football counters."""
    id: Optional[int] = Field(default=None, primary_key=True)
    player_id: int = Field(foreign_key="player.id", unique=True)

    matches_played: int = 0
    goals: int = 0
    assists: int = 0
    saves: int = 0
    clean_sheets: int = 0
    penalty_saves: int = 0
    penalty_goals: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    fouls_committed: int = 0
    fouls_suffered: int = 0
