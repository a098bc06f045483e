from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlmodel import Session

from gully_backend.core.database import get_session
from gully_backend.services import rankings, top_performers as performers

router = APIRouter()


class TopPerformersRequest(BaseModel):
    latitude: float
    longitude: float
    start_date: Optional[date] = None
    ball_type: str = "tennis"


class FootballTopPerformersRequest(BaseModel):
    latitude: float
    longitude: float
    start_date: Optional[date] = None
    filter: str = Field(default="goals", description="'goals' or 'saves'")


# ============================================
# 🏆 Career leaderboards
# ============================================
@router.get("/teams/{ball_type}")
def get_team_ranking(ball_type: str, session: Session = Depends(get_session)):
    return rankings.team_ranking(session, ball_type)


@router.get("/football/teams")
def get_football_team_rankings(session: Session = Depends(get_session)):
    return rankings.football_team_rankings(session)


@router.get("/players/{ball_type}/{skill}")
def get_player_ranking(ball_type: str, skill: str, session: Session = Depends(get_session)):
    """skill is 'batting' (by runs) or 'bowling' (by wickets)."""
    return rankings.player_ranking(session, ball_type, skill)


@router.get("/football/players/{category}")
def get_football_player_ranking(category: str, session: Session = Depends(get_session)):
    return rankings.football_player_ranking(session, category)


# ============================================
# 📍 Top performers of the day
# ============================================
@router.post("/top-performers")
def get_top_performers(data: TopPerformersRequest, session: Session = Depends(get_session)):
    return performers.top_performers(
        session, data.latitude, data.longitude, data.start_date, ball_type=data.ball_type
    )


@router.post("/football/top-performers")
def get_football_top_performers(data: FootballTopPerformersRequest, session: Session = Depends(get_session)):
    return performers.football_top_performers(
        session, data.latitude, data.longitude, data.start_date, stat_filter=data.filter
    )
