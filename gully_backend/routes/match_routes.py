from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from gully_backend.core.auth import get_caller_id
from gully_backend.core.database import get_session
from gully_backend.models import MatchRead
from gully_backend.services.match_service import delete_match, schedule_match, update_scoreboard
from gully_backend.services.notifications import Notifier, get_notifier
from gully_backend.services.settlement import settle_cricket_match, settle_football_match

router = APIRouter()


# ---------------------------------------------
# Request bodies
# ---------------------------------------------
class ScheduleMatchRequest(BaseModel):
    tournament_id: int
    team1_id: int
    team2_id: int
    round: str
    match_no: int = 0
    scheduled_at: datetime
    match_length: Optional[int] = None
    match_authority_id: Optional[int] = None
    venue: Optional[str] = None


class ScoreboardRequest(BaseModel):
    score_board: Dict[str, Any]


class CricketSettlementRequest(BaseModel):
    match_id: int
    winning_team_id: Optional[int] = None
    is_draw: bool = False


class FootballSettlementRequest(BaseModel):
    match_id: int
    winning_team_id: Optional[int] = None


# ============================================
# 📅 Scheduling & live scoring
# ============================================
@router.post("/", response_model=MatchRead, status_code=201)
def create_match(data: ScheduleMatchRequest,
                 caller_id: int = Depends(get_caller_id),
                 session: Session = Depends(get_session),
                 notifier: Notifier = Depends(get_notifier)):
    """Schedule a fixture. Both team owners are notified."""
    return schedule_match(
        session, caller_id,
        tournament_id=data.tournament_id,
        team1_id=data.team1_id,
        team2_id=data.team2_id,
        round_label=data.round,
        scheduled_at=data.scheduled_at,
        match_no=data.match_no,
        match_length=data.match_length,
        match_authority_id=data.match_authority_id,
        venue=data.venue,
        notifier=notifier,
    )


@router.post("/{match_id}/scoreboard", response_model=MatchRead)
def post_scoreboard(match_id: int, data: ScoreboardRequest,
                    caller_id: int = Depends(get_caller_id),
                    session: Session = Depends(get_session)):
    return update_scoreboard(session, match_id, caller_id, data.score_board)


@router.delete("/{match_id}")
def remove_match(match_id: int,
                 caller_id: int = Depends(get_caller_id),
                 session: Session = Depends(get_session),
                 notifier: Notifier = Depends(get_notifier)):
    delete_match(session, match_id, caller_id, notifier=notifier)
    return {"message": "Match deleted", "match_id": match_id}


# ============================================
# 🏁 Settlement
# ============================================
@router.post("/settle/cricket", response_model=MatchRead)
def settle_cricket(data: CricketSettlementRequest,
                   caller_id: int = Depends(get_caller_id),
                   session: Session = Depends(get_session),
                   notifier: Notifier = Depends(get_notifier)):
    """
    Settle a finished cricket match.
    The authority's winner / draw call is final.
    """
    return settle_cricket_match(
        session, data.match_id, caller_id,
        winning_team_id=data.winning_team_id, is_draw=data.is_draw, notifier=notifier,
    )


@router.post("/settle/football")
def settle_football(data: FootballSettlementRequest,
                    caller_id: int = Depends(get_caller_id),
                    session: Session = Depends(get_session),
                    notifier: Notifier = Depends(get_notifier)):
    """
    Settle a finished football match.
    Draws are decided from the scoreboard (shootout > extra time > regulation).
    """
    return settle_football_match(
        session, data.match_id, caller_id, winning_team_id=data.winning_team_id, notifier=notifier,
    )
