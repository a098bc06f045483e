from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from gully_backend.core.auth import get_caller_id
from gully_backend.core.database import get_session
from gully_backend.models import BallType, ChallengeMatchRead, ChallengeStatus, Sport
from gully_backend.services import challenge_service
from gully_backend.services.notifications import Notifier, get_notifier
from gully_backend.services.settlement import settle_challenge_match

router = APIRouter()


class ChallengeRequest(BaseModel):
    team1_id: int
    team2_id: int
    sport: Sport = Sport.CRICKET
    ball_type: BallType = BallType.TENNIS
    match_length: Optional[int] = None
    match_authority_id: Optional[int] = None


class ChallengeScoreboardRequest(BaseModel):
    score_board: Dict[str, Any]


class ChallengeSettlementRequest(BaseModel):
    challenge_id: int
    winning_team_id: Optional[int] = None
    is_draw: bool = False


@router.post("/", response_model=ChallengeMatchRead, status_code=201)
def create_challenge(data: ChallengeRequest,
                     caller_id: int = Depends(get_caller_id),
                     session: Session = Depends(get_session)):
    return challenge_service.create_challenge_match(
        session, caller_id, data.team1_id, data.team2_id,
        sport=data.sport, ball_type=data.ball_type,
        match_length=data.match_length, match_authority_id=data.match_authority_id,
    )


@router.get("/", response_model=List[ChallengeMatchRead])
def my_challenges(caller_id: int = Depends(get_caller_id), session: Session = Depends(get_session)):
    return challenge_service.list_challenge_matches(session, caller_id)


@router.post("/{challenge_id}/status/{status}", response_model=ChallengeMatchRead)
def set_challenge_status(challenge_id: int, status: ChallengeStatus,
                         caller_id: int = Depends(get_caller_id),
                         session: Session = Depends(get_session)):
    """Accept or deny a pending challenge."""
    return challenge_service.update_challenge_status(session, challenge_id, caller_id, status)


@router.post("/{challenge_id}/scoreboard", response_model=ChallengeMatchRead)
def post_challenge_scoreboard(challenge_id: int, data: ChallengeScoreboardRequest,
                              caller_id: int = Depends(get_caller_id),
                              session: Session = Depends(get_session)):
    return challenge_service.update_challenge_scoreboard(session, challenge_id, caller_id, data.score_board)


@router.post("/settle", response_model=ChallengeMatchRead)
def settle_challenge(data: ChallengeSettlementRequest,
                     caller_id: int = Depends(get_caller_id),
                     session: Session = Depends(get_session),
                     notifier: Notifier = Depends(get_notifier)):
    return settle_challenge_match(
        session, data.challenge_id, caller_id,
        winning_team_id=data.winning_team_id, is_draw=data.is_draw, notifier=notifier,
    )


@router.get("/{challenge_id}/performance")
def my_performance(challenge_id: int,
                   caller_id: int = Depends(get_caller_id),
                   session: Session = Depends(get_session)):
    """The caller's own batting / bowling line in a challenge match."""
    return challenge_service.challenge_match_performance(session, challenge_id, caller_id)
