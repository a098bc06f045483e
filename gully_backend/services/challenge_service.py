# gully_backend/services/challenge_service.py
# Ad-hoc challenge matches between two teams (no tournament behind them).

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, or_
from sqlmodel import Session, select

from gully_backend.core.errors import AlreadyExists, BadRequest, NotFound
from gully_backend.core.time_utils import utcnow
from gully_backend.models import BallType, ChallengeMatch, ChallengeStatus, Sport, Team, User
from gully_backend.models.scoreboard_schemas import parse_scoreboard
from gully_backend.services.football_stats import player_deltas
from gully_backend.services.settlement import require_caller
from gully_backend.services.stat_math import economy, milestones, overs_notation, strike_rate

logger = logging.getLogger(__name__)

# Status changes a captain may make by hand. `played` is set by settlement only.
STATUS_TRANSITIONS = {
    ChallengeStatus.PENDING: {ChallengeStatus.ACCEPTED, ChallengeStatus.DENIED},
}


def get_challenge(session: Session, challenge_id: int) -> ChallengeMatch:
    challenge = session.get(ChallengeMatch, challenge_id)
    if not challenge:
        raise NotFound("Challenge match not found")
    return challenge


def _require_captain(challenge: ChallengeMatch, caller_id: Optional[int]) -> int:
    caller_id = require_caller(caller_id)
    if caller_id not in (challenge.captain1_id, challenge.captain2_id, challenge.match_authority_id):
        raise BadRequest("You are not allowed to manage this challenge match")
    return caller_id


def create_challenge_match(session: Session, caller_id: Optional[int], team1_id: int, team2_id: int,
                           sport: Sport = Sport.CRICKET, ball_type: BallType = BallType.TENNIS,
                           match_length: Optional[int] = None,
                           match_authority_id: Optional[int] = None) -> ChallengeMatch:
    """
    The caller challenges team2 on behalf of team1.
    Captain 1 is the caller, captain 2 is team2's owner.
    """
    caller_id = require_caller(caller_id)
    if team1_id == team2_id:
        raise BadRequest("A team cannot challenge itself")

    team1, team2 = session.get(Team, team1_id), session.get(Team, team2_id)
    if not team1 or not team2:
        raise NotFound("Team not found")
    if team2.owner_id is None:
        raise BadRequest("Challenged team has no owner to accept the challenge")

    pending = session.exec(
        select(ChallengeMatch).where(
            ChallengeMatch.status == ChallengeStatus.PENDING,
            or_(
                and_(ChallengeMatch.team1_id == team1_id, ChallengeMatch.team2_id == team2_id),
                and_(ChallengeMatch.team1_id == team2_id, ChallengeMatch.team2_id == team1_id),
            ),
        )
    ).first()
    if pending:
        raise AlreadyExists("Challenge Match Already Exist.")

    challenge = ChallengeMatch(
        challenged_by_id=caller_id,
        team1_id=team1_id,
        team2_id=team2_id,
        captain1_id=caller_id,
        captain2_id=team2.owner_id,
        match_authority_id=match_authority_id or caller_id,
        sport=sport,
        ball_type=ball_type,
        match_length=match_length,
    )
    session.add(challenge)
    session.commit()
    session.refresh(challenge)
    logger.info("⚔️ Challenge %s: %s challenged %s", challenge.id, team1.name, team2.name)
    return challenge


def list_challenge_matches(session: Session, caller_id: Optional[int]) -> List[ChallengeMatch]:
    """Challenges where the caller captains either side (denied ones left out)."""
    caller_id = require_caller(caller_id)
    return list(session.exec(
        select(ChallengeMatch)
        .where(
            or_(ChallengeMatch.captain1_id == caller_id, ChallengeMatch.captain2_id == caller_id),
            ChallengeMatch.status != ChallengeStatus.DENIED,
        )
        .order_by(ChallengeMatch.created_at.desc(), ChallengeMatch.id.desc())
    ).all())


def update_challenge_status(session: Session, challenge_id: int, caller_id: Optional[int],
                            status: ChallengeStatus) -> ChallengeMatch:
    challenge = get_challenge(session, challenge_id)
    _require_captain(challenge, caller_id)

    allowed = STATUS_TRANSITIONS.get(challenge.status, set())
    if status not in allowed:
        raise BadRequest(f"Cannot move a {challenge.status.value} challenge to {status.value}")

    challenge.status = status
    challenge.updated_at = utcnow()
    session.add(challenge)
    session.commit()
    session.refresh(challenge)
    return challenge


def update_challenge_scoreboard(session: Session, challenge_id: int, caller_id: Optional[int],
                                score_board: Dict[str, Any]) -> ChallengeMatch:
    challenge = get_challenge(session, challenge_id)
    _require_captain(challenge, caller_id)

    if challenge.status != ChallengeStatus.ACCEPTED:
        raise BadRequest("Scores can only be recorded for an accepted challenge")

    parse_scoreboard(challenge.sport, score_board)

    challenge.score_board = score_board
    challenge.updated_at = utcnow()
    session.add(challenge)
    session.commit()
    session.refresh(challenge)
    return challenge


def challenge_match_performance(session: Session, challenge_id: int, caller_id: Optional[int]) -> Dict:
    """
    The caller's own line from a challenge scoreboard.
    The caller is found on either roster by their phone number.
    """
    caller_id = require_caller(caller_id)
    challenge = get_challenge(session, challenge_id)

    user = session.get(User, caller_id)
    if not user:
        raise NotFound("User not found")
    if not user.phone_number:
        raise BadRequest("User has no phone number")

    sport = getattr(challenge.sport, "value", challenge.sport)
    scoreboard = parse_scoreboard(sport, challenge.score_board)
    entry = next((p for p in scoreboard.roster() if p.phone_number == user.phone_number), None)
    if entry is None:
        raise NotFound("Player not found in either team.")

    if sport == Sport.FOOTBALL.value:
        stats = player_deltas(scoreboard).get(entry.id, {})
        return {"challenge_id": challenge.id, "sport": sport, "player_name": entry.name, "football": stats}

    batting, bowling = entry.batting, entry.bowling
    runs = batting.runs if batting else 0
    balls = batting.balls if batting else 0
    half_century, century = milestones(runs)
    balls_bowled = bowling.balls_bowled() if bowling else 0
    bowling_runs = bowling.runs if bowling else 0

    return {
        "challenge_id": challenge.id,
        "sport": sport,
        "ball_type": getattr(challenge.ball_type, "value", challenge.ball_type),
        "player_name": entry.name,
        "batting": {
            "runs": runs,
            "balls": balls,
            "fours": batting.fours if batting else 0,
            "sixes": batting.sixes if batting else 0,
            "strike_rate": strike_rate(runs, balls),
            "half_century": half_century,
            "century": century,
        },
        "bowling": {
            "overs": overs_notation(balls_bowled),
            "runs": bowling_runs,
            "wickets": bowling.wickets if bowling else 0,
            "maidens": bowling.maidens if bowling else 0,
            "economy": economy(bowling_runs, balls_bowled),
        },
    }
