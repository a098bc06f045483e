# gully_backend/services/match_service.py
# Tournament match lifecycle: schedule, live scoreboard writes, delete.

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import and_, or_
from sqlmodel import Session, select

from gully_backend.core.errors import AlreadyExists, BadRequest, NotFound
from gully_backend.core.time_utils import to_utc, utcnow
from gully_backend.models import Match, MatchStatus, Player, Team, Tournament, User
from gully_backend.models.scoreboard_schemas import parse_scoreboard
from gully_backend.services.notifications import (
    Notifier,
    dispatch_notifications,
    get_notifier,
    match_cancelled_notification,
    match_scheduled_notification,
)
from gully_backend.services.settlement import load_match, require_caller, require_match_authority

logger = logging.getLogger(__name__)


def _owner_token(session: Session, team: Team) -> Optional[str]:
    owner = session.get(User, team.owner_id) if team.owner_id is not None else None
    return owner.fcm_token if owner else None


def _notify_owners(session: Session, notifier: Notifier, team1: Team, team2: Team, build) -> None:
    """Each owner gets the message written from their own team's side."""
    dispatch_notifications(notifier, [_owner_token(session, team1)], build(team1.name, team2.name))
    dispatch_notifications(notifier, [_owner_token(session, team2)], build(team2.name, team1.name))


def schedule_match(session: Session, caller_id: Optional[int], tournament_id: int, team1_id: int, team2_id: int,
                   round_label: str, scheduled_at: datetime, match_no: int = 0,
                   match_length: Optional[int] = None, match_authority_id: Optional[int] = None,
                   venue: Optional[str] = None, notifier: Optional[Notifier] = None) -> Match:
    """
    Create a fixture inside a tournament. Only the organizer may schedule.

    Raises:
        NotFound: tournament or either team is missing
        BadRequest: caller is not the organizer, a team plays itself, or the
            two squads share a player (by phone number)
        AlreadyExists: the same pair already meets in the same round
    """
    caller_id = require_caller(caller_id)

    # 1️⃣ Tournament and permission
    tournament = session.get(Tournament, tournament_id)
    if not tournament or tournament.is_deleted:
        raise NotFound("Tournament not found")
    if tournament.organizer_id != caller_id:
        raise BadRequest("You do not have permission")

    # 2️⃣ Teams
    if team1_id == team2_id:
        raise BadRequest("A team cannot play against itself")
    team1, team2 = session.get(Team, team1_id), session.get(Team, team2_id)
    if not team1 or not team2:
        raise NotFound("Team not found")

    team1_phones = {
        p.phone_number for p in session.exec(select(Player).where(Player.team_id == team1_id)).all()
        if p.phone_number
    }
    overlapping = [
        p for p in session.exec(select(Player).where(Player.team_id == team2_id)).all()
        if p.phone_number in team1_phones
    ]
    if overlapping:
        details = ", ".join(f"{p.name} (Phone: {p.phone_number})" for p in overlapping)
        raise BadRequest(f"There are overlapping players in both teams: {details}")

    # 3️⃣ Duplicate fixture
    existing = session.exec(
        select(Match).where(
            Match.tournament_id == tournament_id,
            Match.round == round_label,
            or_(
                and_(Match.team1_id == team1_id, Match.team2_id == team2_id),
                and_(Match.team1_id == team2_id, Match.team2_id == team1_id),
            ),
        )
    ).first()
    if existing:
        raise AlreadyExists("Match already exists for these teams in this round")

    match = Match(
        tournament_id=tournament_id,
        team1_id=team1_id,
        team2_id=team2_id,
        match_authority_id=match_authority_id or caller_id,
        round=round_label,
        match_no=match_no,
        scheduled_at=to_utc(scheduled_at),
        match_length=match_length if match_length and match_length > 0 else None,
        venue=venue,
    )
    session.add(match)
    session.commit()
    session.refresh(match)
    logger.info("📅 Match %s scheduled: %s vs %s (%s) at %s UTC",
                match.id, team1.name, team2.name, round_label, match.scheduled_at)

    day = match.scheduled_at.date().isoformat()
    _notify_owners(session, notifier or get_notifier(), team1, team2,
                   lambda own, opponent: match_scheduled_notification(own, opponent, round_label, day))
    return match


def update_scoreboard(session: Session, match_id: int, caller_id: Optional[int],
                      score_board: Dict[str, Any]) -> Match:
    """Store the live scoreboard and move the match to `current`."""
    match, tournament = load_match(session, match_id)
    require_match_authority(match, tournament, caller_id)

    if match.status == MatchStatus.PLAYED:
        raise BadRequest("Match has already been settled")

    # Validate only; the raw payload is what gets stored
    parse_scoreboard(tournament.sport, score_board)

    match.score_board = score_board
    match.status = MatchStatus.CURRENT
    match.updated_at = utcnow()
    session.add(match)
    session.commit()
    session.refresh(match)
    return match


def delete_match(session: Session, match_id: int, caller_id: Optional[int],
                 notifier: Optional[Notifier] = None) -> None:
    """Remove a fixture and tell both team owners it is cancelled."""
    match, tournament = load_match(session, match_id)
    require_match_authority(match, tournament, caller_id)

    team1, team2 = session.get(Team, match.team1_id), session.get(Team, match.team2_id)
    round_label = match.round

    session.delete(match)
    session.commit()
    logger.info("🗑️ Match %s deleted by user %s", match_id, caller_id)

    if team1 and team2:
        _notify_owners(session, notifier or get_notifier(), team1, team2,
                       lambda own, opponent: match_cancelled_notification(own, opponent, round_label))
