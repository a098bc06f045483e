# gully_backend/services/settlement.py
"""
Match settlement.

Settling a finished match:
1) check the caller may settle it and that it is not settled already
2) resolve the stored scoreboard into its sport's model
3) classify the result (win / draw)
4) increment player and team statistics
5) mark the match played and commit once
6) best-effort notifications

Regular tournament matches and challenge matches share steps 2-5.
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple, Union

from sqlmodel import Session, select

from gully_backend.core.errors import BadRequest, GullyError, NotFound, ServerError
from gully_backend.core.time_utils import utcnow
from gully_backend.models import (
    ChallengeMatch,
    ChallengeStatus,
    Match,
    MatchStatus,
    RegisteredTeam,
    RegistrationStatus,
    Sport,
    Team,
    Tournament,
    User,
)
from gully_backend.models.scoreboard_schemas import parse_scoreboard
from gully_backend.services.cricket_stats import CricketStatAggregator
from gully_backend.services.football_stats import FOOTBALL_BUCKET, FootballStatAggregator
from gully_backend.services.notifications import (
    Notifier,
    cricket_result_notification,
    dispatch_notifications,
    football_result_notification,
    get_notifier,
)
from gully_backend.services.result_classifier import (
    CricketResultClassifier,
    FootballResultClassifier,
    MatchOutcome,
    ResultClassifier,
)
from gully_backend.services.stat_store import AggregationReport, StatAggregator

logger = logging.getLogger(__name__)

# Sport tag -> (result classifier, stat aggregator)
SETTLEMENT_ENGINES: Dict[str, Tuple[ResultClassifier, StatAggregator]] = {
    Sport.CRICKET.value: (CricketResultClassifier(), CricketStatAggregator()),
    Sport.FOOTBALL.value: (FootballResultClassifier(), FootballStatAggregator()),
}

Fixture = Union[Match, ChallengeMatch]


# ---------------------------------------------
# Lookups
# ---------------------------------------------
def load_match(session: Session, match_id: int) -> Tuple[Match, Tournament]:
    match = session.get(Match, match_id)
    if not match:
        raise NotFound("Match not found")
    tournament = session.get(Tournament, match.tournament_id)
    if not tournament:
        raise NotFound("Tournament not found")
    return match, tournament


def require_caller(caller_id: Optional[int]) -> int:
    if caller_id is None:
        raise BadRequest("Caller identity is required")
    return caller_id


def require_match_authority(match: Match, tournament: Tournament, caller_id: Optional[int]) -> None:
    """Only the match authority or the tournament organizer may change a match."""
    caller_id = require_caller(caller_id)
    if caller_id not in (match.match_authority_id, tournament.organizer_id):
        raise BadRequest("You are not allowed to manage this match")


def team_names(session: Session, team_ids: Iterable[int]) -> Dict[int, str]:
    names = {}
    for team_id in team_ids:
        team = session.get(Team, team_id)
        names[team_id] = team.name if team else f"Team {team_id}"
    return names


def participant_tokens(session: Session, tournament_id: int) -> List[str]:
    """Device tokens of users whose team registration was accepted."""
    rows = session.exec(
        select(User.fcm_token)
        .join(RegisteredTeam, RegisteredTeam.user_id == User.id)
        .where(
            RegisteredTeam.tournament_id == tournament_id,
            RegisteredTeam.status == RegistrationStatus.ACCEPTED,
        )
    ).all()
    return [token for token in rows if token]


def user_tokens(session: Session, user_ids: Iterable[Optional[int]]) -> List[str]:
    tokens = []
    for user_id in user_ids:
        user = session.get(User, user_id) if user_id is not None else None
        if user and user.fcm_token:
            tokens.append(user.fcm_token)
    return tokens


# ---------------------------------------------
# Shared settlement core
# ---------------------------------------------
def settle_fixture(session: Session, fixture: Fixture, sport: str, bucket: str,
                   winning_team_id: Optional[int], is_draw: bool, played_status) -> Tuple[MatchOutcome, AggregationReport, object]:
    """
    Classify, aggregate and mark `fixture` played in one commit.
    Returns (outcome, aggregation report, parsed scoreboard).
    """
    sport = getattr(sport, "value", sport)
    if fixture.status == played_status:
        raise BadRequest("Match has already been settled")

    engines = SETTLEMENT_ENGINES.get(sport)
    if engines is None:
        raise BadRequest(f"Unsupported sport '{sport}'")
    classifier, aggregator = engines

    scoreboard = parse_scoreboard(sport, fixture.score_board)
    team_ids = (fixture.team1_id, fixture.team2_id)
    outcome = classifier.classify(scoreboard, team_ids, winning_team_id, is_draw)

    try:
        report = aggregator.apply(session, scoreboard, team_ids, outcome, bucket)

        fixture.status = played_status
        fixture.winning_team_id = outcome.winning_team_id
        fixture.is_match_draw = outcome.is_draw
        fixture.is_match_ended = True
        fixture.updated_at = utcnow()
        session.add(fixture)
        session.commit()
    except GullyError:
        session.rollback()
        raise
    except Exception as exc:
        session.rollback()
        logger.exception("Settlement of %s %s failed", type(fixture).__name__, fixture.id)
        raise ServerError(f"Could not settle match: {exc}")

    session.refresh(fixture)
    logger.info("✅ %s %s settled: draw=%s winner=%s", type(fixture).__name__, fixture.id,
                outcome.is_draw, outcome.winning_team_id)
    return outcome, report, scoreboard


# ==========================================
# 🏏 Cricket
# ==========================================
def settle_cricket_match(session: Session, match_id: int, caller_id: Optional[int],
                         winning_team_id: Optional[int] = None, is_draw: bool = False,
                         notifier: Optional[Notifier] = None) -> Match:
    match, tournament = load_match(session, match_id)
    require_match_authority(match, tournament, caller_id)

    if tournament.sport != Sport.CRICKET:
        raise BadRequest("Match is not a cricket match")
    if tournament.ball_type is None:
        raise BadRequest("Tournament has no ball type")
    ball_type = getattr(tournament.ball_type, "value", tournament.ball_type)

    outcome, report, scoreboard = settle_fixture(
        session, match, Sport.CRICKET, ball_type, winning_team_id, is_draw, MatchStatus.PLAYED
    )

    notification = cricket_result_notification(
        scoreboard, team_names(session, (match.team1_id, match.team2_id)),
        outcome.winning_team_id, outcome.is_draw,
    )
    dispatch_notifications(notifier or get_notifier(), participant_tokens(session, tournament.id), notification)
    return match


# ==========================================
# ⚽ Football
# ==========================================
def settle_football_match(session: Session, match_id: int, caller_id: Optional[int],
                          winning_team_id: Optional[int] = None,
                          notifier: Optional[Notifier] = None) -> Dict:
    match, tournament = load_match(session, match_id)
    require_match_authority(match, tournament, caller_id)

    if tournament.sport != Sport.FOOTBALL:
        raise BadRequest("Match is not a football match")

    outcome, report, scoreboard = settle_fixture(
        session, match, Sport.FOOTBALL, FOOTBALL_BUCKET, winning_team_id, False, MatchStatus.PLAYED
    )

    home, away = scoreboard.final_score()
    final_score = f"{home}-{away}"
    names = team_names(session, (match.team1_id, match.team2_id))
    notification = football_result_notification(
        names[match.team1_id], names[match.team2_id], final_score,
        None if outcome.is_draw else names.get(outcome.winning_team_id),
    )
    dispatch_notifications(notifier or get_notifier(), participant_tokens(session, tournament.id), notification)

    return {
        "success": True,
        "match_id": match.id,
        "final_score": final_score,
        "winner": "Tie" if outcome.is_draw else outcome.winning_team_id,
        "players_updated": len(report.players_updated),
        "is_penalty_shootout": scoreboard.had_penalty_shootout,
    }


# ==========================================
# ⚔️ Challenge matches
# ==========================================
def settle_challenge_match(session: Session, challenge_id: int, caller_id: Optional[int],
                           winning_team_id: Optional[int] = None, is_draw: bool = False,
                           notifier: Optional[Notifier] = None) -> ChallengeMatch:
    """Same rules as a tournament match. The authority or either captain may settle."""
    challenge = session.get(ChallengeMatch, challenge_id)
    if not challenge:
        raise NotFound("Challenge match not found")

    caller_id = require_caller(caller_id)
    if caller_id not in (challenge.match_authority_id, challenge.captain1_id, challenge.captain2_id):
        raise BadRequest("You are not allowed to manage this challenge match")
    if challenge.status in (ChallengeStatus.PENDING, ChallengeStatus.DENIED):
        raise BadRequest(f"Challenge match is {challenge.status.value} and cannot be settled")

    sport = getattr(challenge.sport, "value", challenge.sport)
    bucket = FOOTBALL_BUCKET if sport == Sport.FOOTBALL.value else getattr(challenge.ball_type, "value", challenge.ball_type)

    outcome, report, scoreboard = settle_fixture(
        session, challenge, sport, bucket, winning_team_id, is_draw, ChallengeStatus.PLAYED
    )

    names = team_names(session, (challenge.team1_id, challenge.team2_id))
    if sport == Sport.FOOTBALL.value:
        home, away = scoreboard.final_score()
        notification = football_result_notification(
            names[challenge.team1_id], names[challenge.team2_id], f"{home}-{away}",
            None if outcome.is_draw else names.get(outcome.winning_team_id),
        )
    else:
        notification = cricket_result_notification(scoreboard, names, outcome.winning_team_id, outcome.is_draw)

    dispatch_notifications(notifier or get_notifier(),
                           user_tokens(session, (challenge.captain1_id, challenge.captain2_id)), notification)
    return challenge
