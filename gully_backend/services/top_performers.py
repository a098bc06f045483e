# gully_backend/services/top_performers.py
"""
Day + location scoped leaderboards.

Unlike the career rankings these read the scoreboards of one day's matches
directly. A person can appear on several rosters that day (two teams, two
tournaments), so players are merged by phone number, not by roster id.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from sqlmodel import Session, select

from gully_backend.core.errors import BadRequest
from gully_backend.core.stats_config import (
    BALL_TYPES,
    FOOTBALL_TOP_PERFORMERS_LIMIT,
    TOP_PERFORMER_FILTERS,
    TOP_PERFORMERS_LIMIT,
    TOP_PERFORMERS_RADIUS_KM,
)
from gully_backend.core.time_utils import day_window
from gully_backend.models import BallType, Match, MatchStatus, Player, Sport, Tournament, User
from gully_backend.models.scoreboard_schemas import parse_scoreboard
from gully_backend.services.football_stats import player_deltas
from gully_backend.services.stat_math import haversine_km, strike_rate

logger = logging.getLogger(__name__)

FOOTBALL_PERFORMANCE_STATS = ("goals", "assists", "saves", "penalty_saves")


def identity_key(phone_number: Optional[str], player_id: Optional[int]) -> Optional[str]:
    """Phone number when known, else the roster id. None when neither is present."""
    if phone_number:
        return phone_number
    if player_id is not None:
        return f"player:{player_id}"
    return None


def nearby_tournaments(session: Session, latitude: float, longitude: float, day: date,
                       sport: Sport, ball_type: Optional[str] = None) -> List[Tournament]:
    """Live tournaments within the search radius whose window overlaps `day`."""
    start, end = day_window(day)
    query = select(Tournament).where(
        Tournament.is_deleted == False,  # noqa: E712
        Tournament.sport == sport,
        Tournament.start_at < end,
        Tournament.end_at >= start,
    )
    if ball_type is not None:
        query = query.where(Tournament.ball_type == BallType(ball_type))

    return [
        t for t in session.exec(query.order_by(Tournament.id)).all()
        if haversine_km(latitude, longitude, t.latitude, t.longitude) <= TOP_PERFORMERS_RADIUS_KM
    ]


def matches_on_day(session: Session, tournament_ids: Iterable[int], day: date,
                   status: Optional[MatchStatus] = None) -> List[Match]:
    tournament_ids = list(tournament_ids)
    if not tournament_ids:
        return []
    start, end = day_window(day)
    query = select(Match).where(
        Match.tournament_id.in_(tournament_ids),
        Match.scheduled_at >= start,
        Match.scheduled_at < end,
    )
    if status is not None:
        query = query.where(Match.status == status)
    return list(session.exec(query.order_by(Match.scheduled_at, Match.id)).all())


def profile_photos(session: Session, player_ids: Iterable[int]) -> Dict[int, str]:
    player_ids = [pid for pid in player_ids if pid is not None]
    if not player_ids:
        return {}
    rows = session.exec(
        select(Player.id, User.profile_photo)
        .join(User, User.id == Player.user_id)
        .where(Player.id.in_(player_ids))
    ).all()
    return {player_id: photo or "" for player_id, photo in rows}


def _scoreboards(matches: Iterable[Match], sport: str):
    """Parsed scoreboards; matches without a usable one are skipped."""
    for match in matches:
        try:
            yield match, parse_scoreboard(sport, match.score_board)
        except BadRequest as exc:
            logger.debug("Match %s skipped for top performers: %s", match.id, exc.detail)


def _sort_key(row: Dict, *fields: str):
    player_id = row["player_id"] if row["player_id"] is not None else float("inf")
    return tuple(-row[f] for f in fields) + (player_id,)


def _require_day(day: Optional[date]) -> date:
    if day is None:
        raise BadRequest("Start date is required")
    return day


# ==========================================
# 🏏 Cricket
# ==========================================
def top_performers(session: Session, latitude: float, longitude: float, day: Optional[date],
                   ball_type: str = "tennis") -> List[Dict]:
    """Best batters of the day around a location, by summed runs."""
    day = _require_day(day)
    if ball_type not in BALL_TYPES:
        raise BadRequest(f"Unknown ball type '{ball_type}'")

    tournaments = nearby_tournaments(session, latitude, longitude, day, Sport.CRICKET, ball_type)
    matches = matches_on_day(session, (t.id for t in tournaments), day)

    merged: Dict[str, Dict] = {}
    for match, scoreboard in _scoreboards(matches, Sport.CRICKET.value):
        for entry in scoreboard.roster():
            key = identity_key(entry.phone_number, entry.id)
            if key is None:
                continue

            row = merged.get(key)
            if row is None:
                row = merged[key] = {
                    "player_id": entry.id,
                    "player_name": entry.name,
                    "phone_number": entry.phone_number,
                    "runs": 0, "balls": 0, "fours": 0, "sixes": 0,
                    "wickets": 0, "bowling_runs": 0,
                }
            if entry.batting:
                row["runs"] += entry.batting.runs
                row["balls"] += entry.batting.balls
                row["fours"] += entry.batting.fours
                row["sixes"] += entry.batting.sixes
            if entry.bowling:
                row["wickets"] += entry.bowling.wickets
                row["bowling_runs"] += entry.bowling.runs

    board = sorted(merged.values(), key=lambda row: _sort_key(row, "runs"))[:TOP_PERFORMERS_LIMIT]

    photos = profile_photos(session, (row["player_id"] for row in board))
    for position, row in enumerate(board, start=1):
        row["strike_rate"] = strike_rate(row["runs"], row["balls"])
        row["profile_photo"] = photos.get(row["player_id"], "")
        row["rank"] = position

    logger.info("Top performers %s @ (%s, %s): %d tournaments, %d matches, %d players",
                day, latitude, longitude, len(tournaments), len(matches), len(board))
    return board


# ==========================================
# ⚽ Football
# ==========================================
def football_performances(scoreboard) -> Dict[int, Dict[str, int]]:
    """
    Per-player goals/assists/saves/penalty saves for one match.
    Stats the scorer embedded on the roster and stats derived from the goal
    and event lists are cross-checked; the larger count wins.
    """
    derived = player_deltas(scoreboard)
    performances = {}
    for entry in scoreboard.roster():
        if entry.id is None:
            continue
        from_events = derived.get(entry.id, {})
        performances[entry.id] = {
            stat: max(getattr(entry, stat), from_events.get(stat, 0))
            for stat in FOOTBALL_PERFORMANCE_STATS
        }
    return performances


def football_top_performers(session: Session, latitude: float, longitude: float, day: Optional[date],
                            stat_filter: str = "goals") -> List[Dict]:
    """Best scorers or keepers of the day around a location."""
    day = _require_day(day)
    mode = TOP_PERFORMER_FILTERS.get(stat_filter)
    if mode is None:
        raise BadRequest(f"Unknown filter '{stat_filter}'. Use one of: {', '.join(TOP_PERFORMER_FILTERS)}")

    tournaments = nearby_tournaments(session, latitude, longitude, day, Sport.FOOTBALL)
    matches = matches_on_day(session, (t.id for t in tournaments), day, status=MatchStatus.PLAYED)

    merged: Dict[str, Dict] = {}
    for match, scoreboard in _scoreboards(matches, Sport.FOOTBALL.value):
        performances = football_performances(scoreboard)
        for entry in scoreboard.roster():
            if entry.id is None:
                continue
            key = identity_key(entry.phone_number, entry.id)
            row = merged.get(key)
            if row is None:
                row = merged[key] = {
                    "player_id": entry.id,
                    "player_name": entry.name,
                    "phone_number": entry.phone_number,
                    "matches": 0,
                    **dict.fromkeys(FOOTBALL_PERFORMANCE_STATS, 0),
                }
            row["matches"] += 1
            for stat, value in performances[entry.id].items():
                row[stat] += value

    primary, secondary = mode["sort"]
    contributors = [row for row in merged.values() if row[primary] or row[secondary]]
    board = sorted(contributors, key=lambda row: _sort_key(row, primary, secondary))
    board = board[:FOOTBALL_TOP_PERFORMERS_LIMIT]

    photos = profile_photos(session, (row["player_id"] for row in board))
    for position, row in enumerate(board, start=1):
        row["performance_score"] = sum(row[stat] * weight for stat, weight in mode["weights"].items())
        row["stat_type"] = stat_filter
        row["profile_photo"] = photos.get(row["player_id"], "")
        row["rank"] = position
    return board
