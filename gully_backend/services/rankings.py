# gully_backend/services/rankings.py
"""
Read-only leaderboards over the settled statistic buckets.

Missing bucket rows read as zero. Ties beyond each board's own sort keys
fall back to ascending id so the same data always ranks the same way.
"""

import logging
from typing import Dict, List

from sqlalchemy import and_, func, or_
from sqlmodel import Session, select

from gully_backend.core.errors import BadRequest
from gully_backend.core.stats_config import (
    BALL_TYPES,
    FOOTBALL_PLAYER_RANKING_LIMIT,
    FOOTBALL_RANKING_SORT,
    FOOTBALL_TEAM_RANKING_LIMIT,
    OVERALL_RATING_WEIGHTS,
    PLAYER_RANKING_LIMIT,
    POINTS_PER_DRAW,
    POINTS_PER_WIN,
    TEAM_RANKING_LIMIT,
)
from gully_backend.models import (
    Player,
    PlayerBattingStat,
    PlayerBowlingStat,
    PlayerFootballStat,
    Sport,
    Team,
    TeamStat,
    User,
)
from gully_backend.services.football_stats import FOOTBALL_BUCKET
from gully_backend.services.stat_math import economy, overs_notation, per_match, percentage, strike_rate

logger = logging.getLogger(__name__)

SKILLS = ("batting", "bowling")


def _check_ball_type(ball_type: str) -> str:
    if ball_type not in BALL_TYPES:
        raise BadRequest(f"Unknown ball type '{ball_type}'. Use one of: {', '.join(BALL_TYPES)}")
    return ball_type


def _ranked(rows: List[Dict]) -> List[Dict]:
    for position, row in enumerate(rows, start=1):
        row["rank"] = position
    return rows


# ==========================================
# 🏏 Cricket teams
# ==========================================
def team_ranking(session: Session, ball_type: str) -> List[Dict]:
    """Top cricket teams by wins in one ball-type bucket."""
    _check_ball_type(ball_type)
    wins = func.coalesce(TeamStat.wins, 0)

    rows = session.exec(
        select(Team, TeamStat)
        .join(TeamStat, and_(TeamStat.team_id == Team.id, TeamStat.bucket == ball_type), isouter=True)
        .where(Team.sport == Sport.CRICKET)
        .order_by(wins.desc(), Team.id)
        .limit(TEAM_RANKING_LIMIT)
    ).all()

    return _ranked([
        {
            "team_id": team.id,
            "team_name": team.name,
            "team_logo": team.logo or "",
            "ball_type": ball_type,
            "number_of_wins": stat.wins if stat else 0,
            "matches_played": stat.matches_played if stat else 0,
        }
        for team, stat in rows
    ])


# ==========================================
# ⚽ Football teams
# ==========================================
def football_team_rankings(session: Session) -> List[Dict]:
    """League-table style board: points, goal difference, win %, goals per match. Sorted by wins."""
    wins = func.coalesce(TeamStat.wins, 0)

    rows = session.exec(
        select(Team, TeamStat)
        .join(TeamStat, and_(TeamStat.team_id == Team.id, TeamStat.bucket == FOOTBALL_BUCKET), isouter=True)
        .where(Team.sport == Sport.FOOTBALL)
        .order_by(wins.desc(), Team.id)
        .limit(FOOTBALL_TEAM_RANKING_LIMIT)
    ).all()

    table = []
    for team, stat in rows:
        played = stat.matches_played if stat else 0
        won = stat.wins if stat else 0
        drawn = stat.draws if stat else 0
        goals = stat.goals if stat else 0
        conceded = stat.goals_conceded if stat else 0
        table.append({
            "team_id": team.id,
            "team_name": team.name,
            "team_logo": team.logo or "",
            "matches_played": played,
            "number_of_wins": won,
            "draws": drawn,
            "losses": stat.losses if stat else 0,
            "goals": goals,
            "goals_conceded": conceded,
            "clean_sheets": stat.clean_sheets if stat else 0,
            "points": won * POINTS_PER_WIN + drawn * POINTS_PER_DRAW,
            "goal_difference": goals - conceded,
            "win_percentage": percentage(won, played),
            "goals_per_match": per_match(goals, played),
        })
    return _ranked(table)


# ==========================================
# 🏏 Cricket players
# ==========================================
def player_ranking(session: Session, ball_type: str, skill: str) -> List[Dict]:
    """
    Top cricket players for one ball type, by career runs (batting) or
    wickets (bowling). Players with no stats in that bucket are left out.
    """
    _check_ball_type(ball_type)
    if skill not in SKILLS:
        raise BadRequest(f"Unknown skill '{skill}'. Use 'batting' or 'bowling'")

    sort_column = PlayerBattingStat.runs if skill == "batting" else PlayerBowlingStat.wickets

    rows = session.exec(
        select(Player, PlayerBattingStat, PlayerBowlingStat, User)
        .join(PlayerBattingStat, and_(PlayerBattingStat.player_id == Player.id,
                                      PlayerBattingStat.ball_type == ball_type), isouter=True)
        .join(PlayerBowlingStat, and_(PlayerBowlingStat.player_id == Player.id,
                                      PlayerBowlingStat.ball_type == ball_type), isouter=True)
        .join(User, User.id == Player.user_id, isouter=True)
        .where(or_(PlayerBattingStat.id.is_not(None), PlayerBowlingStat.id.is_not(None)))
        .order_by(func.coalesce(sort_column, 0).desc(), Player.id)
        .limit(PLAYER_RANKING_LIMIT)
    ).all()

    board = []
    for player, batting, bowling, user in rows:
        batting = batting or PlayerBattingStat(player_id=player.id, ball_type=ball_type)
        bowling = bowling or PlayerBowlingStat(player_id=player.id, ball_type=ball_type)
        board.append({
            "player_id": player.id,
            "player_name": (user.full_name if user and user.full_name else player.name),
            "profile_photo": (user.profile_photo if user and user.profile_photo else ""),
            # Batting
            "runs": batting.runs,
            "balls": batting.balls,
            "fours": batting.fours,
            "sixes": batting.sixes,
            "half_centuries": batting.half_century,
            "centuries": batting.century,
            "strike_rate": strike_rate(batting.runs, batting.balls),
            # Bowling
            "bowling_runs": bowling.runs,
            "wickets": bowling.wickets,
            "overs": overs_notation(bowling.balls) if bowling.balls else str(bowling.overs),
            "maidens": bowling.maidens,
            "wides": bowling.wides,
            "no_balls": bowling.no_balls,
            "innings": bowling.innings,
            "economy": economy(bowling.runs, bowling.balls),
        })
    return _ranked(board)


# ==========================================
# ⚽ Football players
# ==========================================
def overall_rating(stat: PlayerFootballStat) -> int:
    return sum(getattr(stat, field) * weight for field, weight in OVERALL_RATING_WEIGHTS.items())


def football_player_ranking(session: Session, category: str) -> List[Dict]:
    """Top football players in a category, with that category's tie-break."""
    sort_keys = FOOTBALL_RANKING_SORT.get(category)
    if sort_keys is None:
        raise BadRequest(
            f"Unknown ranking category '{category}'. Use one of: {', '.join(FOOTBALL_RANKING_SORT)}"
        )
    primary, secondary = sort_keys

    rows = session.exec(
        select(Player, PlayerFootballStat, User, Team)
        .join(PlayerFootballStat, PlayerFootballStat.player_id == Player.id)
        .join(User, User.id == Player.user_id, isouter=True)
        .join(Team, Team.id == Player.team_id, isouter=True)
    ).all()

    board = []
    for player, stat, user, team in rows:
        played = stat.matches_played
        board.append({
            "player_id": player.id,
            "player_name": (user.full_name if user and user.full_name else player.name),
            "profile_photo": (user.profile_photo if user and user.profile_photo else ""),
            "team_name": team.name if team else "",
            "role": player.role,
            "matches_played": played,
            "goals": stat.goals,
            "assists": stat.assists,
            "saves": stat.saves,
            "clean_sheets": stat.clean_sheets,
            "penalty_goals": stat.penalty_goals,
            "penalty_saves": stat.penalty_saves,
            "yellow_cards": stat.yellow_cards,
            "red_cards": stat.red_cards,
            "fouls_committed": stat.fouls_committed,
            "fouls_suffered": stat.fouls_suffered,
            "goals_per_match": per_match(stat.goals, played),
            "assists_per_match": per_match(stat.assists, played),
            "saves_per_match": per_match(stat.saves, played),
            "fouls_per_match": per_match(stat.fouls_committed, played),
            "overall_rating": overall_rating(stat),
        })

    board.sort(key=lambda row: (-row[primary], -row[secondary], row["player_id"]))
    return _ranked(board[:FOOTBALL_PLAYER_RANKING_LIMIT])
