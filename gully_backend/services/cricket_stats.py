# gully_backend/services/cricket_stats.py
"""
Cricket statistics aggregation.

Turns one settled scoreboard into increments on:
- PlayerBattingStat / PlayerBowlingStat for the match's ball type
- TeamStat for the ball-type bucket of both sides
"""

import logging
from typing import Dict, Tuple

from sqlmodel import Session

from gully_backend.core.config import TEST_MODE
from gully_backend.models import Player, PlayerBattingStat, PlayerBowlingStat, TeamStat
from gully_backend.models.scoreboard_schemas import CricketScoreboard, CricketRosterEntry
from gully_backend.services.result_classifier import MatchOutcome
from gully_backend.services.stat_math import milestones
from gully_backend.services.stat_store import AggregationReport, StatAggregator, increment_bucket, run_isolated

logger = logging.getLogger(__name__)


def batting_delta(entry: CricketRosterEntry) -> Dict[str, int]:
    batting = entry.batting
    half_century, century_tier = milestones(batting.runs)
    return {
        "runs": batting.runs,
        "balls": batting.balls,
        "fours": batting.fours,
        "sixes": batting.sixes,
        "century": century_tier,
        "half_century": half_century,
        "out": 1 if batting.out_type else 0,
        "innings": 1,
    }


def bowling_delta(entry: CricketRosterEntry) -> Dict[str, int]:
    bowling = entry.bowling
    return {
        "runs": bowling.runs,
        "wickets": bowling.wickets,
        "overs": bowling.current_over,
        "balls": bowling.balls_bowled(),
        "maidens": bowling.maidens,
        "fours": bowling.fours,
        "sixes": bowling.sixes,
        "wides": bowling.wides,
        "no_balls": bowling.no_balls,
        "innings": 1,
    }


def team_deltas(scoreboard: CricketScoreboard, team_ids: Tuple[int, int],
                outcome: MatchOutcome) -> Dict[int, Dict[str, int]]:
    """
    Per-team increments. Innings totals go to the side that batted;
    result counters go to both sides.
    """
    deltas = {}
    for team_id in team_ids:
        result = outcome.result_for(team_id)
        deltas[team_id] = {
            "matches_played": 1,
            "wins": 1 if result == "win" else 0,
            "draws": 1 if result == "draw" else 0,
            "losses": 1 if result == "loss" else 0,
            "runs": 0,
            "wickets": 0,
            "balls": 0,
            "innings": 0,
        }

    for innings in scoreboard.innings():
        batting_side = deltas.get(innings.batting_team)
        if batting_side is None:
            logger.warning("Innings batted by unknown team %s ignored", innings.batting_team)
            continue
        batting_side["runs"] += innings.total_score
        batting_side["wickets"] += innings.total_wickets
        batting_side["balls"] += innings.balls_faced
        batting_side["innings"] += 1

    return deltas


class CricketStatAggregator(StatAggregator):
    sport = "cricket"

    def apply(self, session: Session, scoreboard: CricketScoreboard, team_ids: Tuple[int, int],
              outcome: MatchOutcome, ball_type: str) -> AggregationReport:
        report = AggregationReport()

        # 1️⃣ Players
        for entry in scoreboard.roster():
            if entry.batting is None or entry.bowling is None:
                logger.debug("Roster entry %s has no batting/bowling line, skipped", entry.id)
                continue
            if entry.id is None or session.get(Player, entry.id) is None:
                logger.warning("Roster entry %r is not a known player, skipped", entry.id or entry.name)
                if entry.id is not None:
                    report.players_skipped.append(entry.id)
                continue

            batting, bowling = batting_delta(entry), bowling_delta(entry)
            logger.log(logging.INFO if TEST_MODE else logging.DEBUG,
                       "Player %s: batting %s bowling %s", entry.id, batting, bowling)

            def write_player(player_id=entry.id, batting=batting, bowling=bowling):
                increment_bucket(session, PlayerBattingStat, batting, player_id=player_id, ball_type=ball_type)
                increment_bucket(session, PlayerBowlingStat, bowling, player_id=player_id, ball_type=ball_type)

            if run_isolated(session, f"player {entry.id}", write_player):
                report.players_updated.append(entry.id)
            else:
                report.players_skipped.append(entry.id)

        # 2️⃣ Teams
        for team_id, delta in team_deltas(scoreboard, team_ids, outcome).items():
            def write_team(team_id=team_id, delta=delta):
                increment_bucket(session, TeamStat, delta, team_id=team_id, bucket=ball_type)

            if run_isolated(session, f"team {team_id}", write_team):
                report.teams_updated.append(team_id)
            else:
                report.teams_skipped.append(team_id)

        logger.info("Cricket stats applied: %d players, %d teams (%d skipped)",
                    len(report.players_updated), len(report.teams_updated),
                    len(report.players_skipped) + len(report.teams_skipped))
        return report
