# gully_backend/services/football_stats.py
"""
Football statistics aggregation.

Every rostered player starts the match with a zeroed delta (matches_played=1).
Goals, cards, match events and shootout kicks then add to those deltas, and
the result is written as increments on PlayerFootballStat and TeamStat.
Events naming a player who is not on either roster are ignored.
"""

import logging
import re
from typing import Dict, Optional, Tuple

from sqlmodel import Session

from gully_backend.core.config import TEST_MODE
from gully_backend.models import Player, PlayerFootballStat, TeamStat
from gully_backend.models.scoreboard_schemas import FootballScoreboard
from gully_backend.services.result_classifier import MatchOutcome
from gully_backend.services.stat_store import AggregationReport, StatAggregator, increment_bucket, run_isolated

logger = logging.getLogger(__name__)

FOOTBALL_BUCKET = "football"

# "General Foul by John Smith on Ravi Kumar - 34'"
FOUL_VICTIM_PATTERN = re.compile(r"Foul by .+ on (?P<name>.+) -", re.IGNORECASE)

PLAYER_FIELDS = (
    "matches_played",
    "goals",
    "assists",
    "penalty_goals",
    "yellow_cards",
    "red_cards",
    "fouls_committed",
    "fouls_suffered",
    "saves",
    "penalty_saves",
    "clean_sheets",
)


def _blank_delta() -> Dict[str, int]:
    delta = dict.fromkeys(PLAYER_FIELDS, 0)
    delta["matches_played"] = 1
    return delta


def _is_goalkeeper(role: Optional[str]) -> bool:
    return bool(role) and "goalkeeper" in role.lower()


def foul_victim_name(description: Optional[str]) -> Optional[str]:
    if not description:
        return None
    found = FOUL_VICTIM_PATTERN.search(description)
    return found.group("name").strip() if found else None


def player_deltas(scoreboard: FootballScoreboard) -> Dict[int, Dict[str, int]]:
    """Working set of per-player increments for one match, keyed by player id."""
    stats: Dict[int, Dict[str, int]] = {}
    names: Dict[str, int] = {}
    for entry in scoreboard.roster():
        if entry.id is None:
            continue
        stats[entry.id] = _blank_delta()
        if entry.name:
            names.setdefault(entry.name.strip().lower(), entry.id)

    def bump(player_id, field, amount=1):
        if player_id in stats:
            stats[player_id][field] += amount

    # Goals
    for goal in scoreboard.goals:
        bump(goal.scorer_id, "goals")
        if goal.is_penalty:
            bump(goal.scorer_id, "penalty_goals")
        bump(goal.assist_id, "assists")

    # Cards
    for card in scoreboard.cards:
        card_type = card.card_type.lower()
        if card_type == "yellow":
            bump(card.player_id, "yellow_cards")
        elif card_type == "red":
            bump(card.player_id, "red_cards")

    # Shootout kicks
    if scoreboard.had_penalty_shootout and scoreboard.penalty_shootout is not None:
        for kick in scoreboard.penalty_shootout.penalties:
            if kick.scored:
                bump(kick.player_id, "penalty_goals")
            elif kick.saved:
                bump(kick.goalkeeper_id, "penalty_saves")

    # Match events. Cards logged here count again on top of scoreboard.cards.
    for event in scoreboard.match_events:
        if event.player_id not in stats:
            continue
        event_type = event.event_type.lower()

        if event_type == "foul":
            bump(event.player_id, "fouls_committed")
            victim = foul_victim_name(event.description)
            if victim:
                bump(names.get(victim.lower()), "fouls_suffered")
        elif event_type == "yellow_card":
            bump(event.player_id, "yellow_cards")
        elif event_type == "red_card":
            bump(event.player_id, "red_cards")
        elif event_type == "goal_save":
            bump(event.player_id, "saves")
        elif event_type == "penalty_save":
            bump(event.player_id, "penalty_saves")

    # Clean sheets for keepers whose side conceded nothing
    home_final, away_final = scoreboard.final_score()
    for side, conceded in ((scoreboard.home_team, away_final), (scoreboard.away_team, home_final)):
        if conceded:
            continue
        for entry in side.players:
            if _is_goalkeeper(entry.role):
                bump(entry.id, "clean_sheets")

    return stats


def team_deltas(scoreboard: FootballScoreboard, home_team_id: int, away_team_id: int,
                outcome: MatchOutcome) -> Dict[int, Dict[str, int]]:
    """Goals use the regulation score (homeScore / awayScore)."""
    deltas = {}
    for team_id, scored, conceded in (
        (home_team_id, scoreboard.home_score, scoreboard.away_score),
        (away_team_id, scoreboard.away_score, scoreboard.home_score),
    ):
        result = outcome.result_for(team_id)
        deltas[team_id] = {
            "matches_played": 1,
            "wins": 1 if result == "win" else 0,
            "draws": 1 if result == "draw" else 0,
            "losses": 1 if result == "loss" else 0,
            "goals": scored,
            "goals_conceded": conceded,
            "clean_sheets": 1 if conceded == 0 else 0,
        }
    return deltas


class FootballStatAggregator(StatAggregator):
    sport = "football"

    def apply(self, session: Session, scoreboard: FootballScoreboard, team_ids: Tuple[int, int],
              outcome: MatchOutcome, ball_type: str = FOOTBALL_BUCKET) -> AggregationReport:
        report = AggregationReport()
        home_team_id, away_team_id = team_ids

        # 1️⃣ Players
        for player_id, delta in player_deltas(scoreboard).items():
            if session.get(Player, player_id) is None:
                logger.warning("Roster entry %s is not a known player, skipped", player_id)
                report.players_skipped.append(player_id)
                continue

            logger.log(logging.INFO if TEST_MODE else logging.DEBUG, "Player %s: %s", player_id, delta)

            def write_player(player_id=player_id, delta=delta):
                increment_bucket(session, PlayerFootballStat, delta, player_id=player_id)

            if run_isolated(session, f"player {player_id}", write_player):
                report.players_updated.append(player_id)
            else:
                report.players_skipped.append(player_id)

        # 2️⃣ Teams
        for team_id, delta in team_deltas(scoreboard, home_team_id, away_team_id, outcome).items():
            def write_team(team_id=team_id, delta=delta):
                increment_bucket(session, TeamStat, delta, team_id=team_id, bucket=ball_type)

            if run_isolated(session, f"team {team_id}", write_team):
                report.teams_updated.append(team_id)
            else:
                report.teams_skipped.append(team_id)

        logger.info("Football stats applied: %d players, %d teams (%d skipped)",
                    len(report.players_updated), len(report.teams_updated),
                    len(report.players_skipped) + len(report.teams_skipped))
        return report
