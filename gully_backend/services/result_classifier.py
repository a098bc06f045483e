# gully_backend/services/result_classifier.py
# Decides win / draw for a finished match.

from dataclasses import dataclass
from typing import Optional, Tuple

from gully_backend.core.errors import BadRequest
from gully_backend.models.scoreboard_schemas import CricketScoreboard, FootballScoreboard


@dataclass(frozen=True)
class MatchOutcome:
    is_draw: bool
    winning_team_id: Optional[int]

    def result_for(self, team_id: int) -> str:
        """'win' / 'draw' / 'loss' from one side's point of view."""
        if self.is_draw:
            return "draw"
        return "win" if self.winning_team_id == team_id else "loss"


class ResultClassifier:
    """Base classifier. Subclasses decide the draw flag; winner checks are shared."""
    sport: str = ""

    def classify(self, scoreboard, team_ids: Tuple[int, int], winning_team_id: Optional[int],
                 is_draw: bool = False) -> MatchOutcome:
        raise NotImplementedError

    @staticmethod
    def _outcome(team_ids: Tuple[int, int], is_draw: bool, winning_team_id: Optional[int]) -> MatchOutcome:
        if is_draw:
            return MatchOutcome(is_draw=True, winning_team_id=None)
        if winning_team_id is None:
            raise BadRequest("Winning team is required when the match is not a draw")
        if winning_team_id not in team_ids:
            raise BadRequest(f"Team {winning_team_id} did not play in this match")
        return MatchOutcome(is_draw=False, winning_team_id=winning_team_id)


class CricketResultClassifier(ResultClassifier):
    """The match authority's call is final: the caller's flags are taken as-is."""
    sport = "cricket"

    def classify(self, scoreboard: CricketScoreboard, team_ids, winning_team_id, is_draw=False):
        return self._outcome(team_ids, bool(is_draw), winning_team_id)


class FootballResultClassifier(ResultClassifier):
    """
    Draw precedence:
    1) penalty shootout played -> draw iff shootout scores are level
    2) extra time played       -> draw iff extra-time goals are level
    3) otherwise               -> draw iff homeScore == awayScore

    The caller's draw flag is ignored; the winner comes from the caller.
    """
    sport = "football"

    @staticmethod
    def is_draw(scoreboard: FootballScoreboard) -> bool:
        if scoreboard.had_penalty_shootout:
            shootout = scoreboard.penalty_shootout
            if shootout is None:
                return True  # flagged but never recorded: 0-0
            return shootout.home_team_score == shootout.away_team_score

        if scoreboard.had_extra_time:
            home_et, away_et = scoreboard.extra_time_goals()
            return home_et == away_et

        return scoreboard.home_score == scoreboard.away_score

    def classify(self, scoreboard: FootballScoreboard, team_ids, winning_team_id, is_draw=False):
        return self._outcome(team_ids, self.is_draw(scoreboard), winning_team_id)
