# scoreboard_schemas.py
# Typed views of the scoreboard payload the live-scoring flow stores on a match.
#
# The payload arrives camelCase (firstInnings, homeScore, ...). References to
# players and teams may be a bare id or an object with "id"/"_id".

from typing import Optional, List, Dict, Any, Literal, Union, Tuple, Annotated
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from gully_backend.core.errors import BadRequest


def unwrap_ref(value: Any) -> Any:
    """{"_id": 7, "name": ...} -> 7. Bare ids pass through."""
    if isinstance(value, dict):
        return value.get("id", value.get("_id"))
    return value


class ScoreboardModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def mongo_style_id(cls, data):
        if isinstance(data, dict) and "_id" in data and "id" not in data:
            data = {**data, "id": data["_id"]}
        return data


# ==========================================
# 🏏 CRICKET
# ==========================================

class BattingLine(ScoreboardModel):
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    out_type: Optional[str] = None


class BowlingLine(ScoreboardModel):
    runs: int = 0
    wickets: int = 0
    current_over: int = 0
    overs: Dict[str, Any] = Field(default_factory=dict)  # over log keyed by delivery
    maidens: int = 0
    fours: int = 0
    sixes: int = 0
    wides: int = 0
    no_balls: int = 0

    @field_validator("overs", mode="before")
    @classmethod
    def overs_log(cls, value):
        # Older scorers send a plain number here instead of a log
        return value if isinstance(value, dict) else {}

    def balls_bowled(self) -> int:
        """Deliveries in the over log; falls back to whole overs when no log was kept."""
        logged = sum(
            1 for entry in self.overs.values()
            if isinstance(entry, dict) and entry.get("over") is not None and entry.get("ball") is not None
        )
        return logged if logged else self.current_over * 6


class CricketRosterEntry(ScoreboardModel):
    id: Optional[int] = None
    name: str = ""
    phone_number: Optional[str] = None
    role: Optional[str] = None
    batting: Optional[BattingLine] = None
    bowling: Optional[BowlingLine] = None


class CricketSide(ScoreboardModel):
    id: Optional[int] = None
    team_name: str = ""
    players: List[CricketRosterEntry] = Field(default_factory=list)


class InningsSummary(ScoreboardModel):
    batting_team: Optional[int] = None
    total_score: int = 0
    total_wickets: int = 0
    overs: int = 0
    balls: int = 0

    @field_validator("batting_team", mode="before")
    @classmethod
    def unwrap_refs(cls, value):
        return unwrap_ref(value)

    @property
    def balls_faced(self) -> int:
        return self.overs * 6 + self.balls


class CricketScoreboard(ScoreboardModel):
    sport: Literal["cricket"] = "cricket"
    team1: CricketSide = Field(default_factory=CricketSide)
    team2: CricketSide = Field(default_factory=CricketSide)
    first_innings: Optional[InningsSummary] = None
    second_innings: Optional[InningsSummary] = None

    def roster(self) -> List[CricketRosterEntry]:
        return list(self.team1.players) + list(self.team2.players)

    def innings(self) -> List[InningsSummary]:
        return [i for i in (self.first_innings, self.second_innings) if i is not None]


# ==========================================
# ⚽ FOOTBALL
# ==========================================

class FootballRosterEntry(ScoreboardModel):
    id: Optional[int] = None
    name: str = ""
    phone_number: Optional[str] = None
    role: Optional[str] = None

    # Stats the live scorer may embed directly on the roster
    goals: int = 0
    assists: int = 0
    saves: int = 0
    penalty_saves: int = 0


class FootballSide(ScoreboardModel):
    id: Optional[int] = None
    team_name: str = ""
    players: List[FootballRosterEntry] = Field(default_factory=list)


class GoalEntry(ScoreboardModel):
    scorer_id: Optional[int] = None
    assist_id: Optional[int] = None
    team_id: Optional[int] = None
    goal_type: Optional[str] = None
    minute: Optional[int] = None

    @field_validator("scorer_id", "assist_id", "team_id", mode="before")
    @classmethod
    def unwrap_refs(cls, value):
        return unwrap_ref(value)

    @property
    def is_penalty(self) -> bool:
        return bool(self.goal_type) and "penalty" in self.goal_type.lower()


class CardEntry(ScoreboardModel):
    player_id: Optional[int] = None
    card_type: str = ""

    @field_validator("player_id", mode="before")
    @classmethod
    def unwrap_refs(cls, value):
        return unwrap_ref(value)


class MatchEvent(ScoreboardModel):
    event_type: str = ""
    player_id: Optional[int] = None
    team_id: Optional[int] = None
    description: Optional[str] = None
    minute: Optional[int] = None

    @field_validator("player_id", "team_id", mode="before")
    @classmethod
    def unwrap_refs(cls, value):
        return unwrap_ref(value)


class ExtraTimeHalf(ScoreboardModel):
    home_goals: int = 0
    away_goals: int = 0


class ExtraTime(ScoreboardModel):
    first_half: ExtraTimeHalf = Field(default_factory=ExtraTimeHalf)
    second_half: ExtraTimeHalf = Field(default_factory=ExtraTimeHalf)


class PenaltyKick(ScoreboardModel):
    player_id: Optional[int] = None
    goalkeeper_id: Optional[int] = None
    result: Optional[str] = None
    is_scored: Optional[bool] = None

    @field_validator("player_id", "goalkeeper_id", mode="before")
    @classmethod
    def unwrap_refs(cls, value):
        return unwrap_ref(value)

    @property
    def scored(self) -> bool:
        return self.result == "scored" or self.is_scored is True

    @property
    def saved(self) -> bool:
        return self.result == "saved"


class PenaltyShootout(ScoreboardModel):
    home_team_score: int = 0
    away_team_score: int = 0
    penalties: List[PenaltyKick] = Field(default_factory=list)


class FootballScoreboard(ScoreboardModel):
    sport: Literal["football"] = "football"
    home_team: FootballSide = Field(default_factory=FootballSide)
    away_team: FootballSide = Field(default_factory=FootballSide)
    match_events: List[MatchEvent] = Field(default_factory=list)
    goals: List[GoalEntry] = Field(default_factory=list)
    cards: List[CardEntry] = Field(default_factory=list)
    is_extra_time: bool = False
    extra_time: Optional[ExtraTime] = None
    is_penalty_shootout: bool = False
    penalty_shootout: Optional[PenaltyShootout] = None
    home_score: int = 0
    away_score: int = 0

    @field_validator("extra_time", "penalty_shootout", mode="before")
    @classmethod
    def falsy_means_absent(cls, value):
        # Scorers send `false` / `{}` when the stage was not played
        return value or None

    def roster(self) -> List[FootballRosterEntry]:
        return list(self.home_team.players) + list(self.away_team.players)

    # Only the flags say whether a stage was played. Scorers may send a
    # zeroed extraTime / penaltyShootout skeleton for every match.
    @property
    def had_penalty_shootout(self) -> bool:
        return self.is_penalty_shootout

    @property
    def had_extra_time(self) -> bool:
        return self.is_extra_time

    def extra_time_goals(self) -> Tuple[int, int]:
        if not self.had_extra_time or self.extra_time is None:
            return 0, 0
        et = self.extra_time
        return (
            et.first_half.home_goals + et.second_half.home_goals,
            et.first_half.away_goals + et.second_half.away_goals,
        )

    def final_score(self) -> Tuple[int, int]:
        """Regulation score plus extra time. Shootout goals never count."""
        home_et, away_et = self.extra_time_goals()
        return self.home_score + home_et, self.away_score + away_et


Scoreboard = Annotated[Union[CricketScoreboard, FootballScoreboard], Field(discriminator="sport")]
_scoreboard_adapter = TypeAdapter(Scoreboard)


def parse_scoreboard(sport: str, payload: Optional[Dict[str, Any]]) -> Union[CricketScoreboard, FootballScoreboard]:
    """
    Resolve a stored scoreboard payload into its sport's model.
    Raises BadRequest when the payload is missing, tagged for another sport, or malformed.
    """
    if payload is not None and not isinstance(payload, dict):
        raise BadRequest("Invalid scoreBoard data")
    if not payload:
        raise BadRequest("Match scoreboard data not found")

    sport = getattr(sport, "value", sport)
    tag = payload.get("sport") or sport
    if tag != sport:
        raise BadRequest(f"Scoreboard is tagged '{tag}' but the match is {sport}")

    try:
        return _scoreboard_adapter.validate_python({**payload, "sport": tag})
    except ValidationError as exc:
        raise BadRequest(f"Malformed {sport} scoreboard: {exc.error_count()} invalid field(s)")
