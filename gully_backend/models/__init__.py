# gully_backend/models/__init__.py
# Centralized imports for all database models and schemas

# User
from .user_model import User

# Tournament
from .tournament_model import Tournament, RegisteredTeam, Sport, BallType, RegistrationStatus

# Team and team stats
from .team_model import Team, TeamStat

# Player and player stats
from .player_model import Player, PlayerBattingStat, PlayerBowlingStat, PlayerFootballStat

# Matches
from .match_model import (
    Match, ChallengeMatch, MatchStatus, ChallengeStatus, MatchRead, ChallengeMatchRead
)

# Scoreboards
from .scoreboard_schemas import CricketScoreboard, FootballScoreboard, parse_scoreboard
