# gully_backend/core/stats_config.py

from typing import Dict, List, Tuple

# 🏏 Milestones (computed from a player's runs in ONE match)
HALF_CENTURY_RANGE: Tuple[int, int] = (50, 100)

# (lower inclusive, upper exclusive, tier)
# Scores of 500+ are not tiered.
CENTURY_TIERS: List[Tuple[int, int, int]] = [
    (100, 200, 1),
    (200, 300, 2),
    (300, 400, 3),
    (400, 500, 4),
]

BALL_TYPES = ("leather", "tennis")
BALLS_PER_OVER = 6

# 🏆 Leaderboard sizes
TEAM_RANKING_LIMIT = 20
FOOTBALL_TEAM_RANKING_LIMIT = 20
PLAYER_RANKING_LIMIT = 10
FOOTBALL_PLAYER_RANKING_LIMIT = 30
TOP_PERFORMERS_LIMIT = 100
FOOTBALL_TOP_PERFORMERS_LIMIT = 10

# ⚽ League table points
POINTS_PER_WIN = 3
POINTS_PER_DRAW = 1

# Weighted "overall" football rating
OVERALL_RATING_WEIGHTS: Dict[str, int] = {
    "goals": 3,
    "assists": 2,
    "saves": 1,
    "clean_sheets": 2,
    "penalty_goals": 1,
    "penalty_saves": 2,
}

# Football player ranking: category -> (primary key, secondary key)
FOOTBALL_RANKING_SORT: Dict[str, Tuple[str, str]] = {
    "goals": ("goals", "assists"),
    "assists": ("assists", "goals"),
    "saves": ("saves", "clean_sheets"),
    "matches_played": ("matches_played", "goals"),
    "overall": ("overall_rating", "goals"),
    "fouls": ("fouls_committed", "yellow_cards"),
    "penalty_goals": ("penalty_goals", "goals"),
    "penalty_saves": ("penalty_saves", "saves"),
}

# Football top performers: filter -> sort keys and score weights
TOP_PERFORMER_FILTERS: Dict[str, Dict] = {
    "goals": {
        "sort": ("goals", "assists"),
        "weights": {"goals": 3, "assists": 1},
    },
    "saves": {
        "sort": ("saves", "penalty_saves"),
        "weights": {"saves": 2, "penalty_saves": 3},
    },
}

# 📍 Top performers only look at tournaments within this distance (km)
TOP_PERFORMERS_RADIUS_KM = 10.0
EARTH_RADIUS_KM = 6371.0
