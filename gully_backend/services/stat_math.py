# gully_backend/services/stat_math.py
# Small numeric helpers shared by settlement, rankings and top performers.

import math
from typing import Tuple

from gully_backend.core.stats_config import (
    HALF_CENTURY_RANGE,
    CENTURY_TIERS,
    BALLS_PER_OVER,
    EARTH_RADIUS_KM,
)


def milestones(runs: int) -> Tuple[int, int]:
    """
    Milestone flags for one innings.

    Returns (half_century, century_tier):
    - half_century is 1 for 50..99 runs
    - century_tier is 1/2/3/4 for 100-199 / 200-299 / 300-399 / 400-499

    500 and above is not tiered (returns 0).
    """
    low, high = HALF_CENTURY_RANGE
    half_century = 1 if low <= runs < high else 0

    century_tier = 0
    for lower, upper, tier in CENTURY_TIERS:
        if lower <= runs < upper:
            century_tier = tier
            break

    return half_century, century_tier


def strike_rate(runs: int, balls: int) -> float:
    """Runs per 100 balls, rounded to 2dp. 0 when no balls were faced."""
    if not balls:
        return 0
    return round(runs / balls * 100, 2)


def economy(runs_conceded: int, balls_bowled: int) -> float:
    """Runs conceded per over, rounded to 2dp. 0 when nothing was bowled."""
    if not balls_bowled:
        return 0
    return round(runs_conceded / balls_bowled * BALLS_PER_OVER, 2)


def overs_notation(balls_bowled: int) -> str:
    """13 balls -> '2.1'"""
    return f"{balls_bowled // BALLS_PER_OVER}.{balls_bowled % BALLS_PER_OVER}"


def per_match(total: int, matches: int) -> float:
    if matches <= 0:
        return 0
    return round(total / matches, 2)


def percentage(part: int, whole: int) -> float:
    if whole <= 0:
        return 0
    return round(part / whole * 100, 2)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))
