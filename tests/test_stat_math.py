"""Tests for milestone, rate and distance helpers."""

import pytest

from gully_backend.services.stat_math import (
    economy,
    haversine_km,
    milestones,
    overs_notation,
    per_match,
    percentage,
    strike_rate,
)


class TestMilestones:
    """Half-century and century tiers from one innings."""

    @pytest.mark.parametrize(
        "runs, expected",
        [
            (0, (0, 0)),
            (49, (0, 0)),
            (50, (1, 0)),
            (99, (1, 0)),
            (100, (0, 1)),
            (199, (0, 1)),
            (250, (0, 2)),
            (300, (0, 3)),
            (499, (0, 4)),
            (500, (0, 0)),
        ],
    )
    def test_boundaries(self, runs: int, expected: tuple) -> None:
        """Lower bounds are inclusive, upper bounds exclusive, 500+ untiered."""
        assert milestones(runs) == expected


class TestRates:
    """Strike rate and economy."""

    def test_strike_rate(self) -> None:
        assert strike_rate(60, 40) == 150.00

    def test_strike_rate_without_balls(self) -> None:
        """No balls faced gives 0, never a division error."""
        assert strike_rate(12, 0) == 0

    def test_economy_per_six_balls(self) -> None:
        """24 runs off 18 balls is 8 an over."""
        assert economy(24, 18) == 8.0

    def test_economy_without_balls(self) -> None:
        assert economy(10, 0) == 0

    def test_overs_notation(self) -> None:
        assert overs_notation(13) == "2.1"
        assert overs_notation(0) == "0.0"

    def test_per_match_and_percentage(self) -> None:
        assert per_match(5, 2) == 2.5
        assert per_match(5, 0) == 0
        assert percentage(1, 3) == 33.33
        assert percentage(1, 0) == 0


class TestHaversine:
    """Great-circle distance."""

    def test_same_point(self) -> None:
        assert haversine_km(12.97, 77.59, 12.97, 77.59) == pytest.approx(0.0)

    def test_one_degree_of_latitude(self) -> None:
        """One degree of latitude is roughly 111 km."""
        assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.1)
