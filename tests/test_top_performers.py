"""Tests for the day + location leaderboards."""

from datetime import date, datetime

import pytest

from gully_backend.core.errors import BadRequest
from gully_backend.models import BallType, MatchStatus, Sport
from gully_backend.services.top_performers import football_top_performers, identity_key, top_performers

from factories import BANGALORE, MATCH_DAY, cricket_board, cricket_entry, football_board, football_entry

MUMBAI = (19.0760, 72.8777)
DAY = MATCH_DAY.date()


class TestIdentityKey:
    def test_phone_wins(self) -> None:
        assert identity_key("900", 5) == "900"

    def test_falls_back_to_roster_id(self) -> None:
        assert identity_key(None, 5) == "player:5"
        assert identity_key("", None) is None


class TestCricketTopPerformers:
    """Batters merged across the day's matches."""

    @pytest.fixture
    def day(self, build):
        organizer = build.user("Organizer")
        asha_user = build.user("Asha", phone_number="900", profile_photo="asha.png")
        a, b, c = build.team("A"), build.team("B"), build.team("C")

        asha_a = build.player(a, "Asha", "900", user=asha_user)
        asha_c = build.player(c, "Asha", "900")
        bilal = build.player(b, "Bilal", "901")
        zed = build.player(c, "Zed", "999")

        local = build.tournament(organizer, ball_type=BallType.TENNIS)
        far = build.tournament(organizer, ball_type=BallType.TENNIS, latitude=MUMBAI[0], longitude=MUMBAI[1])
        leather = build.tournament(organizer, ball_type=BallType.LEATHER)

        build.match(local, a, b, organizer, round_label="R1", score_board=cricket_board(
            a, [cricket_entry(asha_a, runs=40, balls=30)], b, [cricket_entry(bilal, runs=25, balls=20, wickets=2)]))
        build.match(local, c, b, organizer, round_label="R2", scheduled_at=datetime(2024, 3, 10, 14, 0),
                    score_board=cricket_board(
                        c, [cricket_entry(asha_c, runs=35, balls=15)], b, [cricket_entry(bilal, runs=10, balls=15)]))
        # Next day
        build.match(local, a, c, organizer, round_label="R3", scheduled_at=datetime(2024, 3, 11, 9, 0),
                    score_board=cricket_board(a, [cricket_entry(asha_a, runs=300, balls=100)], c, []))
        # Too far away
        build.match(far, c, b, organizer, score_board=cricket_board(c, [cricket_entry(zed, runs=200)], b, []))
        # Wrong ball type
        build.match(leather, c, b, organizer, score_board=cricket_board(c, [cricket_entry(zed, runs=150)], b, []))
        # No scoreboard yet
        build.match(local, a, c, organizer, round_label="R4")

        return asha_a, bilal

    def test_phone_number_dedup(self, session, day) -> None:
        asha, bilal = day
        board = top_performers(session, BANGALORE[0], BANGALORE[1], DAY, ball_type="tennis")

        assert [row["phone_number"] for row in board] == ["900", "901"]
        first, second = board
        assert (first["runs"], first["balls"], first["player_id"]) == (75, 45, asha.id)
        assert first["profile_photo"] == "asha.png"
        assert first["rank"] == 1
        assert (second["runs"], second["wickets"], second["player_id"]) == (35, 2, bilal.id)
        assert second["profile_photo"] == ""
        assert second["strike_rate"] == 100.0

    def test_date_is_required(self, session) -> None:
        with pytest.raises(BadRequest, match="Start date is required"):
            top_performers(session, BANGALORE[0], BANGALORE[1], None)

    def test_empty_area(self, session, day) -> None:
        assert top_performers(session, 28.61, 77.20, DAY) == []


class TestFootballTopPerformers:
    """Scorers and keepers of the day."""

    @pytest.fixture
    def day(self, build):
        organizer = build.user("Organizer")
        rovers = build.team("Rovers", sport=Sport.FOOTBALL)
        united = build.team("United", sport=Sport.FOOTBALL)
        ravi = build.player(rovers, "Ravi", "800")
        kiran = build.player(rovers, "Kiran", "801")
        tom = build.player(united, "Tom", "804", role="Goalkeeper")
        cup = build.tournament(organizer, sport=Sport.FOOTBALL)

        board = football_board(
            rovers, [football_entry(ravi, goals=2), football_entry(kiran)],
            united, [football_entry(tom, role="Goalkeeper", saves=3)],
            home_score=3, away_score=0,
            goals=[
                {"scorerId": ravi.id},
                {"scorerId": kiran.id, "assistId": ravi.id},
            ],
        )
        build.match(cup, rovers, united, organizer, score_board=board, status=MatchStatus.PLAYED)
        # Still being played: ignored
        build.match(cup, united, rovers, organizer, round_label="R2", status=MatchStatus.CURRENT,
                    score_board=football_board(united, [football_entry(tom, goals=9)], rovers, []))
        return ravi, kiran, tom

    def test_goals(self, session, day) -> None:
        ravi, kiran, tom = day
        board = football_top_performers(session, BANGALORE[0], BANGALORE[1], DAY, stat_filter="goals")

        assert [row["player_id"] for row in board] == [ravi.id, kiran.id]
        # Roster says 2 goals, goal list says 1: the larger count is kept
        assert (board[0]["goals"], board[0]["assists"], board[0]["performance_score"]) == (2, 1, 7)
        assert (board[1]["goals"], board[1]["performance_score"]) == (1, 3)
        assert board[0]["stat_type"] == "goals"
        assert board[1]["rank"] == 2

    def test_saves(self, session, day) -> None:
        _, _, tom = day
        board = football_top_performers(session, BANGALORE[0], BANGALORE[1], DAY, stat_filter="saves")

        assert [row["player_id"] for row in board] == [tom.id]
        assert board[0]["performance_score"] == 6

    def test_unknown_filter(self, session) -> None:
        with pytest.raises(BadRequest):
            football_top_performers(session, BANGALORE[0], BANGALORE[1], date(2024, 3, 10), stat_filter="tackles")
