"""Tests for scheduling, live scoreboard writes and deleting tournament matches."""

from datetime import datetime
from types import SimpleNamespace

import pytest
import pytz
from sqlmodel import select

from gully_backend.core.errors import AlreadyExists, BadRequest, NotFound
from gully_backend.models import Match, MatchStatus
from gully_backend.services.match_service import delete_match, schedule_match, update_scoreboard

from factories import cricket_board, cricket_entry


@pytest.fixture
def cup(build):
    organizer = build.user("Organizer")
    owner1 = build.user("Owner A", fcm_token="tok-a")
    owner2 = build.user("Owner B", fcm_token="tok-b")
    strikers = build.team("Strikers", owner=owner1)
    titans = build.team("Titans", owner=owner2)
    return SimpleNamespace(
        organizer=organizer, owner1=owner1, owner2=owner2, strikers=strikers, titans=titans,
        tournament=build.tournament(organizer),
        asha=build.player(strikers, "Asha", "900"),
        chen=build.player(titans, "Chen", "902"),
    )


def schedule(session, cup, notifier, **overrides):
    kwargs = dict(tournament_id=cup.tournament.id, team1_id=cup.strikers.id, team2_id=cup.titans.id,
                  round_label="Quarter Final", scheduled_at=datetime(2024, 3, 10, 9, 30), notifier=notifier)
    kwargs.update(overrides)
    return schedule_match(session, cup.organizer.id, **kwargs)


class TestScheduleMatch:
    """Only the organizer schedules, and only sensible fixtures."""

    def test_creates_scheduled_match(self, session, cup, notifier) -> None:
        match = schedule(session, cup, notifier, venue="Cubbon Park")

        assert match.status == MatchStatus.SCHEDULED
        assert match.match_authority_id == cup.organizer.id
        assert match.venue == "Cubbon Park"
        assert match.match_length is None

    def test_aware_time_stored_as_utc(self, session, cup, notifier) -> None:
        kolkata = pytz.timezone("Asia/Kolkata")
        match = schedule(session, cup, notifier, scheduled_at=kolkata.localize(datetime(2024, 3, 10, 15, 0)))

        assert match.scheduled_at == pytz.utc.localize(datetime(2024, 3, 10, 9, 30))

    def test_times_load_back_aware(self, session, cup, notifier) -> None:
        match = schedule(session, cup, notifier)
        session.expire_all()

        stored = session.get(Match, match.id)
        assert stored.scheduled_at == pytz.utc.localize(datetime(2024, 3, 10, 9, 30))
        assert stored.scheduled_at.utcoffset().total_seconds() == 0
        assert stored.created_at.tzinfo is not None
        assert stored.updated_at.tzinfo is not None

    def test_both_owners_notified(self, session, cup, notifier) -> None:
        schedule(session, cup, notifier)

        assert notifier.sent == [
            ("tok-a", {"title": "Strikers VS Titans Quarter Final Match",
                       "body": "Your match against Titans is scheduled on 2024-03-10. Be ready!"}),
            ("tok-b", {"title": "Titans VS Strikers Quarter Final Match",
                       "body": "Your match against Strikers is scheduled on 2024-03-10. Be ready!"}),
        ]

    def test_only_organizer(self, session, cup, notifier) -> None:
        with pytest.raises(BadRequest, match="permission"):
            schedule_match(session, cup.owner1.id, cup.tournament.id, cup.strikers.id, cup.titans.id,
                           "Group", datetime(2024, 3, 10, 9, 30), notifier=notifier)

    def test_duplicate_in_same_round(self, session, cup, notifier) -> None:
        schedule(session, cup, notifier)
        with pytest.raises(AlreadyExists):
            schedule(session, cup, notifier, team1_id=cup.titans.id, team2_id=cup.strikers.id)

        # Another round is fine
        assert schedule(session, cup, notifier, round_label="Final").round == "Final"

    def test_overlapping_players(self, session, build, cup, notifier) -> None:
        build.player(cup.titans, "Asha again", "900")
        with pytest.raises(BadRequest, match=r"overlapping players in both teams: Asha again \(Phone: 900\)"):
            schedule(session, cup, notifier)

    def test_team_against_itself(self, session, cup, notifier) -> None:
        with pytest.raises(BadRequest):
            schedule(session, cup, notifier, team2_id=cup.strikers.id)

    def test_missing_tournament(self, session, cup, notifier) -> None:
        with pytest.raises(NotFound, match="Tournament not found"):
            schedule(session, cup, notifier, tournament_id=999)


class TestUpdateScoreboard:
    """Live scoring moves the match to current."""

    def test_scheduled_becomes_current(self, session, cup, notifier) -> None:
        match = schedule(session, cup, notifier)
        payload = cricket_board(cup.strikers, [cricket_entry(cup.asha, runs=4, balls=2)], cup.titans, [])

        updated = update_scoreboard(session, match.id, cup.organizer.id, payload)

        assert updated.status == MatchStatus.CURRENT
        assert updated.score_board == payload

    def test_played_match_is_frozen(self, session, build, cup) -> None:
        match = build.match(cup.tournament, cup.strikers, cup.titans, cup.organizer, status=MatchStatus.PLAYED)
        with pytest.raises(BadRequest, match="already been settled"):
            update_scoreboard(session, match.id, cup.organizer.id, {"team1": {"players": []}})

    def test_malformed_payload(self, session, build, cup) -> None:
        match = build.match(cup.tournament, cup.strikers, cup.titans, cup.organizer)
        with pytest.raises(BadRequest, match="Malformed"):
            update_scoreboard(session, match.id, cup.organizer.id, {"team1": {"players": "nobody"}})

    def test_wrong_sport_payload(self, session, build, cup) -> None:
        match = build.match(cup.tournament, cup.strikers, cup.titans, cup.organizer)
        with pytest.raises(BadRequest, match="tagged 'football'"):
            update_scoreboard(session, match.id, cup.organizer.id, {"sport": "football", "homeScore": 1})

    def test_authority_only(self, session, build, cup) -> None:
        match = build.match(cup.tournament, cup.strikers, cup.titans, cup.organizer)
        with pytest.raises(BadRequest, match="not allowed"):
            update_scoreboard(session, match.id, cup.owner2.id, {"team1": {"players": []}})


class TestDeleteMatch:
    def test_owners_told_it_is_cancelled(self, session, cup, notifier) -> None:
        match = schedule(session, cup, notifier)
        notifier.sent.clear()

        delete_match(session, match.id, cup.organizer.id, notifier=notifier)

        assert session.exec(select(Match).where(Match.id == match.id)).first() is None
        assert [body["body"] for _, body in notifier.sent] == [
            "Your match against Titans is cancelled",
            "Your match against Strikers is cancelled",
        ]

    def test_missing_match(self, session, cup, notifier) -> None:
        with pytest.raises(NotFound, match="Match not found"):
            delete_match(session, 12345, cup.organizer.id, notifier=notifier)
