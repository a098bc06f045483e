"""Record builders and scoreboard payloads shared by the test modules."""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sqlmodel import Session

from gully_backend.models import (
    BallType,
    ChallengeMatch,
    ChallengeStatus,
    Match,
    MatchStatus,
    Player,
    RegisteredTeam,
    RegistrationStatus,
    Sport,
    Team,
    Tournament,
    User,
)
from gully_backend.services.notifications import Notifier

MATCH_DAY = datetime(2024, 3, 10, 9, 30)
BANGALORE = (12.9716, 77.5946)


class RecordingNotifier(Notifier):
    """Keeps every notification instead of sending it."""

    def __init__(self) -> None:
        self.sent: List[tuple] = []

    def send_notification(self, device_token: str, notification: Dict) -> str:
        self.sent.append((device_token, notification))
        return f"sent-{len(self.sent)}"


class Builder:
    """Creates committed records with sensible defaults."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _save(self, obj):
        self.session.add(obj)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def user(self, full_name: str = "User", phone_number: Optional[str] = None,
             fcm_token: Optional[str] = None, profile_photo: Optional[str] = None) -> User:
        return self._save(User(full_name=full_name, phone_number=phone_number,
                               fcm_token=fcm_token, profile_photo=profile_photo))

    def team(self, name: str, sport: Sport = Sport.CRICKET, owner: Optional[User] = None) -> Team:
        return self._save(Team(name=name, sport=sport, owner_id=owner.id if owner else None))

    def player(self, team: Team, name: str, phone_number: Optional[str] = None,
               user: Optional[User] = None, role: str = "Batsman") -> Player:
        return self._save(Player(team_id=team.id, name=name, phone_number=phone_number,
                                 user_id=user.id if user else None, role=role))

    def tournament(self, organizer: User, sport: Sport = Sport.CRICKET,
                   ball_type: Optional[BallType] = BallType.TENNIS,
                   latitude: float = BANGALORE[0], longitude: float = BANGALORE[1],
                   start_at: datetime = MATCH_DAY - timedelta(days=2),
                   end_at: datetime = MATCH_DAY + timedelta(days=2)) -> Tournament:
        return self._save(Tournament(
            name=f"{sport.value} cup", sport=sport,
            ball_type=ball_type if sport == Sport.CRICKET else None,
            organizer_id=organizer.id, latitude=latitude, longitude=longitude,
            start_at=start_at, end_at=end_at,
        ))

    def register(self, tournament: Tournament, team: Team, user: User,
                 status: RegistrationStatus = RegistrationStatus.ACCEPTED) -> RegisteredTeam:
        return self._save(RegisteredTeam(tournament_id=tournament.id, team_id=team.id,
                                         user_id=user.id, status=status))

    def match(self, tournament: Tournament, team1: Team, team2: Team, authority: User,
              score_board: Optional[Dict] = None, scheduled_at: datetime = MATCH_DAY,
              status: MatchStatus = MatchStatus.CURRENT, round_label: str = "Group") -> Match:
        return self._save(Match(
            tournament_id=tournament.id, team1_id=team1.id, team2_id=team2.id,
            match_authority_id=authority.id, round=round_label, scheduled_at=scheduled_at,
            score_board=score_board, status=status,
        ))

    def challenge(self, team1: Team, team2: Team, captain1: User, captain2: User,
                  sport: Sport = Sport.CRICKET, status: ChallengeStatus = ChallengeStatus.ACCEPTED,
                  score_board: Optional[Dict] = None) -> ChallengeMatch:
        return self._save(ChallengeMatch(
            challenged_by_id=captain1.id, team1_id=team1.id, team2_id=team2.id,
            captain1_id=captain1.id, captain2_id=captain2.id, match_authority_id=captain1.id,
            sport=sport, status=status, score_board=score_board,
        ))


# ---------------------------------------------
# Scoreboard payloads (camelCase, as the live scorer sends them)
# ---------------------------------------------
def cricket_entry(player: Player, runs: int = 0, balls: int = 0, fours: int = 0, sixes: int = 0,
                  out_type: Optional[str] = None, bowl_runs: int = 0, wickets: int = 0,
                  current_over: int = 0, logged_balls: int = 0, maidens: int = 0,
                  phone_number: Optional[str] = None) -> Dict:
    overs_log = {str(i): {"over": i // 6, "ball": i % 6 + 1} for i in range(logged_balls)}
    return {
        "_id": player.id,
        "name": player.name,
        "phoneNumber": phone_number if phone_number is not None else player.phone_number,
        "batting": {"runs": runs, "balls": balls, "fours": fours, "sixes": sixes, "outType": out_type},
        "bowling": {
            "runs": bowl_runs, "wickets": wickets, "currentOver": current_over,
            "overs": overs_log, "maidens": maidens,
        },
    }


def cricket_board(team1: Team, team1_players: List[Dict], team2: Team, team2_players: List[Dict],
                  first=None, second=None) -> Dict:
    """first / second: (batting team, total score, wickets, overs, balls)"""
    def innings(summary):
        if summary is None:
            return None
        team, score, wickets, overs, balls = summary
        return {"battingTeam": {"_id": team.id, "teamName": team.name}, "totalScore": score,
                "totalWickets": wickets, "overs": overs, "balls": balls}

    return {
        "sport": "cricket",
        "team1": {"_id": team1.id, "teamName": team1.name, "players": team1_players},
        "team2": {"_id": team2.id, "teamName": team2.name, "players": team2_players},
        "firstInnings": innings(first),
        "secondInnings": innings(second),
    }


def football_entry(player: Player, role: str = "Forward", **embedded) -> Dict:
    return {"_id": player.id, "name": player.name, "phoneNumber": player.phone_number,
            "role": role, **embedded}


def football_board(home: Team, home_players: List[Dict], away: Team, away_players: List[Dict],
                   home_score: int = 0, away_score: int = 0, goals=(), cards=(), events=(),
                   **extra) -> Dict:
    return {
        "sport": "football",
        "homeTeam": {"_id": home.id, "teamName": home.name, "players": home_players},
        "awayTeam": {"_id": away.id, "teamName": away.name, "players": away_players},
        "homeScore": home_score,
        "awayScore": away_score,
        "goals": list(goals),
        "cards": list(cards),
        "matchEvents": list(events),
        **extra,
    }


