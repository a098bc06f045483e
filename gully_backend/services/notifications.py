# gully_backend/services/notifications.py
"""
Best-effort push notifications.

The delivery transport (FCM or anything else) sits behind ``Notifier``.
A failed send is logged and reported as ``"failed"``; it never propagates
into the settlement or scheduling flow that triggered it.
"""

import logging
import uuid
from typing import Dict, Iterable, List, Optional

from gully_backend.models.scoreboard_schemas import CricketScoreboard

logger = logging.getLogger(__name__)

DELIVERY_FAILED = "failed"
DEFAULT_TITLE = "Gully Team"


class Notifier:
    """Sends one notification to one device. Returns a delivery id."""

    def send_notification(self, device_token: str, notification: Dict) -> str:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Default notifier: records the message in the log instead of pushing it."""

    def send_notification(self, device_token: str, notification: Dict) -> str:
        delivery_id = f"log-{uuid.uuid4().hex[:12]}"
        logger.info("🔔 [%s] to %s: %s | %s", delivery_id, device_token,
                    notification.get("title", DEFAULT_TITLE), notification.get("body", ""))
        return delivery_id


_notifier: Notifier = LoggingNotifier()


def get_notifier() -> Notifier:
    """FastAPI dependency. Tests override it to capture what was sent."""
    return _notifier


def dispatch_notifications(notifier: Notifier, tokens: Iterable[Optional[str]], notification: Dict) -> List[str]:
    """Send `notification` to every non-empty token. One result per token."""
    results = []
    for token in tokens:
        if not token:
            continue
        try:
            results.append(notifier.send_notification(token, notification))
        except Exception:
            logger.warning("Notification to %s failed", token, exc_info=True)
            results.append(DELIVERY_FAILED)

    failed = results.count(DELIVERY_FAILED)
    if results:
        logger.info("Notifications dispatched: %d sent, %d failed", len(results) - failed, failed)
    return results


# ==========================================
# ✉️ Message builders
# ==========================================

def match_scheduled_notification(team_name: str, opponent_name: str, round_label: str, day: str) -> Dict:
    return {
        "title": f"{team_name} VS {opponent_name} {round_label} Match",
        "body": f"Your match against {opponent_name} is scheduled on {day}. Be ready!",
    }


def match_cancelled_notification(team_name: str, opponent_name: str, round_label: str) -> Dict:
    return {
        "title": f"{team_name} VS {opponent_name} {round_label} Match",
        "body": f"Your match against {opponent_name} is cancelled",
    }


def cricket_margin(scoreboard: CricketScoreboard, winning_team_id: int) -> str:
    """
    'by 12 runs' when the side batting first won, 'by 4 wickets' when the
    chasing side won. Level scores give no margin.
    """
    first, second = scoreboard.first_innings, scoreboard.second_innings
    first_score = first.total_score if first else 0
    second_score = second.total_score if second else 0
    run_diff = first_score - second_score
    if run_diff == 0:
        return ""

    if first is not None and first.batting_team == winning_team_id:
        return f"by {run_diff} runs"

    wickets_left = 10 - (second.total_wickets if second else 0)
    return f"by {wickets_left} wicket{'s' if wickets_left > 1 else ''}"


def cricket_result_notification(scoreboard: CricketScoreboard, team_names: Dict[int, str],
                                winning_team_id: Optional[int], is_draw: bool) -> Dict:
    if is_draw:
        names = list(team_names.values()) + ["Team A", "Team B"]
        return {
            "title": "Match Result",
            "body": f"The match between {names[0]} and {names[1]} ended in a draw.",
        }

    winner = team_names.get(winning_team_id, "Winner")
    opponent = next((name for team_id, name in team_names.items() if team_id != winning_team_id), "Opponent")
    margin = cricket_margin(scoreboard, winning_team_id)
    return {
        "title": "Hey Participants!",
        "body": f"{winner} has won the match against {opponent} {margin}".rstrip(),
    }


def football_result_notification(home_name: str, away_name: str, final_score: str,
                                 winner_name: Optional[str]) -> Dict:
    if winner_name is None:
        return {
            "title": "Match Result",
            "body": f"{home_name} {final_score} {away_name} ended in a draw.",
        }
    return {
        "title": "Full Time!",
        "body": f"{winner_name} won {home_name} {final_score} {away_name}",
    }
