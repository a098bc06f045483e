# gully_backend/services/stat_store.py
"""
Incremental writes to the statistic bucket tables.

Settlement never reads a counter, adds to it in Python and writes it back.
Each increment is flushed as ``UPDATE ... SET col = col + :delta`` so two
settlements touching the same row cannot lose each other's updates.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple, Type

from sqlmodel import Session, SQLModel, select

from gully_backend.services.result_classifier import MatchOutcome

logger = logging.getLogger(__name__)


def get_or_create_bucket(session: Session, model: Type[SQLModel], **keys) -> SQLModel:
    """Fetch the bucket row for `keys`, creating it zero-valued on first use."""
    row = session.exec(select(model).filter_by(**keys)).first()
    if row is None:
        row = model(**keys)
        session.add(row)
        session.flush()
    return row


def increment_bucket(session: Session, model: Type[SQLModel], deltas: Dict[str, int], **keys) -> SQLModel:
    """
    Add `deltas` to the bucket row identified by `keys`.
    Zero deltas are skipped; unknown column names raise AttributeError.
    """
    row = get_or_create_bucket(session, model, **keys)

    changed = {name: delta for name, delta in deltas.items() if delta}
    if not changed:
        return row

    for name, delta in changed.items():
        # SQL expression, rendered into the UPDATE at flush time
        setattr(row, name, getattr(model, name) + delta)

    session.add(row)
    session.flush()
    return row


@dataclass
class AggregationReport:
    """What a stat aggregator managed to write for one match."""
    players_updated: List[int] = field(default_factory=list)
    players_skipped: List[int] = field(default_factory=list)
    teams_updated: List[int] = field(default_factory=list)
    teams_skipped: List[int] = field(default_factory=list)


def run_isolated(session: Session, label: str, work: Callable[[], None]) -> bool:
    """
    Run one sub-update inside a SAVEPOINT.
    A failure rolls back only this sub-update, is logged, and returns False.
    """
    try:
        with session.begin_nested():
            work()
        return True
    except Exception:
        logger.warning("Skipped %s: sub-update failed", label, exc_info=True)
        return False


class StatAggregator:
    """Base aggregator. Subclasses write one sport's counters for a settled match."""
    sport: str = ""

    def apply(self, session: Session, scoreboard, team_ids: Tuple[int, int],
              outcome: MatchOutcome, ball_type: str) -> AggregationReport:
        raise NotImplementedError
