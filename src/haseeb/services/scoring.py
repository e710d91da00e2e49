"""Global win/loss score."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..logging_config import get_logger
from ..models.habit import Habit, HabitLog
from .quality import LogOutcome
from .snapshot import build_snapshot

logger = get_logger(__name__)


@dataclass(slots=True)
class ScoreResult:
    """Wins and losses across scoring-eligible logs."""

    wins: int = 0
    losses: int = 0

    @property
    def total(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        return self.wins / self.total if self.total else 0.0

    @property
    def win_percentage(self) -> int:
        """Win rate rounded to a whole percent for display."""

        return round(self.win_rate * 100)


def compute_score(habits: Iterable[Habit], logs: Iterable[HabitLog]) -> ScoreResult:
    """Tally wins and losses.

    Logs of unknown or scoring-ineligible habits are skipped, as are excused,
    still-pending and deprecated-status logs.
    """

    snapshot = build_snapshot(habits, logs)
    result = ScoreResult()
    skipped = 0
    for habit, _log, outcome in snapshot.outcomes():
        if not habit.scoring_eligible or not outcome.is_terminal:
            skipped += 1
            continue
        if outcome is LogOutcome.WIN:
            result.wins += 1
        else:
            result.losses += 1

    logger.debug(
        "Score computed",
        extra={"wins": result.wins, "losses": result.losses, "skipped": skipped},
    )
    return result


__all__ = ["ScoreResult", "compute_score"]
