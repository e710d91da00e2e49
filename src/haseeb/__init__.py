"""Haseeb consistency and scoring engine for worship habits."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .services.growth import GrowthResult, Period, compute_growth
from .services.habits import StreakResult, compute_group_streak, compute_streak
from .services.obstacles import ObstacleEntry, rank_obstacles
from .services.quality import decode_compound, is_applicable, is_win
from .services.scoring import ScoreResult, compute_score

__all__ = [
    "BaseConfig",
    "DevConfig",
    "GrowthResult",
    "ObstacleEntry",
    "Period",
    "ScoreResult",
    "StreakResult",
    "compute_group_streak",
    "compute_growth",
    "compute_score",
    "compute_streak",
    "decode_compound",
    "is_applicable",
    "is_win",
    "rank_obstacles",
]
