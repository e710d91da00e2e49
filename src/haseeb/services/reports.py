"""Reporting utilities for Haseeb."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from ..models.habit import PrayerQuality
from .trends import TrendPoint

QUALITY_COLORS = {
    PrayerQuality.TAKBIRAH: "#22c55e",
    PrayerQuality.JAMAA: "#eab308",
    PrayerQuality.ON_TIME: "#f97316",
    PrayerQuality.MISSED: "#ef4444",
}

QUALITY_LABELS = {
    PrayerQuality.TAKBIRAH: "Takbirah",
    PrayerQuality.JAMAA: "In group",
    PrayerQuality.ON_TIME: "On time",
    PrayerQuality.MISSED: "Missed",
}


class ReportRenderer(Protocol):
    """Protocol describing renderer behavior."""

    def render(self, figure: Figure, *, output_path: Path) -> None:  # pragma: no cover - interface
        ...


def build_trend_chart(points: Sequence[TrendPoint], *, title: str = "Prayer quality trend") -> Figure:
    """Create a stacked area chart of the rolling prayer-quality averages.

    Levels are stacked best-first so the top-quality band sits at the bottom.
    """

    fig, ax = plt.subplots(figsize=(10, 5))

    if points:
        days = [point.day for point in points]
        levels = sorted(PrayerQuality, reverse=True)
        ax.stackplot(
            days,
            [[point.averages[level] for point in points] for level in levels],
            labels=[QUALITY_LABELS[level] for level in levels],
            colors=[QUALITY_COLORS[level] for level in levels],
            alpha=0.85,
        )
        ax.set_ylabel("Prayers per day (rolling average)")
        ax.set_ylim(bottom=0)
        ax.legend(loc="upper left", fontsize=9, framealpha=0.9)
        ax.set_title(title, fontsize=14, fontweight="bold", pad=12)
        fig.autofmt_xdate()
    else:
        ax.text(0.5, 0.5, "No prayer data", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")

    plt.tight_layout()
    return fig


def export_trend_png(
    *,
    points: Sequence[TrendPoint],
    output_path: Path,
    renderer: ReportRenderer | None = None,
) -> Path:
    """Render the trend chart to PNG and return the path."""

    fig = build_trend_chart(points)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if renderer is not None:
        renderer.render(fig, output_path=output_path)
    else:
        fig.savefig(output_path, bbox_inches="tight", dpi=120)
    plt.close(fig)
    return output_path


__all__ = ["ReportRenderer", "build_trend_chart", "export_trend_png"]
