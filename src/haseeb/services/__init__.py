"""Service module exports."""

from . import (
    export_csv,
    growth,
    habits,
    import_csv,
    obstacles,
    quality,
    reports,
    scoring,
    snapshot,
    trends,
)

__all__ = [
    "export_csv",
    "growth",
    "habits",
    "import_csv",
    "obstacles",
    "quality",
    "reports",
    "scoring",
    "snapshot",
    "trends",
]
