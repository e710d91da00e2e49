"""Command line entry points for Haseeb."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import click

from .config import BaseConfig
from .logging_config import get_logger, setup_logging
from .services import export_csv, growth, habits, import_csv, obstacles, reports, scoring, trends
from .services.snapshot import build_snapshot

logger = get_logger(__name__)


def _load(config: BaseConfig, habits_path: Path | None, logs_path: Path | None):
    """Read habits/logs from CSV files when given, otherwise from the database."""

    if (habits_path is None) != (logs_path is None):
        raise click.UsageError("--habits and --logs must be given together.")
    if habits_path is not None and logs_path is not None:
        return import_csv.load_snapshot_csv(habits_path=habits_path, logs_path=logs_path)

    # Import here so CSV-only runs never touch the database
    from .domain.repositories import LogStore
    from .infra.database import bootstrap_database
    from .infra.repositories.habit import SQLModelLogStore

    _, session_factory = bootstrap_database(config)
    store: LogStore = SQLModelLogStore(session_factory)
    return store.snapshot()


def _source_options(func):
    func = click.option(
        "--today",
        type=click.DateTime(formats=["%Y-%m-%d"]),
        default=None,
        help="Evaluate as of this date (defaults to the system date).",
    )(func)
    func = click.option(
        "--logs", "logs_path", type=click.Path(exists=True, dir_okay=False, path_type=Path)
    )(func)
    func = click.option(
        "--habits", "habits_path", type=click.Path(exists=True, dir_okay=False, path_type=Path)
    )(func)
    return func


def _today(value) -> date:
    return value.date() if value is not None else date.today()


def _format_delta(delta: int | None) -> str:
    if delta is None:
        return "--"
    return f"{delta:+d}"


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Consistency and scoring reports for worship habits."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = config


@cli.command("summary")
@_source_options
@click.pass_obj
def summary(config: BaseConfig, habits_path, logs_path, today) -> None:
    """Print score, streaks, growth and top obstacles."""

    today = _today(today)
    habit_list, log_list = _load(config, habits_path, logs_path)
    snapshot = build_snapshot(habit_list, log_list)
    if snapshot.issues:
        click.echo(
            f"Warning: {len(snapshot.issues)} log(s) skipped or merged, see the log file.",
            err=True,
        )

    score = scoring.compute_score(habit_list, log_list)
    click.echo(f"Score: {score.wins} wins / {score.losses} losses ({score.win_percentage}%)")

    prayer = habits.compute_prayer_streak(
        habit_list, log_list, today=today, prayer_ids=config.PRAYER_HABIT_IDS
    )
    click.echo(f"All prayers: current {prayer.current_streak}, best {prayer.best_streak}")

    for row in export_csv.build_summary_rows(habit_list, log_list, today=today):
        deltas = " ".join(
            f"{period.value[0].upper()}{_format_delta(row[f'growth_{period.value}'])}"
            for period in growth.Period
        )
        click.echo(
            f"  {row['habit_id']:<24} current {row['current_streak']:>3}  "
            f"best {row['best_streak']:>3}  {deltas}"
        )

    entries = obstacles.rank_obstacles(habit_list, log_list, top_n=config.OBSTACLE_TOP_N)
    if entries:
        click.echo("Top obstacles:")
        for index, entry in enumerate(entries, start=1):
            click.echo(f"  {index}. {entry.reason} ({entry.count}, {entry.percentage:.0%})")
    else:
        click.echo("No obstacles logged yet")


@cli.command("export")
@_source_options
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), required=True)
@click.pass_obj
def export(config: BaseConfig, habits_path, logs_path, today, output: Path) -> None:
    """Write the per-habit summary to a CSV file."""

    habit_list, log_list = _load(config, habits_path, logs_path)
    path = export_csv.export_summary_csv(
        habits=habit_list, logs=log_list, today=_today(today), output_path=output
    )
    logger.info("Summary exported", extra={"output": str(path)})
    click.echo(f"Export written: {path}")


@cli.command("chart")
@_source_options
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), required=True)
@click.pass_obj
def chart(config: BaseConfig, habits_path, logs_path, today, output: Path) -> None:
    """Render the rolling prayer-quality trend to a PNG file."""

    habit_list, log_list = _load(config, habits_path, logs_path)
    points = trends.prayer_trends(
        habit_list,
        log_list,
        today=_today(today),
        habit_ids=config.PRAYER_HABIT_IDS,
        days=config.TREND_DAYS,
        window=config.TREND_WINDOW,
    )
    path = reports.export_trend_png(points=points, output_path=output)
    click.echo(f"Chart written: {path}")


def main() -> None:  # pragma: no cover - console script
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
