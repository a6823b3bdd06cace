"""Command line interface for HabitGrid."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Optional

import click

from .config import BaseConfig
from .context import AppContext, create_app_context
from .logging_config import setup_logging
from .models.habit import Habit
from .services import charts, stats
from .services.dates import days_in_month, format_date, month_label, shift_month
from .services.habits import move_habit, new_habit
from .services.printable import TrackerExportError, export_tracker_pdf

def month_options(func):
    """Add --month and --offset for picking the month a command works on."""

    func = click.option(
        "--offset",
        type=int,
        default=0,
        show_default=True,
        help="Months to move from --month, e.g. -1 for the previous month.",
    )(func)
    return click.option(
        "--month",
        "month",
        type=click.DateTime(formats=["%Y-%m"]),
        default=None,
        help="Month to use as YYYY-MM (defaults to the current month).",
    )(func)


def _year_month(month: Optional[datetime], offset: int = 0) -> tuple[int, int]:
    """Return (year, month_index0) for the --month and --offset options."""

    target = month.date() if month is not None else date.today()
    return shift_month(target.year, target.month - 1, offset)


def _signed_in(app: AppContext):
    if app.current_user is None:
        raise click.ClickException("Not signed in. Run `habitgrid login EMAIL` or `habitgrid register`.")
    return app.current_user


def _resolve_habit(app: AppContext, ref: str) -> tuple[Habit, list[Habit]]:
    """Find one of the signed-in user's habits by id or by 1-based list position."""

    user = _signed_in(app)
    habits = app.habit_repo.get_habits(user.id)
    for habit in habits:
        if habit.id == ref:
            return habit, habits
    if ref.isdigit() and 1 <= int(ref) <= len(habits):
        return habits[int(ref) - 1], habits
    raise click.ClickException(f"No habit matching {ref!r}")


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="HABITGRID_DATA_DIR",
    default=None,
    help="Directory holding the database, session and logs.",
)
@click.pass_context
def cli(ctx: click.Context, data_dir: Optional[Path]) -> None:
    """Track daily habits on a monthly grid."""

    config = BaseConfig(data_dir=data_dir)
    setup_logging(config)
    ctx.obj = create_app_context(config)


@cli.command()
@click.argument("name")
@click.argument("email")
@click.pass_obj
def register(app: AppContext, name: str, email: str) -> None:
    """Register (or re-open) a profile and sign in."""

    try:
        user = app.register(name, email)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Signed in as {user.name} <{user.email}>")


@cli.command()
@click.argument("email")
@click.pass_obj
def login(app: AppContext, email: str) -> None:
    """Sign in with a registered e-mail."""

    user = app.login(email)
    if user is None:
        click.echo("User not found. Please register first.", err=True)
        raise SystemExit(1)
    click.echo(f"Signed in as {user.name} <{user.email}>")


@cli.command()
@click.pass_obj
def logout(app: AppContext) -> None:
    """Sign out."""

    app.logout()
    click.echo("Signed out.")


@cli.command()
@click.pass_obj
def whoami(app: AppContext) -> None:
    """Show the signed-in profile."""

    user = _signed_in(app)
    click.echo(f"{user.name} <{user.email}>")


@cli.group()
def habit() -> None:
    """Manage habits."""


@habit.command("add")
@click.argument("name")
@click.option("--color", default=None, help="Hex colour such as #0ea5e9.")
@month_options
@click.pass_obj
def habit_add(
    app: AppContext, name: str, color: Optional[str], month: Optional[datetime], offset: int
) -> None:
    """Create a habit; its monthly goal is the length of --month."""

    user = _signed_in(app)
    year, month_index0 = _year_month(month, offset)
    try:
        created = app.habit_repo.save_habit(
            new_habit(user.id, name, color=color, year=year, month_index0=month_index0)
        )
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Added {created.name} ({created.id}), goal {created.monthly_goal} days")


@habit.command("list")
@click.pass_obj
def habit_list(app: AppContext) -> None:
    """List habits in their saved order."""

    user = _signed_in(app)
    habits = app.habit_repo.get_habits(user.id)
    if not habits:
        click.echo("Start tracking by adding a habit: habitgrid habit add NAME")
        return
    for position, item in enumerate(habits, start=1):
        click.echo(f"{position:>2}. {item.name:<30} {item.color}  goal {item.monthly_goal:>2}  {item.id}")


@habit.command("delete")
@click.argument("ref")
@click.confirmation_option(prompt="Delete this habit and all its performance history?")
@click.pass_obj
def habit_delete(app: AppContext, ref: str) -> None:
    """Delete a habit (by id or position) and its entries."""

    target, _ = _resolve_habit(app, ref)
    app.habit_repo.delete_habit(target.id)
    click.echo(f"Deleted {target.name}")


@habit.command("move")
@click.argument("ref")
@click.argument("to_position", type=int)
@click.pass_obj
def habit_move(app: AppContext, ref: str, to_position: int) -> None:
    """Move a habit to a new 1-based position."""

    target, habits = _resolve_habit(app, ref)
    from_index = next(i for i, item in enumerate(habits) if item.id == target.id)
    try:
        reordered = move_habit(habits, from_index, to_position - 1)
    except IndexError as exc:
        raise click.ClickException(str(exc)) from exc
    app.habit_repo.update_habits_order(app.require_user().id, reordered)
    click.echo(f"Moved {target.name} to position {to_position}")


@cli.command()
@click.argument("ref")
@click.argument("day", type=click.DateTime(formats=["%Y-%m-%d"]), required=False)
@click.pass_obj
def toggle(app: AppContext, ref: str, day: Optional[datetime]) -> None:
    """Flip completion of a habit on DAY (YYYY-MM-DD, defaults to today)."""

    target, _ = _resolve_habit(app, ref)
    when = day.date() if day is not None else date.today()
    entry = app.habit_repo.toggle_entry(target.id, format_date(when.year, when.month - 1, when.day))
    state = "done" if entry.completed else "not done"
    click.echo(f"{target.name} on {entry.date}: {state}")


@cli.command("stats")
@month_options
@click.option("--daily", is_flag=True, default=False, help="Also print the per-day completion rate.")
@click.pass_obj
def stats_command(app: AppContext, month: Optional[datetime], offset: int, daily: bool) -> None:
    """Print dashboard statistics for a month."""

    _signed_in(app)
    year, month_index0 = _year_month(month, offset)
    habits, entries = app.load_habits_and_entries()
    summary = stats.compute_dashboard_stats(habits, entries, year, month_index0)
    month_days = days_in_month(year, month_index0)

    click.echo(month_label(year, month_index0).upper())
    click.echo(f"  Habits:             {summary.total_habits}")
    click.echo(f"  Overall completion: {summary.overall_completion}%")
    click.echo(f"  Completed entries:  {summary.completed_days}")
    click.echo(f"  Current streak:     {summary.current_streak}")
    click.echo(f"  Best streak:        {summary.best_streak}")

    weeks = stats.get_weekly_stats(habits, entries, year, month_index0)
    click.echo("Weekly volume: " + "  ".join(f"W{i + 1}={count}" for i, count in enumerate(weeks)))

    ranking = stats.get_habit_ranking(habits, entries, year, month_index0)
    if ranking:
        click.echo("Top habits:")
        for position, rank in enumerate(ranking[:5], start=1):
            click.echo(
                f"  {position}. {rank.name:<30} {rank.count:>2}/{month_days}"
                f" ({stats.goal_progress(rank, month_days)}%)"
            )

    if daily:
        click.echo("Daily completion:")
        for stat in stats.get_daily_stats(habits, entries, year, month_index0):
            click.echo(f"  {stat.date}  {stat.completion_rate:>3}%")


@cli.command("charts")
@click.argument("output_dir", type=click.Path(file_okay=False, path_type=Path))
@month_options
@click.pass_obj
def charts_command(app: AppContext, output_dir: Path, month: Optional[datetime], offset: int) -> None:
    """Render dashboard charts as PNG files into OUTPUT_DIR."""

    _signed_in(app)
    year, month_index0 = _year_month(month, offset)
    habits, entries = app.load_habits_and_entries()
    paths = charts.export_dashboard_charts(
        daily=stats.get_daily_stats(habits, entries, year, month_index0),
        weeks=stats.get_weekly_stats(habits, entries, year, month_index0),
        ranking=stats.get_habit_ranking(habits, entries, year, month_index0),
        days_in_month=days_in_month(year, month_index0),
        output_dir=output_dir,
    )
    for path in paths:
        click.echo(f"Chart written: {path}")


@cli.command("export-pdf")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@month_options
@click.pass_obj
def export_pdf(app: AppContext, output: Path, month: Optional[datetime], offset: int) -> None:
    """Write the printable monthly tracker to OUTPUT."""

    user = _signed_in(app)
    year, month_index0 = _year_month(month, offset)
    habits = app.habit_repo.get_habits(user.id)
    click.echo("Generating tracker...")
    try:
        path = export_tracker_pdf(user, habits, output, year=year, month_index0=month_index0)
    except TrackerExportError as exc:
        click.echo(f"Export failed: {exc}", err=True)
        raise SystemExit(1)
    click.echo(f"Tracker written: {path}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
