"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from liftlog.config import get_settings, reload_settings
from liftlog.data.serialization import Dataset, load_dataset

app = typer.Typer(
    help="Training and body-composition analytics for LiftLog records",
    no_args_is_help=True,
)
console = Console()

config_app = typer.Typer(help="Show or create the configuration file")
app.add_typer(config_app, name="config")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict) -> None:
    """Output JSON response to stdout."""
    print(json.dumps(response, indent=2))


def fail(command: str, message: str, json_output: bool, style: str = "red") -> None:
    """Report an error in the requested format and exit with status 1."""
    if json_output:
        output_json({"success": False, "command": command, "errors": [message]})
    else:
        console.print(f"[{style}]{message}[/{style}]")
    raise typer.Exit(1)


def load_records(command: str, data_path: Optional[Path], json_output: bool) -> Dataset:
    """Load the dataset from --data or the configured path."""
    path = data_path or get_settings().data.path
    try:
        return load_dataset(path)
    except FileNotFoundError:
        fail(command, f"Records file not found: {path}", json_output)
    except ValueError as e:
        fail(command, str(e), json_output)


def parse_day(value: Optional[str]) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got '{value}'")


DataOption = typer.Option(None, "--data", "-f", help="Records file (JSON or YAML)")
JsonOption = typer.Option(False, "--json", help="Output as JSON")
TodayOption = typer.Option(None, "--today", help="Evaluate as of this date (YYYY-MM-DD)")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Path to config.yaml"
    ),
) -> None:
    """Configure logging and settings before any command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    if config_path is not None:
        reload_settings(config_path)


# ============================================================================
# Body composition and energy
# ============================================================================


@app.command()
def bodyfat(
    data_path: Optional[Path] = DataOption,
    source: Optional[str] = typer.Option(
        None, "--source", "-s", help="manual, estimated or hybrid (default: settings)"
    ),
    reference: Optional[float] = typer.Option(
        None,
        "--reference",
        "-r",
        help="Trusted body-fat % for the latest entry; prints the calibration offset",
    ),
    json_output: bool = JsonOption,
) -> None:
    """Estimate body-fat % for the latest metrics entry."""
    from liftlog.profiles.body_fat import measurements_for, resolve_body_fat
    from liftlog.profiles.calibration import derive_calibration_offset
    from liftlog.tracking.history import latest_entry

    records = load_records("bodyfat", data_path, json_output)
    entry = latest_entry(records.metrics)
    estimate = resolve_body_fat(entry, records.settings, source)

    if estimate is None:
        fail("bodyfat", "Not enough data to estimate body fat", json_output, "yellow")

    offset = None
    if reference is not None:
        offset = derive_calibration_offset(
            reference, measurements_for(entry, records.settings)
        )

    if json_output:
        data = {
            "date": entry.date if entry else None,
            "body_fat_pct": round(estimate.percent, 1),
            "method": estimate.method,
            "family": estimate.family,
            "calibration_offset": records.settings.bf_calibration_offset,
        }
        if reference is not None:
            data["suggested_offset"] = round(offset, 2) if offset is not None else None
        output_json({
            "success": True,
            "command": "bodyfat",
            "data": data,
            "human_summary": f"Body fat {estimate.percent:.1f}% ({estimate.method})",
        })
        return

    console.print(
        f"Body fat: [bold]{estimate.percent:.1f}%[/bold] "
        f"[dim]({estimate.family}: {estimate.method}, "
        f"offset {records.settings.bf_calibration_offset:+.1f})[/dim]"
    )
    if reference is not None:
        if offset is None:
            console.print("[yellow]No tape-measure estimate to calibrate against[/yellow]")
        else:
            console.print(
                f"Set bf_calibration_offset to [bold]{offset:+.2f}[/bold] "
                f"to match {reference:g}%"
            )


@app.command()
def history(
    data_path: Optional[Path] = DataOption,
    estimate: bool = typer.Option(
        False, "--estimate", "-e", help="Fill missing body-fat % with estimates"
    ),
    json_output: bool = JsonOption,
) -> None:
    """Show the weight and body-fat history."""
    from liftlog.tracking.history import body_series

    records = load_records("history", data_path, json_output)
    points = body_series(records.metrics, records.settings, fill_estimates=estimate)

    if json_output:
        output_json({
            "success": True,
            "command": "history",
            "data": {
                "points": [
                    {
                        "date": p.date,
                        "weight_lbs": p.weight_lbs,
                        "body_fat_pct": (
                            round(p.body_fat_pct, 1) if p.body_fat_pct is not None else None
                        ),
                        "estimated": p.estimated,
                    }
                    for p in points
                ]
            },
            "human_summary": f"{len(points)} entries",
        })
        return

    if not points:
        console.print("No body metrics logged yet")
        return

    table = Table(title="Body History")
    table.add_column("Date", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Body Fat %", justify="right", style="blue")
    for p in points:
        weight = f"{p.weight_lbs:g}" if p.weight_lbs is not None else "-"
        if p.body_fat_pct is None:
            body_fat = "-"
        else:
            body_fat = f"{p.body_fat_pct:.1f}" + ("*" if p.estimated else "")
        table.add_row(p.date, weight, body_fat)
    console.print(table)
    if estimate:
        console.print("[dim]* estimated[/dim]")


@app.command()
def energy(
    data_path: Optional[Path] = DataOption,
    intake: Optional[float] = typer.Option(None, "--intake", "-i", help="Daily calories"),
    activity: Optional[str] = typer.Option(
        None, "--activity", "-a", help="sedentary, light, moderate, very_active, athlete"
    ),
    json_output: bool = JsonOption,
) -> None:
    """Show BMR, TDEE and the weight change implied by an intake."""
    from liftlog.profiles.body_calc import energy_report
    from liftlog.tracking.history import current_weight

    records = load_records("energy", data_path, json_output)
    weight = current_weight(records.metrics, records.settings)
    if not weight:
        fail("energy", "No body weight recorded", json_output, "yellow")

    report = energy_report(
        records.settings,
        weight,
        activity or get_settings().defaults.activity_level,
        intake,
    )

    if json_output:
        output_json({
            "success": True,
            "command": "energy",
            "data": {
                "weight_lbs": weight,
                "bmr": round(report.bmr, 0),
                "tdee": round(report.tdee, 0),
                "activity_level": report.activity_level.value,
                "intake": round(report.intake, 0),
                "daily_balance": round(report.daily_balance, 0),
                "lbs_per_week": round(report.lbs_per_week, 2),
            },
            "human_summary": f"TDEE {report.tdee:.0f} kcal, {report.lbs_per_week:+.2f} lb/week",
        })
    else:
        console.print(report.summary())


@app.command()
def project(
    data_path: Optional[Path] = DataOption,
    intake: Optional[float] = typer.Option(None, "--intake", "-i", help="Daily calories"),
    activity: Optional[str] = typer.Option(None, "--activity", "-a", help="Activity level"),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Horizon in days"),
    target: Optional[float] = typer.Option(
        None, "--target", "-t", help="Target weight; reports days to reach it"
    ),
    today: Optional[str] = TodayOption,
    json_output: bool = JsonOption,
) -> None:
    """Project weight and body-fat % over the coming weeks."""
    from liftlog.tracking.projection import days_to_target, project_from_records

    settings = get_settings()
    records = load_records("project", data_path, json_output)
    projection = project_from_records(
        records.settings,
        records.metrics,
        intake=intake,
        activity_level=activity or settings.defaults.activity_level,
        horizon_days=days or settings.projection.horizon_days,
        today=parse_day(today),
        fat_fraction=settings.projection.fat_fraction,
        default_body_fat_pct=settings.projection.default_body_fat_pct,
    )

    if projection is None:
        fail(
            "project",
            "Add weight in body metrics (or settings) to estimate projections",
            json_output,
            "yellow",
        )

    days_needed = None
    if target is not None:
        days_needed = days_to_target(projection.start_weight, target, projection.daily_rate)

    if json_output:
        output_json({
            "success": True,
            "command": "project",
            "data": {
                "days_to_target": days_needed,
                "tdee": round(projection.energy.tdee, 0),
                "start_weight_lbs": projection.start_weight,
                "end_weight_lbs": round(projection.end_weight, 2),
                "net_change_lbs": round(projection.net_change, 2),
                "weekly_rate_lbs": round(projection.weekly_rate, 2),
                "points": [
                    {
                        "date": p.date,
                        "weight_lbs": round(p.weight_lbs, 2),
                        "body_fat_pct": round(p.body_fat_pct, 1),
                    }
                    for p in projection.points
                ],
            },
            "human_summary": (
                f"{projection.net_change:+.1f} lb over {projection.days} days "
                f"({projection.weekly_rate:+.1f} lb/week)"
            ),
        })
        return

    table = Table(title=f"Projection ({projection.days} days)")
    table.add_column("Date", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Body Fat %", justify="right", style="blue")
    for point in projection.weekly():
        table.add_row(point.date, f"{point.weight_lbs:.1f}", f"{point.body_fat_pct:.1f}")
    console.print(table)
    console.print(
        f"TDEE est: [bold]{projection.energy.tdee:.0f}[/bold] kcal/day. "
        f"Net change {projection.net_change:+.1f} lb "
        f"(≈ {projection.weekly_rate:+.2f} lb/week)"
    )
    if target is not None:
        if days_needed is None:
            console.print(f"[yellow]{target:g} lb is not reached at this intake[/yellow]")
        else:
            console.print(f"Reaches {target:g} lb in [bold]{days_needed}[/bold] days")


# ============================================================================
# Training
# ============================================================================


@app.command()
def lifts(
    data_path: Optional[Path] = DataOption,
    lift: Optional[str] = typer.Option(
        None, "--lift", "-l", help="Show the estimated 1RM history of one lift"
    ),
    json_output: bool = JsonOption,
) -> None:
    """Show personal records and best estimated 1RM per exercise."""
    from liftlog.tracking.training import best_1rms, one_rm_series, personal_records

    records = load_records("lifts", data_path, json_output)

    if lift:
        series = one_rm_series(records.workouts).get(lift, [])
        if not series:
            fail("lifts", f"No sets logged for '{lift}'", json_output, "yellow")
        if json_output:
            output_json({
                "success": True,
                "command": "lifts",
                "data": {
                    "lift": lift,
                    "history": [
                        {"date": p.date, "estimated_1rm": round(p.estimated_1rm, 1)}
                        for p in series
                    ],
                },
                "human_summary": f"{lift}: {len(series)} sessions",
            })
            return
        table = Table(title=f"{lift} Estimated 1RM")
        table.add_column("Date", style="cyan")
        table.add_column("Est. 1RM", justify="right", style="blue")
        for p in series:
            table.add_row(p.date, f"{p.estimated_1rm:.1f}")
        console.print(table)
        return

    prs = personal_records(records.workouts)
    best = best_1rms(records.workouts)

    if json_output:
        output_json({
            "success": True,
            "command": "lifts",
            "data": {
                "lifts": [
                    {
                        "exercise": name,
                        "pr_weight_lbs": pr.weight_lbs,
                        "pr_date": pr.date,
                        "estimated_1rm": round(best.get(name, 0.0), 1),
                    }
                    for name, pr in sorted(prs.items())
                ]
            },
            "human_summary": f"{len(prs)} exercises with records",
        })
        return

    if not prs:
        console.print("No sets with weight and reps logged")
        return

    table = Table(title="Personal Records")
    table.add_column("Exercise", style="cyan")
    table.add_column("Best Set (lb)", justify="right")
    table.add_column("Date")
    table.add_column("Est. 1RM", justify="right", style="blue")
    for name, pr in sorted(prs.items()):
        table.add_row(name, f"{pr.weight_lbs:g}", pr.date, f"{best.get(name, 0.0):.0f}")
    console.print(table)


@app.command()
def volume(
    data_path: Optional[Path] = DataOption,
    json_output: bool = JsonOption,
) -> None:
    """Show training volume (lb × reps) per ISO week."""
    from liftlog.tracking.training import weekly_volume

    records = load_records("volume", data_path, json_output)
    weeks = weekly_volume(records.workouts)

    if json_output:
        output_json({
            "success": True,
            "command": "volume",
            "data": {"weeks": {k: round(v, 0) for k, v in weeks.items()}},
            "human_summary": f"{len(weeks)} weeks of training",
        })
        return

    table = Table(title="Weekly Volume")
    table.add_column("Week", style="cyan")
    table.add_column("lb × reps", justify="right")
    for key, total in weeks.items():
        table.add_row(key, f"{total:,.0f}")
    console.print(table)


@app.command()
def readiness(
    data_path: Optional[Path] = DataOption,
    today: Optional[str] = TodayOption,
    json_output: bool = JsonOption,
) -> None:
    """Show per-muscle-group readiness."""
    from liftlog.tracking.readiness import most_fatigued, readiness_report

    cfg = get_settings().readiness
    records = load_records("readiness", data_path, json_output)
    report = readiness_report(
        records.workouts,
        parse_day(today),
        decay_rate_per_day=cfg.decay_rate_per_day,
        fresh_threshold=cfg.fresh_threshold,
        moderate_threshold=cfg.moderate_threshold,
    )

    if json_output:
        output_json({
            "success": True,
            "command": "readiness",
            "data": {
                group: {"score": round(score, 2), "status": status}
                for group, (score, status) in report.items()
            },
            "human_summary": ", ".join(f"{g}: {s}" for g, (_, s) in report.items()),
        })
        return

    colors = {"fresh": "green", "moderate": "yellow", "fatigued": "red"}
    table = Table(title="Muscle Readiness")
    table.add_column("Group", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Status")
    for group, (score, status) in report.items():
        color = colors[status]
        table.add_row(group, f"{score:.2f}", f"[{color}]{status}[/{color}]")
    console.print(table)
    worst = most_fatigued({group: score for group, (score, _) in report.items()})
    if worst is not None:
        console.print(f"Most fatigued: [bold]{worst}[/bold]")


@app.command()
def streak(
    data_path: Optional[Path] = DataOption,
    today: Optional[str] = TodayOption,
    json_output: bool = JsonOption,
) -> None:
    """Show the current training streak, today's volume and earned badges."""
    from liftlog.tracking.training import award_badges, daily_volume, training_streak

    records = load_records("streak", data_path, json_output)
    day = parse_day(today)
    days = training_streak(records.workouts, day)
    badges = award_badges(records.workouts, today=day)
    today_volume = daily_volume(records.workouts, day.isoformat())

    if json_output:
        output_json({
            "success": True,
            "command": "streak",
            "data": {
                "streak_days": days,
                "today_volume": round(today_volume, 0),
                "badges": badges,
            },
            "human_summary": f"{days}-day streak",
        })
    else:
        console.print(f"[bold]{days}-day streak[/bold]")
        console.print(f"Today's volume: {today_volume:,.0f} (lb × reps)")
        for label in badges.values():
            console.print(f"  [magenta]{label}[/magenta]")


@app.command()
def goals(
    data_path: Optional[Path] = DataOption,
    today: Optional[str] = TodayOption,
    json_output: bool = JsonOption,
) -> None:
    """Show progress towards weight and lift goals."""
    from liftlog.tracking.goals import evaluate_goals

    records = load_records("goals", data_path, json_output)
    if records.goal.is_empty:
        fail("goals", "No goals set yet", json_output, "yellow")

    summary = evaluate_goals(
        records.goal, records.settings, records.metrics, records.workouts, parse_day(today)
    )

    if json_output:
        data: dict = {"lifts": [], "alerts": summary.alerts}
        if summary.weight is not None:
            w = summary.weight
            data["weight"] = {
                "start_weight_lbs": w.start_weight,
                "current_weight_lbs": w.current_weight,
                "target_weight_lbs": w.target_weight,
                "percent_complete": round(w.percent_complete, 1),
                "days_remaining": w.days_remaining,
                "past_due": w.past_due,
            }
        for lift in summary.lifts:
            data["lifts"].append({
                "lift": lift.lift,
                "current_1rm": round(lift.current_1rm, 1),
                "target_1rm": lift.target_1rm,
                "percent_complete": round(lift.percent_complete, 1),
            })
        output_json({
            "success": True,
            "command": "goals",
            "data": data,
            "human_summary": f"{len(summary.lifts) + (summary.weight is not None)} goals evaluated",
        })
        return

    if summary.weight is not None:
        w = summary.weight
        console.print(
            f"[bold]Weight:[/bold] {w.current_weight:g} → {w.target_weight:g} lb "
            f"({w.percent_complete:.0f}%)"
        )
        if w.days_remaining is not None:
            left = "past due" if w.past_due else f"{w.days_remaining} days left"
            console.print(f"  [dim]{w.target_date}: {left}[/dim]")
    for lift in summary.lifts:
        console.print(
            f"[bold]{lift.lift}:[/bold] {lift.current_1rm:.0f} → {lift.target_1rm:g} lb "
            f"({lift.percent_complete:.0f}%)"
        )
    for alert in summary.alerts:
        console.print(f"[yellow]{alert}[/yellow]")


@app.command()
def plan(
    goal: Optional[str] = typer.Option(None, "--goal", "-g", help="strength, loss or general"),
    equipment: Optional[str] = typer.Option(
        None, "--equipment", "-e", help="barbell, dumbbells or minimal"
    ),
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Training days per week"),
    today: Optional[str] = TodayOption,
    json_output: bool = JsonOption,
) -> None:
    """Generate this week's training plan (stable for the whole ISO week)."""
    from liftlog.planning.weekly import generate_weekly_plan, plan_day_for

    defaults = get_settings().defaults
    day = parse_day(today)
    year, week, _ = day.isocalendar()
    weekly = generate_weekly_plan(
        goal or defaults.plan_goal,
        equipment or defaults.plan_equipment,
        days or defaults.plan_days,
        year=year,
        week=week,
    )
    todays = plan_day_for(weekly, day)

    if json_output:
        output_json({
            "success": True,
            "command": "plan",
            "data": {
                "goal": weekly.goal,
                "equipment": weekly.equipment,
                "week": f"{weekly.year}-{weekly.week:02d}",
                "days": [
                    {
                        "title": d.title,
                        "sets": [{"name": s.name, "reps": s.reps, "rpe": s.rpe} for s in d.sets],
                    }
                    for d in weekly.days
                ],
                "today": todays.title,
            },
            "human_summary": f"{len(weekly.days)}-day {weekly.goal} plan",
        })
        return

    for d in weekly.days:
        marker = " [green](today)[/green]" if d is todays else ""
        console.print(f"[bold]{d.title}[/bold]{marker}")
        console.print("  " + " • ".join(s.describe() for s in d.sets))


@app.command()
def template(
    name: str = typer.Argument(..., help="fullbody, ppl, fives or phul"),
    json_output: bool = JsonOption,
) -> None:
    """Show the sets of a preset workout."""
    from liftlog.planning.weekly import WORKOUT_TEMPLATES, workout_template

    sets = workout_template(name)
    if sets is None:
        fail(
            "template",
            f"Unknown template '{name}'. Choose from: {', '.join(WORKOUT_TEMPLATES)}",
            json_output,
        )

    if json_output:
        output_json({
            "success": True,
            "command": "template",
            "data": {
                "template": name.lower(),
                "sets": [{"name": s.name, "reps": s.reps, "rpe": s.rpe} for s in sets],
            },
            "human_summary": f"{len(sets)} exercises",
        })
        return

    table = Table(title=f"Template: {name.lower()}")
    table.add_column("Exercise", style="cyan")
    table.add_column("Reps", justify="right")
    table.add_column("RPE", justify="right")
    for s in sets:
        table.add_row(s.name, str(s.reps), str(s.rpe) if s.rpe is not None else "-")
    console.print(table)


# ============================================================================
# Configuration
# ============================================================================


@config_app.command("show")
def config_show(json_output: bool = JsonOption) -> None:
    """Print the active configuration."""
    data = get_settings().to_dict()
    if json_output:
        output_json({"success": True, "command": "config show", "data": data})
        return
    for section, values in data.items():
        console.print(f"[bold]{section}[/bold]")
        for key, value in values.items():
            console.print(f"  {key}: {value}")


@config_app.command("init")
def config_init(
    path: Optional[Path] = typer.Option(None, "--path", help="Where to write config.yaml"),
) -> None:
    """Write the current (default) configuration to config.yaml."""
    settings = get_settings()
    settings.save(path)
    console.print(f"[green]Configuration written[/green] {path or '~/.liftlog/config.yaml'}")


if __name__ == "__main__":
    app()
