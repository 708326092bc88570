"""cadence CLI: record attempts, edit history and inspect review schedules."""

import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from cadence.application.config import AppConfig, log_level, resolve_config
from cadence.application.factory import get_problem_service
from cadence.application.service import ProblemService
from cadence.domain.errors import CadenceError, ConfigError
from cadence.domain.models import Confidence, Difficulty, Problem
from cadence.infrastructure.adapters.records import ProblemRecord

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="cadence: spaced-repetition scheduling for practice problems.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

attempt_app = typer.Typer(help="Edit a problem's attempt history.", no_args_is_help=True)
app.add_typer(attempt_app, name="attempt")

config_app = typer.Typer(help="Manage cadence configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    store: Annotated[
        Path | None, typer.Option("--store", help="Problem store file (.json or .yaml).")
    ] = None,
):
    """Global settings for cadence."""
    ctx.ensure_object(dict)
    ctx.obj["store_path"] = store
    ctx.obj["verbose_bonus"] = verbose


def _run(action):
    """Run ``action`` and turn host errors into a red message and exit code 1."""
    try:
        return action()
    except CadenceError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1)


def _config(ctx: typer.Context) -> AppConfig:
    """Resolve configuration with CLI overrides and apply its log level."""
    obj = ctx.obj or {}
    bonus = obj.get("verbose_bonus", 0)

    def resolve() -> AppConfig:
        try:
            return resolve_config(
                {"store_path": obj.get("store_path"), "verbose": 1 + bonus if bonus else None}
            )
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    config = _run(resolve)
    logging.getLogger("cadence").setLevel(log_level(config.verbose))
    return config


def _service(ctx: typer.Context) -> ProblemService:
    config = _config(ctx)
    return _run(lambda: get_problem_service(config))


def _echo_summary(problem: Problem) -> None:
    leech = "  [LEECH]" if problem.is_leech else ""
    confidence = problem.last_confidence.value if problem.last_confidence else "-"
    typer.echo(
        f"{problem.title or problem.url}: stage {problem.srs_stage}, "
        f"last {confidence}, next review {problem.next_review_date or '-'}{leech}"
    )


# ---------------------------------------------------------------------------
# Problem commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="Problem URL.")],
    title: Annotated[str, typer.Option(help="Display title.")] = "",
    difficulty: Annotated[Difficulty | None, typer.Option(help="Problem difficulty.")] = None,
    topic: Annotated[str | None, typer.Option(help="Topic tag.")] = None,
    pattern: Annotated[str | None, typer.Option(help="Pattern tag.")] = None,
):
    """Start tracking a problem."""
    service = _service(ctx)
    problem = _run(lambda: service.add_problem(url, title, difficulty, topic, pattern))
    typer.secho(f"Tracking {problem.url}", fg="green")


@app.command()
def suggest(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="Problem URL.")],
    minutes: Annotated[int, typer.Argument(help="Solve time in minutes.")],
):
    """Preview the confidence a solve time would earn."""
    service = _service(ctx)
    confidence = _run(lambda: service.suggest_confidence(url, minutes * 60))
    typer.echo(confidence.value.upper())


@app.command()
def record(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="Problem URL.")],
    minutes: Annotated[int, typer.Argument(help="Solve time in minutes.")],
    confidence: Annotated[
        Confidence | None,
        typer.Option(help="Override confidence. Derived from the solve time if omitted."),
    ] = None,
):
    """[bold green]Record[/bold green] a new attempt and schedule the next review."""
    service = _service(ctx)
    problem = _run(lambda: service.record_attempt(url, minutes * 60, confidence))
    _echo_summary(problem)


@app.command()
def reset(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="Problem URL.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Reset a problem to Not Started, deleting all attempts."""
    if not force:
        typer.confirm(f"Reset {url}? This deletes all attempts and progress.", abort=True)
    service = _service(ctx)
    problem = _run(lambda: service.reset(url))
    typer.secho(f"Reset {problem.url}", fg="yellow")


@app.command()
def recalc(
    ctx: typer.Context,
    url: Annotated[str | None, typer.Argument(help="Problem URL.")] = None,
    all_problems: Annotated[
        bool, typer.Option("--all", help="Replay every stored problem.")
    ] = False,
):
    """Rebuild state by replaying attempt history."""
    service = _service(ctx)
    if all_problems:
        problems = _run(service.recalculate_all)
        typer.secho(f"Recalculated {len(problems)} problems.", fg="green")
        return
    if url is None:
        typer.secho("Pass a problem URL or --all.", fg="yellow")
        raise typer.Exit(2)
    _echo_summary(_run(lambda: service.recalculate(url)))


@app.command()
def show(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="Problem URL.")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show a problem's state and attempt history."""
    service = _service(ctx)
    problem = _run(lambda: service.get_problem(url))

    if json_output:
        typer.echo(json.dumps(ProblemRecord.from_domain(problem).dump(), indent=2))
        return

    _echo_summary(problem)
    typer.echo(
        f"Lapses: {problem.lapses}  Streak: {problem.consecutive_successes}"
        f"  Status: {problem.status.value}"
    )
    if not problem.attempts:
        typer.echo("No attempts yet.")
    for i, attempt in enumerate(problem.attempts):
        confidence = attempt.confidence.value if attempt.confidence else "-"
        typer.echo(
            f"  [{i}] {attempt.date:%Y-%m-%d %H:%M}  {attempt.time // 60} min  "
            f"{confidence:<8}  stage {attempt.stage}  interval {attempt.interval}d"
        )


# ---------------------------------------------------------------------------
# Attempt subgroup
# ---------------------------------------------------------------------------


@attempt_app.command("add")
def attempt_add(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="Problem URL.")],
    minutes: Annotated[int, typer.Argument(help="Solve time in minutes.")],
    when: Annotated[datetime | None, typer.Option(help="When the attempt happened.")] = None,
    confidence: Annotated[Confidence | None, typer.Option(help="Override confidence.")] = None,
):
    """Add a past attempt and replay the history."""
    service = _service(ctx)
    _echo_summary(_run(lambda: service.add_attempt(url, minutes * 60, when, confidence)))


@attempt_app.command("edit")
def attempt_edit(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="Problem URL.")],
    index: Annotated[int, typer.Argument(help="Attempt number as listed by 'show'.")],
    minutes: Annotated[int | None, typer.Option(help="New solve time in minutes.")] = None,
    when: Annotated[datetime | None, typer.Option(help="New attempt date.")] = None,
    confidence: Annotated[Confidence | None, typer.Option(help="New confidence.")] = None,
):
    """Edit a past attempt and replay the history."""
    service = _service(ctx)
    changes: dict = {"when": when}
    if minutes is not None:
        changes["elapsed_seconds"] = minutes * 60
    if confidence is not None:
        changes["confidence"] = confidence
    _echo_summary(_run(lambda: service.edit_attempt(url, index, **changes)))


@attempt_app.command("delete")
def attempt_delete(
    ctx: typer.Context,
    url: Annotated[str, typer.Argument(help="Problem URL.")],
    index: Annotated[int, typer.Argument(help="Attempt number as listed by 'show'.")],
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation.")] = False,
):
    """Delete a past attempt and replay the history."""
    if not force:
        typer.confirm(f"Delete attempt #{index}?", abort=True)
    service = _service(ctx)
    _echo_summary(_run(lambda: service.delete_attempt(url, index)))


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration and the effective schedule settings."""
    config = _config(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    d["effective"] = asdict(_run(lambda: get_problem_service(config).settings()))
    typer.echo(json.dumps(d, indent=2))
