"""repetita CLI: study sessions, review queue, statistics and review previews."""

import asyncio
import json
import logging
import sys
from collections.abc import Coroutine
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer
from pydantic import ValidationError

from repetita.application.config import AppConfig, resolve_config
from repetita.application.factory import get_study_service
from repetita.application.scheduler import preview_intervals, preview_next_review
from repetita.domain.models import MemoryRecord, ReviewResponse
from repetita.domain.stats.ports import RecordSourceError

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="repetita: SM-2 spaced-repetition scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage repetita configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}

RecordsOption = Annotated[
    Path | None,
    typer.Option("--records", help="YAML records snapshot. Defaults to config or ./records.yaml."),
]
DeckOption = Annotated[str | None, typer.Option(help="Deck name. Defaults to every deck.")]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON.")]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    """Resolve config, reporting invalid settings from any layer as exit code 1."""
    try:
        return resolve_config(overrides)
    except ValidationError as e:
        typer.secho(f"Invalid configuration: {e}", fg="red", err=True)
        raise typer.Exit(1)


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a service call, turning source and lookup failures into exit code 1."""
    try:
        return asyncio.run(coro)
    except RecordSourceError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1)
    except KeyError as e:
        typer.secho(f"Card not found: {e.args[0]}", fg="red", err=True)
        raise typer.Exit(1)


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    return value


def record_to_dict(record: MemoryRecord) -> dict[str, Any]:
    return _jsonable(asdict(record))


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
):
    """Global settings for repetita."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.getLogger().setLevel(_LOG_LEVELS.get(verbose, logging.DEBUG))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def session(
    records: RecordsOption = None,
    deck: DeckOption = None,
    max_new: Annotated[int | None, typer.Option(min=0, help="Maximum new cards.")] = None,
    max_review: Annotated[int | None, typer.Option(min=0, help="Maximum due cards.")] = None,
    json_output: JsonOption = False,
):
    """Build a [bold green]study session[/bold green]: due cards first, then new cards."""
    config = _resolve_with_overrides(
        records_path=records, default_deck=deck, max_new=max_new, max_review=max_review
    )
    service = get_study_service(config)
    plan = _run(
        service.get_session(
            _now(),
            deck=config.default_deck,
            max_new=config.max_new,
            max_review=config.max_review,
        )
    )

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "cards": plan.cards,
                    "due": plan.due_queue,
                    "new": plan.new_queue,
                    "due_available": plan.due_available,
                    "new_available": plan.new_available,
                },
                indent=2,
            )
        )
        return

    if plan.is_empty:
        typer.secho("Nothing to study now.", fg="green")
        return

    typer.echo(
        f"Session: {len(plan.cards)} cards "
        f"({len(plan.due_queue)}/{plan.due_available} due, "
        f"{len(plan.new_queue)}/{plan.new_available} new)"
    )
    for card_id in plan.due_queue:
        typer.echo(f"  due  {card_id}")
    for card_id in plan.new_queue:
        typer.echo(f"  new  {card_id}")


@app.command("queue")
def queue(
    records: RecordsOption = None,
    deck: DeckOption = None,
    json_output: JsonOption = False,
):
    """List every due card, earliest due first."""
    from repetita.application.stats import estimate_study_minutes

    config = _resolve_with_overrides(records_path=records, default_deck=deck)
    service = get_study_service(config)
    due = _run(service.get_review_queue(_now(), deck=config.default_deck))
    minutes = estimate_study_minutes(len(due))

    if json_output:
        typer.echo(json.dumps({"due": due, "estimated_minutes": minutes}, indent=2))
        return

    typer.echo(f"Due cards: {len(due)}  Estimated time: {minutes:g} min")
    for card_id in due:
        typer.echo(f"  {card_id}")


@app.command()
def stats(
    records: RecordsOption = None,
    deck: DeckOption = None,
    json_output: JsonOption = False,
):
    """Show aggregate statistics for a deck."""
    config = _resolve_with_overrides(records_path=records, default_deck=deck)
    service = get_study_service(config)
    summary = _run(service.get_statistics(_now(), deck=config.default_deck))
    data = _jsonable(asdict(summary))

    if json_output:
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(
        f"Cards: {summary.total_cards}  Due: {summary.due_cards}"
        f"  New: {summary.new_cards}  Scheduled: {summary.scheduled_cards}"
    )
    typer.echo(
        f"Reviews: {summary.total_reviews}  Success rate: {summary.success_rate:.0%}"
        f"  Average ease: {summary.average_ease:.2f}"
    )
    typer.echo(f"Estimated study time: {summary.estimated_minutes:g} min")


@app.command()
def review(
    card_id: Annotated[str, typer.Argument(help="Card id to review.")],
    response: Annotated[
        ReviewResponse,
        typer.Argument(help="Grade: again, good or easy.", case_sensitive=False),
    ],
    records: RecordsOption = None,
    deck: DeckOption = None,
):
    """Apply a review and print the updated record as JSON.

    The snapshot file is not modified; store the printed record yourself.
    """
    config = _resolve_with_overrides(records_path=records, default_deck=deck)
    service = get_study_service(config)
    updated = _run(service.review_card(card_id, response, _now(), deck=config.default_deck))
    typer.echo(json.dumps({"id": card_id, **record_to_dict(updated)}, indent=2))


@app.command()
def preview(
    card_id: Annotated[str, typer.Argument(help="Card id to preview.")],
    records: RecordsOption = None,
    deck: DeckOption = None,
    json_output: JsonOption = False,
):
    """Show when a card would be due next for each possible grade."""
    config = _resolve_with_overrides(records_path=records, default_deck=deck)
    service = get_study_service(config)
    record = _run(service.get_record(card_id, deck=config.default_deck))
    now = _now()

    cap = config.max_interval_days
    intervals = preview_intervals(record, now, max_interval_days=cap)
    due_dates = {
        response: preview_next_review(record, response, now, max_interval_days=cap)
        for response in ReviewResponse
    }

    if json_output:
        typer.echo(
            json.dumps(
                {
                    response.value: {
                        "interval_days": intervals[response],
                        "next_review_at": due_dates[response].isoformat(),
                    }
                    for response in ReviewResponse
                },
                indent=2,
            )
        )
        return

    for response in ReviewResponse:
        typer.echo(
            f"{response.display_name:<6} {intervals[response]:>6}d  "
            f"{due_dates[response]:%Y-%m-%d %H:%M}  {response.description}"
        )


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display final resolved configuration."""
    config = _resolve_with_overrides()
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))
