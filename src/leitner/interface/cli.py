"""leitner CLI — run the server and drive a practice session against it."""

import json
import logging
import os
import sys
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from leitner.application.config import resolve_config
from leitner.application.practice_service import PracticeService
from leitner.domain.constants import RETIRED_BUCKET
from leitner.domain.errors import DeckFormatError
from leitner.domain.models import AnswerDifficulty
from leitner.infrastructure.api_client import LeitnerApiError, LeitnerClient

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="leitner: Leitner-box spaced repetition trainer.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage leitner configuration.")
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

UrlOption = Annotated[
    str | None, typer.Option("--url", help="Server URL. Defaults to 'server_url' in config.")
]


@contextmanager
def _connect(url: str | None):
    """Yield a client for the configured server; exit 1 with a red message on API errors."""
    config = resolve_config({"server_url": url})
    try:
        with LeitnerClient(config.server_url, timeout=config.request_timeout) as client:
            yield client
    except LeitnerApiError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1) from e


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def serve(
    host: Annotated[str | None, typer.Option(help="Host to bind the server to.")] = None,
    port: Annotated[int | None, typer.Option(help="Port to bind the server to.")] = None,
    deck_file: Annotated[
        Path | None, typer.Option(help="YAML deck file. Defaults to the built-in sample deck.")
    ] = None,
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """[bold green]Start[/bold green] the scheduler HTTP server."""
    import uvicorn

    # Load the deck here so a bad config or deck fails before uvicorn starts
    try:
        config = resolve_config({"host": host, "port": port, "deck_file": deck_file})
        PracticeService.from_config(config)
    except (ValidationError, DeckFormatError) as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1) from e

    # The app factory resolves its own config; hand the deck over via env
    if config.deck_file:
        os.environ["LEITNER_DECK_FILE"] = str(config.deck_file)

    logging.getLogger().setLevel(config.log_level)
    uvicorn.run(
        "leitner.server:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        reload=reload,
    )


@app.command()
def practice(
    url: UrlOption = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List the cards due today."""
    with _connect(url) as client:
        session = client.fetch_practice_cards()

    if json_output:
        payload = {
            "day": session.day,
            "retired": session.retired,
            "cards": [{"front": c.front, "back": c.back} for c in session.cards],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(f"Day {session.day}: {len(session.cards)} card(s) due")
    if session.retired:
        typer.secho("All cards are retired. Nothing left to practice.", fg="green")
        return
    for card in session.cards:
        typer.echo(f"  {card.front}  ->  {card.back}")


@app.command()
def review(
    front: Annotated[str, typer.Argument(help="Front text of the card.")],
    back: Annotated[str, typer.Argument(help="Back text of the card.")],
    difficulty: Annotated[str, typer.Argument(help="wrong, hard or easy.")],
    url: UrlOption = None,
):
    """Record how well you answered a card."""
    try:
        outcome = AnswerDifficulty.from_name(difficulty)
    except ValueError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(2) from e

    with _connect(url) as client:
        result = client.submit_answer(front, back, outcome)

    new_bucket = result.get("newBucket")
    if new_bucket == RETIRED_BUCKET:
        typer.secho(f"Card retired from bucket {result.get('previousBucket')}.", fg="green")
    else:
        typer.echo(f"Moved from bucket {result.get('previousBucket')} to {new_bucket}.")


@app.command()
def hint(
    front: Annotated[str, typer.Argument(help="Front text of the card.")],
    back: Annotated[str, typer.Argument(help="Back text of the card.")],
    url: UrlOption = None,
):
    """Show the hint for a card."""
    with _connect(url) as client:
        typer.echo(client.fetch_hint(front, back))


@app.command()
def progress(
    url: UrlOption = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show learning progress statistics."""
    with _connect(url) as client:
        stats = client.fetch_progress()

    if json_output:
        typer.echo(json.dumps(asdict(stats), indent=2))
        return

    typer.echo(f"Active cards: {stats.total_flashcards}")
    typer.echo(f"Accuracy: {stats.accuracy_rate:.0%}")
    typer.echo("Bucket  Cards  Reviews")
    for index in sorted(set(stats.bucket_distribution) | set(stats.reviews_per_bucket)):
        cards = stats.bucket_distribution.get(index, 0)
        reviews = stats.reviews_per_bucket.get(index, 0)
        typer.echo(f"{index:>6}  {cards:>5}  {reviews:>7}")


@app.command("next-day")
def next_day(url: UrlOption = None):
    """Advance the learning day by one."""
    with _connect(url) as client:
        day = client.advance_day()
    typer.secho(f"Advanced to day {day}.", fg="green")


def _parse_difficulty(value: str) -> AnswerDifficulty:
    try:
        return AnswerDifficulty.from_name(value)
    except ValueError as e:
        # BadParameter makes typer.prompt ask again
        raise typer.BadParameter(str(e)) from e


@app.command()
def study(url: UrlOption = None):
    """Work through today's due cards one at a time."""
    with _connect(url) as client:
        session = client.fetch_practice_cards()
        typer.echo(f"Day {session.day}")

        if session.retired:
            typer.secho("Congratulations! You have mastered all flashcards!", fg="green")
            return

        if not session.cards:
            typer.echo("No cards scheduled for practice today!")

        total = len(session.cards)
        for number, card in enumerate(session.cards, start=1):
            typer.echo(f"\nCard {number} of {total}")
            typer.secho(card.front, bold=True)

            if typer.confirm("Show hint?", default=False):
                try:
                    typer.echo(f"Hint: {client.fetch_hint(card.front, card.back)}")
                except LeitnerApiError:
                    typer.secho("Could not load hint.", fg="yellow")

            typer.prompt("Press Enter to show the answer", default="", show_default=False)
            typer.echo(f"Answer: {card.back}")

            outcome = typer.prompt("Wrong, hard or easy?", value_proc=_parse_difficulty)
            client.submit_answer(card.front, card.back, outcome)

        if total:
            typer.secho("\nSession complete! No more cards to practice for today.", fg="green")

        if typer.confirm("Advance to the next day?", default=False):
            day = client.advance_day()
            typer.secho(f"Advanced to day {day}.", fg="green")


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show():
    """Display the resolved configuration as JSON."""
    config = resolve_config()
    d = config.model_dump(mode="json")
    typer.echo(json.dumps(d, indent=2))
