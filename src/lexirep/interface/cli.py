"""lexirep CLI: review sessions, due counts, statistics and configuration."""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Annotated

import typer

from lexirep.application.config import SrsSettings, resolve_config
from lexirep.application.queue_builder import build_review_queue, cards_in_book
from lexirep.application.scheduler import SM2Scheduler
from lexirep.application.session import ProcessResult, SessionManager
from lexirep.application.stats import DeckStatsService, due_now, due_within_days
from lexirep.domain.errors import ConfigurationError, InvalidSessionStateError, LexirepError
from lexirep.domain.models import Response, VocabularyCard
from lexirep.infrastructure.deck_file import YamlDeckRepository

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="lexirep: spaced-repetition review for your vocabulary decks.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage lexirep configuration.")
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

RESPONSE_KEYS = {"h": Response.HARD, "g": Response.GOOD, "e": Response.EASY}

DeckArg = Annotated[Path, typer.Argument(help="Path to the YAML deck file.")]
BookOpt = Annotated[
    str | None, typer.Option("--book", help="Only include cards from this book id.")
]


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Use -vv for debug logging."
        ),
    ] = 1,
):
    """Global settings for lexirep."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose >= 2:
        logging.getLogger("lexirep").setLevel(logging.DEBUG)


def _settings(**overrides) -> SrsSettings:
    try:
        return resolve_config(overrides)
    except ConfigurationError as e:
        typer.secho(f"Invalid configuration: {e}", fg="red", err=True)
        raise typer.Exit(2) from None


def _load(deck: Path) -> tuple[YamlDeckRepository, list[VocabularyCard]]:
    repo = YamlDeckRepository(deck)
    try:
        return repo, repo.load_cards()
    except LexirepError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1) from None


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def review(
    deck: DeckArg,
    limit: Annotated[
        int | None, typer.Option(help="Maximum cards this session. Defaults to config.")
    ] = None,
    response: Annotated[
        Response | None,
        typer.Option(
            case_sensitive=False,
            help="Apply one response to every card (non-interactive mode).",
        ),
    ] = None,
    load_balance: Annotated[
        bool | None,
        typer.Option("--load-balance/--no-load-balance", help="Spread due dates across days."),
    ] = None,
    book: BookOpt = None,
):
    """[bold green]Review[/bold green] the cards that are due now."""
    settings = _settings(load_balance=load_balance, session_size=limit)
    repo, cards = _load(deck)

    queue = build_review_queue(cards, limit=settings.session_size, book_id=book)
    if not queue.queue:
        typer.secho("No cards due.", fg="green")
        return

    manager = SessionManager(SM2Scheduler(settings))
    session = manager.start(queue.queue)
    typer.echo(f"Reviewing {session.total_cards} of {queue.total_due} due cards.")

    updated: dict[int, VocabularyCard] = {}
    for position, card in enumerate(queue.queue):
        chosen = response or _prompt_response(card)
        if chosen is None:
            manager.end()
            break

        result = _process_or_restart(manager, card, chosen, queue.queue[position:])
        updated[id(card)] = result.updated_card
        schedule = result.updated_card.schedule
        typer.echo(
            f"  {card.word}: {chosen.value} -> next in {schedule.interval} day(s) "
            f"(EF {schedule.ease / 100:.2f})"
        )
        if result.session_complete:
            break

    repo.save_cards([updated.get(id(c), c) for c in cards])
    typer.secho(f"Reviewed {len(updated)} card(s).", fg="green")


def _prompt_response(card: VocabularyCard) -> Response | None:
    typer.echo("")
    typer.secho(card.word, bold=True)
    if card.pronunciation:
        typer.echo(f"  [{card.pronunciation}]")
    typer.prompt("Press Enter to reveal", default="", show_default=False)
    for meaning in card.meanings:
        typer.echo(f"  - {meaning}")

    while True:
        raw = typer.prompt("[h]ard / [g]ood / [e]asy / [q]uit").strip().lower()
        if raw == "q":
            return None
        if raw[:1] in RESPONSE_KEYS:
            return RESPONSE_KEYS[raw[:1]]
        typer.secho("Please answer h, g, e or q.", fg="yellow")


def _process_or_restart(
    manager: SessionManager,
    card: VocabularyCard,
    response: Response,
    remaining: list[VocabularyCard],
) -> ProcessResult:
    """Process a review, starting a fresh session over `remaining` if none is active."""
    try:
        return manager.process(card, response)
    except InvalidSessionStateError:
        logger.warning(f"No active session; restarting with {len(remaining)} remaining cards")
        manager.start(remaining)
        return manager.process(card, response)


@app.command()
def due(
    deck: DeckArg,
    days: Annotated[int, typer.Option(help="Also count cards due within N days.")] = 7,
    book: BookOpt = None,
):
    """Show how many cards are due."""
    _, cards = _load(deck)
    cards = cards_in_book(cards, book)
    typer.echo(f"Due now: {len(due_now(cards))}")
    typer.echo(f"Due within {days} day(s): {due_within_days(cards, days)}")


@app.command()
def stats(
    deck: DeckArg,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Summarize a deck: maturity, daily load and SM-2 distribution."""
    settings = _settings()
    repo, cards = _load(deck)
    report = DeckStatsService(repo, settings).summarize(cards)

    if json_output:
        data = asdict(report)
        data["daily_load"]["total"] = report.daily_load.total
        typer.echo(json.dumps(data, indent=2))
        return

    c = report.collection
    typer.echo(f"Cards: {c.total} (new {c.new}, learning {c.learning}, mature {c.mature})")
    typer.echo(f"Average ease: {c.average_ease / 100:.2f}  Average interval: {c.average_interval}d")
    typer.echo(f"Due today: {report.due_today}  Due this week: {report.due_this_week}")
    load = report.daily_load
    typer.echo(f"Recommended today: {load.new_cards} new + {load.review_cards} review")

    b = report.breakdown
    if b.efactor_distribution:
        typer.echo("\nE-Factor distribution:")
        for label, count in b.efactor_distribution:
            typer.echo(f"  {label:>8}  {count}")
    if b.interval_distribution:
        typer.echo("\nInterval distribution:")
        for label, count in b.interval_distribution:
            typer.echo(f"  {label:>11}  {count}")


@app.command()
def preview(
    deck: DeckArg,
    word: Annotated[str, typer.Argument(help="Word to preview.")],
):
    """Show the next interval each response would give a card."""
    settings = _settings()
    _, cards = _load(deck)

    card = next((c for c in cards if c.word.lower() == word.lower()), None)
    if card is None:
        typer.secho(f"Word not found: {word}", fg="red", err=True)
        raise typer.Exit(1)

    manager = SessionManager(SM2Scheduler(settings))
    for resp, outcome in manager.preview(card).items():
        typer.echo(
            f"{resp.value:>5}: {outcome.display_text:<12} EF {outcome.efactor:.2f}  rep {outcome.repetition}"
        )


@config_app.command("show")
def config_show():
    """Print the resolved configuration as JSON."""
    config = _settings()
    typer.echo(json.dumps(config.model_dump(), indent=2))


if __name__ == "__main__":
    app()
