"""CLI entrypoints for AnomaNet."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from anomanet.config import load_settings
from anomanet.engine import progression
from anomanet.game import Game
from anomanet.logging import configure_logging, get_logger, request_context
from anomanet.storage import create_store

app = typer.Typer(add_completion=False, help="AnomaNet game state administration")
logger = get_logger(__name__)


def _game() -> Game:
    settings = load_settings()
    configure_logging(settings.log_level)
    return Game.create(create_store(settings), settings)


@app.command()
def seed(
    user: str | None = typer.Option(None, "--user", "-u", help="Also grant the starter evidence to this user"),
) -> None:
    """Write the starter cases into the available pool."""

    game = _game()
    with request_context(user_id=user or "-", action="seed"):
        seeded = asyncio.run(game.seed(user))
    typer.echo(f"Seeded {len(seeded)} cases: {', '.join(c.id for c in seeded)}")


@app.command()
def status(user: str = typer.Argument(..., help="User id to inspect")) -> None:
    """Print a user's cases, evidence, companion progression and channels."""

    game = _game()

    async def gather():  # type: ignore[no-untyped-def]
        active, history = await game.cases.get_user_cases(user)
        items = await game.evidence.get_all_evidence(user)
        relationship = await game.relationships.get_or_create_relationship_state(user, game.entity_id)
        channels = await game.channels.get_or_create_channel_state(user)
        return active, history, items, relationship, channels

    with request_context(user_id=user, action="status"):
        active, history, items, relationship, channels = asyncio.run(gather())

    console = Console()

    cases = Table(title="Cases")
    cases.add_column("id")
    cases.add_column("title")
    cases.add_column("status")
    cases.add_column("outcome")
    for case in [*active, *history]:
        cases.add_row(case.id, case.title, case.status, case.outcome or "")
    console.print(cases)

    unexamined = sum(1 for e in items if not e.examined)
    console.print(f"Evidence: {len(items)} items, {unexamined} unexamined")

    mode = progression.get_mode_for_level(relationship.level)
    console.print(
        f"Companion: {mode}{progression.get_display_name(relationship)} "
        f"level {relationship.level} ({relationship.phase}), "
        f"{relationship.xp}/{relationship.xp_to_next_level} XP, path {relationship.relationship_path}"
    )

    table = Table(title="Channels")
    table.add_column("channel")
    table.add_column("state")
    for channel in channels.channels:
        state = "hidden" if channel.hidden else ("locked" if channel.locked else "open")
        table.add_row(f"#{channel.id}", state)
    console.print(table)


if __name__ == "__main__":
    app()
