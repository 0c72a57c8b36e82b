"""Entry point for the step-pet progression simulator.

Usage:
    python main.py --main-pet Puppy --name Buddy --day 1200 --day 900
    python main.py --main-pet Kitten --challenge Duckling --day 5000 --day 5000
    python main.py --main-pet Bunny --day 800 --start 2026-03-01T08:00:00Z --verbose
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta

import click

from game.clock import parse_iso, utc_now
from game.config import GameSettings, load_config
from game.session import GameSession
from pets import AnimalKind, UnknownAnimalKindError


def _setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    fmt = "%(asctime)s — %(name)s — %(levelname)s — %(message)s"

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=fmt, handlers=handlers)


def _animal_kind(ctx: click.Context, param: click.Parameter, value: str | None) -> AnimalKind | None:
    if value is None:
        return None
    try:
        return AnimalKind.parse(value)
    except UnknownAnimalKindError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param) from e


def _start_time(ctx: click.Context, param: click.Parameter, value: str | None) -> datetime:
    if value is None:
        return utc_now()
    parsed = parse_iso(value)
    if parsed is None:
        raise click.BadParameter(f"Not an ISO timestamp: {value!r}", ctx=ctx, param=param)
    return parsed


class _SimClock:
    """Clock the simulator moves forward by hand."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, days: int = 1) -> None:
        self.now = self.now + timedelta(days=days)


def _summary_line(snap: dict) -> str:
    line = (
        f"{snap['date']}  steps {snap['today_steps']}/{snap['daily_quota']}"
        f"  wallet {snap['wallet']}  pets {', '.join(snap['owned']) or '-'}"
    )
    challenge = snap["challenge"]
    if challenge:
        line += (
            f"  challenge {challenge['kind']} {challenge['progress']}/{challenge['goal']}"
            f" ({challenge['days_remaining']}d left)"
        )
    if snap["cooling_down"]:
        line += f"  cooldown {', '.join(snap['cooling_down'])}"
    return line


@click.command()
@click.option("--main-pet", "main_pet", required=True, callback=_animal_kind, help="Starter animal, e.g. Puppy")
@click.option("--name", default="", help="Name for the main pet")
@click.option("--challenge", callback=_animal_kind, default=None, help="Animal to start an unlock challenge for")
@click.option("--day", "days", type=int, multiple=True, help="Steps walked on one day (repeatable)")
@click.option("--spend", type=int, default=0, help="Food to spend from the wallet at the end")
@click.option("--start", callback=_start_time, default=None, help="ISO timestamp of the first day")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.option("--config-dir", type=click.Path(), default=None, help="Config directory")
def main(
    main_pet: AnimalKind,
    name: str,
    challenge: AnimalKind | None,
    days: tuple[int, ...],
    spend: int,
    start: datetime,
    verbose: bool,
    config_dir: str | None,
) -> None:
    """Step Pet - simulate a few days of steps, quota and unlock challenges."""

    cfg = load_config(config_dir)
    settings = GameSettings.from_config(cfg)
    _setup_logging(verbose=verbose, log_file=settings.log_file)

    clock = _SimClock(start)
    session = GameSession(settings, clock=clock)
    session.start()

    if not session.select_main_pet(main_pet, name):
        click.echo(f"Could not adopt {main_pet.value} as the main pet.")
        sys.exit(1)

    if challenge is not None:
        if session.start_challenge(challenge):
            click.echo(f"Challenge started for {challenge.value}.")
        else:
            click.echo(f"Could not start a challenge for {challenge.value}.")

    for i, steps in enumerate(days):
        if i > 0:
            clock.advance()
            session.refresh()
        session.record_steps(steps)
        session.check_challenge_completion()
        click.echo(_summary_line(session.snapshot()))

    if spend:
        # Bank the last day's overflow so it can be spent today
        session.economy.process_overflow()
        ok = session.try_spend_food(spend)
        click.echo(f"Spend {spend}: {'ok' if ok else 'refused'} (wallet {session.ledger.wallet.value})")


if __name__ == "__main__":
    main()
