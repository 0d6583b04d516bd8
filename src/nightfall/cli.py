#!/usr/bin/env python
"""Resolve werewolf nights from the command line.

Usage:
    nightfall resolve scenario.yaml            # Resolve one night, print the outcome
    nightfall resolve scenario.yaml --seed 42  # Reproducible random picks
    nightfall roles                            # List the role catalog
    nightfall roles --team Wolf                # Only one team
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from nightfall.config import EngineConfig, load_engine_config
from nightfall.engine import GameEngine
from nightfall.events.night_events import NightActionResult
from nightfall.models.role import Team
from nightfall.storage import PersistenceError, load_scenario
from nightfall.validation.exceptions import DataIntegrityError, ValidationError

logger = logging.getLogger(__name__)


def _build_config(args: argparse.Namespace) -> EngineConfig:
    config = load_engine_config(args.config) if args.config else EngineConfig()
    updates = {}
    if args.roles:
        updates["roles_path"] = Path(args.roles)
    if args.rules:
        updates["rules_path"] = Path(args.rules)
    if getattr(args, "strict", False):
        updates["strict"] = True
    return config.model_copy(update=updates)


def _print_result(console: Console, result: NightActionResult, game_id: int, night: int) -> None:
    deaths = Table(title="Deaths")
    deaths.add_column("Player", style="bold red")
    deaths.add_column("Cause")
    deaths.add_column("Killer")
    deaths.add_column("Location")
    for death in result.deaths:
        deaths.add_row(death.player, death.cause, death.killer or "-", death.location or "-")

    results = Table(title="Results")
    results.add_column("Player", style="bold")
    results.add_column("Result")
    for line in result.results:
        results.add_row(line.player, line.result_message)

    console.print(Panel(
        result.explanation or "[dim]Nothing happened.[/dim]",
        title=f"Game {game_id} - Night {night}",
    ))
    if result.deaths:
        console.print(deaths)
    else:
        console.print("[green]No deaths tonight.[/green]")
    console.print(results)


async def run_resolve(args: argparse.Namespace, console: Console) -> int:
    config = _build_config(args)
    scenario = load_scenario(args.scenario)
    engine_catalog = config.load_catalog()
    repository = scenario.build_repository(engine_catalog)
    engine = GameEngine(repository, config=config, catalog=engine_catalog)

    seed = args.seed if args.seed is not None else scenario.seed
    result = await engine.calculate_night_actions(
        scenario.game_id,
        scenario.night,
        scenario.actions,
        seed=seed,
    )
    _print_result(console, result, scenario.game_id, scenario.night)
    return 0


def run_roles(args: argparse.Namespace, console: Console) -> int:
    catalog = _build_config(args).load_catalog()
    roles = catalog.all_roles()
    if args.team:
        roles = [role for role in roles if role.team == Team(args.team)]

    table = Table(title="Roles")
    table.add_column("Id", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Team")
    table.add_column("Moves")
    table.add_column("Charges", justify="right")
    table.add_column("Input")
    for role in roles:
        table.add_row(
            str(role.id),
            role.name,
            role.team.value,
            "yes" if role.moves else "no",
            str(role.default_charges) if role.has_charges else "-",
            role.input_requirements.type.value,
        )
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nightfall",
        description="Nightfall - werewolf night action resolution",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Engine config file (YAML or JSON)",
    )
    parser.add_argument(
        "--roles",
        type=str,
        default=None,
        help="Role catalog document (default: packaged roles.yaml)",
    )
    parser.add_argument(
        "--rules",
        type=str,
        default=None,
        help="Rule table document (default: packaged rules.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Debug logging",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    resolve = commands.add_parser("resolve", help="Resolve one night from a scenario file")
    resolve.add_argument("scenario", help="Scenario file (YAML or JSON)")
    resolve.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed (overrides the scenario's seed)",
    )
    resolve.add_argument(
        "--strict",
        action="store_true",
        help="Fail on any runtime validation error",
    )

    roles = commands.add_parser("roles", help="List the role catalog")
    roles.add_argument(
        "--team",
        choices=[team.value for team in Team],
        default=None,
        help="Only list roles of one team",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )
    console = Console()

    try:
        if args.command == "resolve":
            return asyncio.run(run_resolve(args, console))
        return run_roles(args, console)
    except (DataIntegrityError, PersistenceError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        return 2
    except ValidationError as e:
        console.print(f"[bold red]{e}[/bold red]")
        return 3


if __name__ == "__main__":
    sys.exit(main())
