"""CLI entry point for distributor-permissions.

Invoked as::

    distributor-permissions [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m distributor_permissions.cli.main

Commands
--------
- check      Exit 0 if a distributor may operate at a location, 1 otherwise
- explain    Show which rule decided a permission check
- list       List the configured distributors and their rules
- locations  Show the configured location dataset
- matrix     Show every distributor's verdict for every known location
- version    Show version information
"""
from __future__ import annotations

import sys
from pathlib import Path

import click
import yaml
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from distributor_permissions.config import AppConfig, ConfigLoader
from distributor_permissions.distributors.distributor import (
    CyclicHierarchyError,
    Distributor,
)
from distributor_permissions.distributors.registry import (
    DistributorRegistry,
    RegistryConfigError,
)
from distributor_permissions.locations.loader import LocationLoadError, find_location
from distributor_permissions.locations.location import Location

console = Console()
err_console = Console(stderr=True)

_DEFAULT_CONFIG = Path("distributors.yaml")

_CONFIG_OPTION = click.option(
    "--config",
    "-c",
    "config_path",
    default=str(_DEFAULT_CONFIG),
    show_default=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to distributors.yaml.",
)


def _load(config_path: str) -> tuple[AppConfig, DistributorRegistry]:
    """Load settings and freeze the hierarchy, exiting with 2 on bad config."""
    path = Path(config_path)
    try:
        config = ConfigLoader().load(path)
        config.configure_logging()
        registry = config.build_registry(config_path=str(path))
    except (RegistryConfigError, CyclicHierarchyError, ValueError, yaml.YAMLError) as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(2)
    return config, registry


def _locations(config: AppConfig, config_path: str) -> list[Location]:
    """Load the configured dataset, exiting with 2 when it is unusable."""
    try:
        return config.load_locations(base_dir=Path(config_path).parent)
    except (FileNotFoundError, LocationLoadError, ValueError) as exc:
        err_console.print(f"[red]Location dataset error:[/red] {exc}")
        sys.exit(2)


def _resolve_location(
    config: AppConfig,
    config_path: str,
    city: str,
    province: str,
    country: str,
) -> Location | None:
    """Look the place up in the dataset, or build it directly when none is set."""
    if config.locations.path is None:
        try:
            return Location(city=city, province=province, country=country)
        except ValueError as exc:
            err_console.print(f"[red]Invalid location:[/red] {exc}")
            sys.exit(2)
    return find_location(_locations(config, config_path), city, province, country)


def _get_distributor(registry: DistributorRegistry, name: str) -> Distributor:
    try:
        return registry.get(name)
    except KeyError:
        err_console.print(
            f"[red]Unknown distributor:[/red] {name} "
            f"(known: {', '.join(registry.names()) or 'none'})"
        )
        sys.exit(2)


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="distributor-permissions")
def cli() -> None:
    """Distributor permissions CLI: region rules and inherited grants."""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from distributor_permissions import __version__

    console.print(
        Panel(
            f"[bold]distributor-permissions[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Hierarchical region permissions for distributors.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# check / explain
# ---------------------------------------------------------------------------


def _location_options(func):  # type: ignore[no-untyped-def]
    func = click.option("--country", required=True, help="Country name.")(func)
    func = click.option("--province", required=True, help="Province or state name.")(func)
    func = click.option("--city", required=True, help="City name.")(func)
    return func


@cli.command(name="check")
@click.argument("distributor_name")
@_location_options
@_CONFIG_OPTION
def check_command(
    distributor_name: str,
    city: str,
    province: str,
    country: str,
    config_path: str,
) -> None:
    """Check whether DISTRIBUTOR_NAME may operate at a location."""
    config, registry = _load(config_path)
    distributor = _get_distributor(registry, distributor_name)
    location = _resolve_location(config, config_path, city, province, country)

    allowed = distributor.has_permission(location)
    status_str = "[green]ALLOWED[/green]" if allowed else "[red]DENIED[/red]"
    console.print(f"{distributor_name} @ {city}, {province}, {country}: {status_str}")
    sys.exit(0 if allowed else 1)


@cli.command(name="explain")
@click.argument("distributor_name")
@_location_options
@_CONFIG_OPTION
def explain_command(
    distributor_name: str,
    city: str,
    province: str,
    country: str,
    config_path: str,
) -> None:
    """Explain the permission decision for DISTRIBUTOR_NAME at a location."""
    config, registry = _load(config_path)
    distributor = _get_distributor(registry, distributor_name)
    location = _resolve_location(config, config_path, city, province, country)

    decision = distributor.explain(location)
    status_str = "[green]ALLOWED[/green]" if decision.allowed else "[red]DENIED[/red]"
    console.print(Panel(status_str, title="Permission Check", border_style="blue"))
    console.print(f"  Distributor: [cyan]{distributor_name}[/cyan]")
    console.print(f"  Location:    {location if location is not None else '[yellow]not found[/yellow]'}")
    console.print(f"  Match mode:  {distributor.match_mode.value}")
    console.print(f"  Reason:      {decision.reason}")
    if decision.matched_pattern:
        console.print(
            f"  Decided by:  [bold]{decision.distributor}[/bold] "
            f"pattern [magenta]{decision.matched_pattern}[/magenta]"
        )
    console.print(f"  Chain:       {' -> '.join(decision.chain)}")
    sys.exit(0 if decision.allowed else 1)


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


@cli.command(name="list")
@_CONFIG_OPTION
def list_command(config_path: str) -> None:
    """List the configured distributors and their rules."""
    _, registry = _load(config_path)

    if not len(registry):
        console.print("[yellow]No distributors configured.[/yellow]")
        return

    table = Table(title="Distributors", box=box.SIMPLE)
    table.add_column("Name", style="cyan")
    table.add_column("Parent", style="magenta")
    table.add_column("Includes", style="green")
    table.add_column("Excludes", style="red")
    for distributor in registry:
        summary = distributor.summary()
        table.add_row(
            distributor.name,
            str(summary["parent"] or "-"),
            ", ".join(summary["includes"]) or "-",  # type: ignore[arg-type]
            ", ".join(summary["excludes"]) or "-",  # type: ignore[arg-type]
        )
    console.print(table)


# ---------------------------------------------------------------------------
# locations
# ---------------------------------------------------------------------------


@cli.command(name="locations")
@click.option("--limit", "-n", default=50, show_default=True, type=int, help="Maximum rows to show.")
@_CONFIG_OPTION
def locations_command(limit: int, config_path: str) -> None:
    """Show the configured location dataset."""
    config, _ = _load(config_path)
    locations = _locations(config, config_path)

    table = Table(title=f"Locations ({len(locations)} total)", box=box.SIMPLE)
    table.add_column("City", style="cyan")
    table.add_column("Province")
    table.add_column("Country", style="magenta")
    table.add_column("Codes", style="dim")
    for location in locations[:limit]:
        codes = "/".join(
            c for c in (location.city_code, location.province_code, location.country_code) if c
        )
        table.add_row(location.city, location.province, location.country, codes)
    console.print(table)


# ---------------------------------------------------------------------------
# matrix
# ---------------------------------------------------------------------------


@cli.command(name="matrix")
@_CONFIG_OPTION
def matrix_command(config_path: str) -> None:
    """Show every distributor's verdict for every location in the dataset."""
    config, registry = _load(config_path)
    locations = _locations(config, config_path)
    distributors = list(registry)

    table = Table(title="Permission Matrix", box=box.SIMPLE)
    table.add_column("Location", style="cyan")
    for distributor in distributors:
        table.add_column(distributor.name, justify="center")
    for location in locations:
        cells = [
            "[green]yes[/green]" if d.has_permission(location) else "[red]no[/red]"
            for d in distributors
        ]
        table.add_row(str(location), *cells)
    console.print(table)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
