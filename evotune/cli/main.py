"""evotune CLI — run the tuner server and inspect persisted state."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from evotune.config import TunerConfig, load_tuner_config, settings
from evotune.evolution.store import StateStore
from evotune.exceptions import ConfigError, StorageError

console = Console()

app = typer.Typer(
    name="evotune",
    help="evotune -- online (1+1) evolutionary parameter tuning.",
    no_args_is_help=True,
)


def _load_config(config: Path | None) -> TunerConfig:
    try:
        return load_tuner_config(config or settings.config_path)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)


@app.command("serve")
def serve(
    config: Path = typer.Option(None, "--config", "-c", help="The configuration file"),
    data_dir: Path = typer.Option(None, "--data-dir", "-d", help="Where state records are kept"),
):
    """Load or bootstrap state, then serve /current, /stable and /learn."""
    from evotune.serve import main

    tuner = _load_config(config)
    console.print(
        f"[bold cyan]evotune[/bold cyan] tuning '{tuner.id}' on port {tuner.server}"
    )
    console.print("[dim]Press Ctrl+C to stop.[/dim]")
    try:
        asyncio.run(main(tuner, data_dir))
    except StorageError as e:
        console.print(f"[red]Cannot load state: {e}[/red]")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        pass


@app.command("show")
def show(
    config: Path = typer.Option(None, "--config", "-c", help="The configuration file"),
    data_dir: Path = typer.Option(None, "--data-dir", "-d", help="Where state records are kept"),
):
    """Print the persisted state of the configured tuner."""
    tuner = _load_config(config)
    store = StateStore(data_dir or settings.data_dir, tuner.initial_data)
    try:
        state = asyncio.run(store.read(tuner.id))
    except StorageError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    if state is None:
        console.print(f"[dim]No state recorded yet for '{tuner.id}'.[/dim]")
        return

    table = Table(title=f"{tuner.id}: generation {state.generation}, best score {state.best_score:g}")
    table.add_column("Parameter", style="cyan", no_wrap=True)
    table.add_column("Stable", justify="right", style="green")
    table.add_column("Current", justify="right", style="yellow")
    for name in sorted(state.stable):
        table.add_row(name, f"{state.stable[name]:g}", f"{state.current.get(name, 0.0):g}")
    console.print(table)


@app.command("version")
def version_cmd():
    """Show evotune version."""
    from evotune import __version__
    console.print(f"evotune v{__version__}")
