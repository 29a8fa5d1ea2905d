from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console

from .logbook import OmniFocusSyncError
from .logging_setup import setup_logging
from .omnifocus_db import OmniFocusDB
from .settings import load_settings, save_settings, write_options
from .sync import run_sync, write_logbook

app = typer.Typer(help="OmniFocus Logbook sync CLI")
console = Console()


def _load_dotenv() -> None:
    import importlib
    import importlib.util

    if importlib.util.find_spec("dotenv") is None:
        return
    dotenv = importlib.import_module("dotenv")
    dotenv.load_dotenv()


def _data_dir(data_dir: Path | None) -> Path:
    return data_dir or Path(os.getenv("OFL_DATA_DIR", "./ofl_data"))


@app.command()
def sync(
    db_path: Path | None = typer.Option(None, "--db", help="Path to the OmniFocus SQLite cache"),
    data_dir: Path | None = typer.Option(None, "--data-dir", help="Directory for settings and logbooks"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every fetched page"),
) -> None:
    """Import tasks completed since the last sync."""
    _load_dotenv()
    setup_logging(verbose)
    base_dir = _data_dir(data_dir)
    db = OmniFocusDB(db_path) if db_path else OmniFocusDB.from_env()
    settings = load_settings(base_dir)

    try:
        result = run_sync(db, settings)
    except OmniFocusSyncError as exc:
        console.print(f"[red]Sync failed:[/red] {exc} ({exc.__cause__})")
        raise typer.Exit(code=1) from exc

    if result.tasks:
        path = write_logbook(base_dir, result)
        console.print(f"Logbook saved to: {path}")
    save_settings(base_dir, result.next_settings(settings))

    console.print(
        f"Counts - Tasks: {result.counts['tasks']}, Cancelled: {result.counts['cancelled']}, "
        f"Checklist items: {result.counts['checklist_records']}"
    )


@app.command()
def status(
    data_dir: Path | None = typer.Option(None, "--data-dir", help="Directory for settings and logbooks"),
) -> None:
    """Show the stored settings and the last sync time."""
    _load_dotenv()
    settings = load_settings(_data_dir(data_dir))
    if settings.latest_sync_time > 0:
        last_sync = datetime.fromtimestamp(settings.latest_sync_time).strftime("%Y-%m-%d %H:%M")
    else:
        last_sync = "Never"
    console.print(f"Last sync: {last_sync}")
    for name, value in settings.model_dump().items():
        if name != "latest_sync_time":
            console.print(f"- {name}: {value!r}")


@app.command()
def reset(
    data_dir: Path | None = typer.Option(None, "--data-dir", help="Directory for settings and logbooks"),
) -> None:
    """Forget the sync history so the next sync re-reads the whole logbook."""
    _load_dotenv()
    write_options(_data_dir(data_dir), latest_sync_time=0)
    console.print("Sync history reset.")


if __name__ == "__main__":
    app()
