"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from asset_sync import __version__
from asset_sync.core.sync_manager import SyncManager
from asset_sync.exceptions import ArchiveCorruptError, AssetSyncError
from asset_sync.media.downloader import create_connection_pool
from asset_sync.storage.cache import HashCacheStore
from asset_sync.storage.config_manager import ConfigManager

from .formatters import (
    format_error_with_suggestions,
    print_config,
    print_plan_table,
    print_summary_panel,
    print_validation_table,
)
from .progress_manager import ProgressManager

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("asset_sync")

app = typer.Typer(
    name="asset-sync",
    help=(
        "Keeps a local asset store in sync with a remote, hash-addressed content"
        " server. Use 'asset-sync <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

EXIT_FAILURE = 1
EXIT_CORRUPT_ARCHIVE = 2


def get_config_dir() -> Path:
    if override := os.getenv("ASSET_SYNC_CONFIG_DIR"):
        return Path(override).expanduser()
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "asset-sync"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
):
    """Asset Sync CLI"""
    if version:
        console.print(f"[bold]asset-sync[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("asset_sync").setLevel(log_level)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command()
def init(
    server_url: str = typer.Argument(..., help="Base URL of the content server."),
    output_dir: Path = typer.Option(  # noqa: B008
        ..., "--output-dir", "-o", help="Root directory for extracted assets."
    ),
    resource_version: str | None = typer.Option(
        None, "--resource-version", help="Fixed resource version to download."
    ),
    version_url: str | None = typer.Option(
        None, "--version-url", help="JSON endpoint that reports the resource version."
    ),
    manifest_url: str | None = typer.Option(
        None, "--manifest-url", help="Manifest location, if not the server URL."
    ),
    whitelist: list[str] | None = typer.Option(  # noqa: B008
        None, "--whitelist", "-w", help="Only sync names containing this text."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Overwrite an existing configuration."
    ),
):
    """Write a new configuration file."""
    if (
        CONFIG_FILE.exists()
        and not force
        and not typer.confirm("Configuration file already exists. Overwrite it?")
    ):
        raise typer.Abort()

    settings = {
        "server_url": server_url,
        "output_dir": str(output_dir.expanduser().resolve()),
        "resource_version": resource_version,
        "version_url": version_url,
        "manifest_url": manifest_url,
        "path_whitelist": whitelist or None,
    }
    config_manager = ConfigManager(CONFIG_FILE)
    config_manager.save_new_config(settings)
    try:
        config_manager.load_config()
    except AssetSyncError as e:
        console.print(f"[yellow]⚠️  Saved, but the configuration is invalid: {e}[/yellow]")
        raise typer.Exit(code=EXIT_FAILURE) from e

    console.print(f"\n[bold green]✓ Configuration saved to '{CONFIG_FILE}'[/bold green]")
    console.print("Ready to sync! Try: [cyan]asset-sync sync[/cyan]")


def _collect_overrides(**options) -> dict:
    return {key: value for key, value in options.items() if value is not None}


async def _run_sync(cli_options: dict, show_plan: bool = False) -> int:
    """Runs one sync and returns the process exit code."""
    config_manager = ConfigManager(CONFIG_FILE)
    config = config_manager.load_config(cli_options)

    session = create_connection_pool(config.max_workers, config.request_timeout)
    manager = None
    exit_code = 0
    try:
        async with ProgressManager(
            console=console, enabled=not config.dry_run
        ) as progress_manager:
            manager = SyncManager(config, session, progress_manager=progress_manager)
            try:
                await manager.execute()
            except ArchiveCorruptError as e:
                console.print(
                    format_error_with_suggestions(
                        e, {"archive": e.archive_name, "entry": e.entry_index}
                    )
                )
                exit_code = EXIT_CORRUPT_ARCHIVE
            except AssetSyncError as e:
                console.print(format_error_with_suggestions(e))
                exit_code = EXIT_FAILURE
    finally:
        await session.close()

    if manager:
        if show_plan and manager.plan is not None:
            print_plan_table(manager.plan)
        print_summary_panel(manager.stats)
    return exit_code


@app.command(name="sync")
def sync_command(
    workers: int | None = typer.Option(
        None, "--workers", "-j", help="Maximum simultaneous downloads."
    ),
    whitelist: list[str] | None = typer.Option(  # noqa: B008
        None, "--whitelist", "-w", help="Only sync names containing this text (repeatable)."
    ),
    skip_unchanged: bool | None = typer.Option(
        None,
        "--skip-unchanged/--refresh-all",
        help="Skip assets whose hash matches the cache (incremental mode only).",
    ),
    output_dir: Path | None = typer.Option(  # noqa: B008
        None, "--output-dir", "-o", help="Override the output directory."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Plan the sync without downloading anything."
    ),
):
    """Fetch every missing or changed asset and update the hash cache."""
    cli_options = _collect_overrides(
        max_workers=workers,
        path_whitelist=whitelist or None,
        skip_unchanged=skip_unchanged,
        output_dir=output_dir,
        dry_run=dry_run,
    )
    try:
        exit_code = asyncio.run(_run_sync(cli_options, show_plan=dry_run))
    except AssetSyncError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=EXIT_FAILURE) from e
    if exit_code:
        raise typer.Exit(code=exit_code)


@app.command()
def plan(
    whitelist: list[str] | None = typer.Option(  # noqa: B008
        None, "--whitelist", "-w", help="Only plan names containing this text (repeatable)."
    ),
):
    """Show what the next sync would fetch, without downloading."""
    cli_options = _collect_overrides(path_whitelist=whitelist or None, dry_run=True)
    try:
        exit_code = asyncio.run(_run_sync(cli_options, show_plan=True))
    except AssetSyncError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=EXIT_FAILURE) from e
    if exit_code:
        raise typer.Exit(code=exit_code)


@app.command(name="show-config")
def show_config():
    """Display the stored configuration file."""
    if not CONFIG_FILE.is_file():
        console.print(
            "[red]✗ Config file not found.[/] Run [cyan]asset-sync init[/cyan] first."
        )
        raise typer.Exit(code=EXIT_FAILURE)
    config_manager = ConfigManager(CONFIG_FILE)
    config_manager.load_config()
    print_config(CONFIG_FILE, config_manager.get_config_as_dict())


@app.command()
def validate():
    """Validate the current configuration."""
    try:
        config_manager = ConfigManager(CONFIG_FILE)
        config = config_manager.load_config()
        print_validation_table(config)
    except AssetSyncError as e:
        console.print(f"[red]✗ Configuration is invalid: {e}[/red]")
        raise typer.Exit(code=EXIT_FAILURE) from e


@app.command(name="clear-cache")
def clear_cache(
    force: bool = typer.Option(
        False, "--force", "-f", help="Bypass the confirmation prompt."
    ),
):
    """Forget every cached hash; the next sync starts cold."""
    config = ConfigManager(CONFIG_FILE).load_config()
    if not force and not typer.confirm(
        "Clear the hash cache? The next sync will re-download everything."
    ):
        console.print("[yellow]Operation cancelled.[/yellow]")
        raise typer.Abort()

    if HashCacheStore(config.cache_file).clear():
        console.print("[green]✓ Hash cache cleared.[/green]")
    else:
        console.print("[red]✗ Failed to clear hash cache.[/red]")
        raise typer.Exit(code=EXIT_FAILURE)
