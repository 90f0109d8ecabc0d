"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from asset_sync.core.planner import SyncPlan
from asset_sync.models.config import SyncConfig
from asset_sync.models.stats import SyncStats
from asset_sync.utils.formatting import format_duration, format_size


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Check the values in your configuration file.",
            "• Run `asset-sync init --force` to write a fresh configuration.",
        ],
        "TransportError": [
            "• The content server could not be reached.",
            "• Check your internet connection and the configured server URL.",
        ],
        "StatusError": [
            "• The content server rejected the request.",
            "• The manifest URL may be outdated, or the server may be down.",
        ],
        "DecodeError": [
            "• The server answered, but not with a manifest.",
            "• Verify `manifest_url` and `version_url` point at the JSON documents.",
        ],
        "RetryExhaustedError": [
            "• A download kept failing and the run was aborted.",
            "• The hash cache was not updated; the next run retries the same delta.",
            "• Try reducing the number of `--workers`.",
        ],
        "ArchiveCorruptError": [
            "• A downloaded archive could not be read.",
            "• The resource version may have changed mid-run; try again later.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(Text("\n".join(suggestions)))

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_config(config_path: Path, config_data: dict[str, Any]):
    """Displays the raw values stored in the configuration file."""
    console = Console()
    content = ""
    for key in sorted(config_data):
        value = config_data[key]
        if isinstance(value, list):
            value = ", ".join(value) if value else "(empty)"
        content += f"{key} = {value}\n"

    console.print(
        Panel(
            content.strip() or "[dim](no settings)[/dim]",
            title=f"Configuration ([dim]{config_path}[/dim])",
            border_style="cyan",
        )
    )


def print_validation_table(config: SyncConfig):
    """Displays a summary of the effective settings."""
    console = Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    if config.path_whitelist is None:
        whitelist = "[dim]none (all assets)[/dim]"
    else:
        whitelist = ", ".join(config.path_whitelist) or "[yellow](empty)[/yellow]"

    table.add_row("Server:", config.server_url)
    table.add_row("Manifest:", config.effective_manifest_url)
    table.add_row(
        "Resource Version:",
        config.resource_version or f"[dim]from {config.version_url}[/dim]",
    )
    table.add_row("Output Directory:", f"[dim]{config.output_dir}[/dim]")
    table.add_row("Whitelist:", whitelist)
    table.add_row("Max Workers:", str(config.max_workers))
    table.add_row(
        "Retry:",
        f"{config.retry_max_attempts} attempts, "
        f"{config.retry_base_delay:g}s base, {config.retry_max_delay:g}s cap",
    )
    table.add_row(
        "Skip Unchanged:", "✓ Enabled" if config.skip_unchanged else "✗ Disabled"
    )
    table.add_row("Extractor:", config.extractor or "[dim]raw dump[/dim]")

    console.print(
        Panel(
            table,
            title="[bold green]✓ Validated Settings[/bold green]",
            border_style="green",
        )
    )


def print_plan_table(plan: SyncPlan, limit: int = 50):
    """Lists the targets of a plan, truncated to ``limit`` rows."""
    console = Console()
    table = Table(title=f"Sync plan ({plan.mode.value})", box=box.ROUNDED)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Kind", style="magenta")
    table.add_column("Name", style="cyan")
    for i, target in enumerate(plan.targets[:limit], 1):
        table.add_row(str(i), target.kind.value, target.name)
    console.print(table)
    if len(plan.targets) > limit:
        console.print(f"[dim]... and {len(plan.targets) - limit} more.[/dim]")


def print_summary_panel(stats: SyncStats):
    """Displays the final summary of a sync run."""
    console = Console()

    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row("Mode:", stats.mode or "-")
    stats_table.add_row(
        "Planned:",
        f"{stats.targets_planned} targets ([dim]{stats.packs_planned} packs[/dim])",
    )

    if not stats.dry_run:
        stats_table.add_row(
            "✓ Fetched:", f"[bold green]{stats.targets_completed}[/bold green]"
        )
        stats_table.add_row("Entries Extracted:", str(stats.entries_extracted))
        if stats.extraction_failures > 0:
            stats_table.add_row(
                "✗ Extraction Failed:",
                f"[bold red]{stats.extraction_failures}[/bold red]",
            )
        if stats.purged_files > 0:
            stats_table.add_row("Purged Files:", f"[yellow]{stats.purged_files}[/yellow]")

        stats_table.add_row("", "")  # Spacer
        stats_table.add_row(
            "Total Size:", f"[cyan]{format_size(stats.bytes_downloaded)}[/cyan]"
        )
        duration_s = stats.duration_seconds
        avg_speed = stats.bytes_downloaded / duration_s if duration_s > 0 else 0
        stats_table.add_row(
            "Avg. Speed:", f"[magenta]{format_size(int(avg_speed))}/s[/magenta]"
        )
        stats_table.add_row(
            "Hash Cache:",
            f"[green]saved ({stats.cache_entries} entries)[/green]"
            if stats.cache_persisted
            else "[red]not updated[/red]",
        )

    stats_table.add_row(
        "Time Elapsed:", f"[blue]{format_duration(stats.duration_seconds)}[/blue]"
    )

    if stats.dry_run:
        title = "🔍 [bold]Dry Run Summary[/bold]"
        border_color = "yellow"
    elif stats.cache_persisted:
        title = "📦 [bold]Sync Complete![/bold]"
        border_color = "green"
    else:
        title = "⚠ [bold]Sync Incomplete[/bold]"
        border_color = "red"

    console.print()
    console.print(
        Panel(
            stats_table,
            title=title,
            border_style=border_color,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
    console.print()
