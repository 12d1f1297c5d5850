"""
Rich-formatted display for configuration documents and backups.
"""

from typing import List

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from .config.generator import describe_action, render_combo
from .models import Backup, BackupKind, ConfigDocument, SaveResult, SaveStatus


def display_keybinds(document: ConfigDocument, console: Console) -> None:
    """
    Display keybinds as a numbered table.

    Numbers are 1-based and are what `bind remove` accepts.
    """
    if not document.keybinds:
        console.print("[dim]No keybinds configured. Add one with: hypr-config bind add[/dim]")
        return

    table = Table(title="Keybinds")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Combo", style="cyan")
    table.add_column("Kind")
    table.add_column("Action")

    for index, keybind in enumerate(document.keybinds, start=1):
        table.add_row(
            str(index),
            render_combo(keybind),
            keybind.action_kind.value,
            describe_action(keybind),
        )

    console.print(table)


def display_general(document: ConfigDocument, console: Console) -> None:
    general = document.general

    table = Table(title="General", show_header=False)
    table.add_column("Setting", style="dim")
    table.add_column("Value")

    table.add_row("gaps_in", str(general.gaps_in))
    table.add_row("gaps_out", str(general.gaps_out))
    table.add_row("border_size", str(general.border_size))
    table.add_row("border_color", f"[{general.border_color}]■[/] {general.border_color}")

    console.print(table)


def display_backups(backups: List[Backup], console: Console) -> None:
    """Display backup history, newest first."""
    if not backups:
        console.print("[dim]No backups yet. Save your config to create backups.[/dim]")
        return

    table = Table(title="Configuration Backups")
    table.add_column("Name", style="cyan")
    table.add_column("Created (UTC)")
    table.add_column("Size", justify="right")

    for backup in backups:
        name = backup.name
        if backup.kind == BackupKind.PRE_RESTORE:
            name = f"{name} [yellow](pre-restore)[/yellow]"
        table.add_row(
            name,
            backup.created_at.strftime("%Y-%m-%d %H:%M:%S"),
            f"{backup.size_bytes} bytes",
        )

    console.print(table)


def display_config_text(text: str, console: Console) -> None:
    console.print(Syntax(text, "ini", line_numbers=False))


def display_diff(diff: str, console: Console) -> None:
    if not diff:
        console.print("[green]No pending changes[/green]")
        return
    console.print(Syntax(diff, "diff"))


def display_save_result(result: SaveResult, console: Console) -> None:
    """Print a one-line summary of a save/export/restore outcome."""
    if result.status == SaveStatus.NOTHING_TO_SAVE:
        console.print("[dim]No changes to save[/dim]")
    elif result.status == SaveStatus.CANCELLED:
        console.print("[yellow]Cancelled[/yellow]")
    elif result.status == SaveStatus.TEST_WRITTEN:
        console.print(f"✅ Test config saved to {result.path}")
        console.print("   Test with: hyprctl reload")
    elif result.status == SaveStatus.EXPORTED:
        console.print(f"✅ Config exported to {result.path}")
    elif result.status == SaveStatus.RESTORED:
        console.print(f"✅ Backup restored to {result.path}")
        if result.backup:
            console.print(f"   Pre-restore backup: {result.backup.name}")
    else:
        console.print(f"✅ Config saved to {result.path}")
        if result.backup:
            console.print(f"   Backup: {result.backup.name}")
        elif result.first_save:
            console.print("   No existing config to back up - this was the first save")
        console.print("   Run 'hyprctl reload' to apply changes")
