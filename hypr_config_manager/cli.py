"""
Hyprland Configuration Manager CLI

Usage:
    hypr-config show [--json]
    hypr-config export [--output PATH]
    hypr-config preview
    hypr-config import FILE [--test]
    hypr-config bind add COMBO KIND [ARGUMENT] [--test]
    hypr-config bind remove NUMBER [--test]
    hypr-config general [--gaps-in N] [--gaps-out N] [--border-size N] [--border-color HEX] [--test]
    hypr-config save [--test]
    hypr-config backups list | restore NAME | delete NAME | cleanup [--keep N]

Mutating commands load ~/.config/hypr/hyprland.conf (or sample data when it
does not exist), apply the change and save permanently with a backup unless
--test is given.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.console import Console

from .config.generator import render_combo
from .displays import (
    display_backups,
    display_config_text,
    display_diff,
    display_general,
    display_keybinds,
    display_save_result,
)
from .errors import ConfigError, MalformedInputError
from .models import ActionKind, SaveMode
from .session import EditSession
from .settings import ManagerSettings, load_settings
from .storage import LocalFileStore

console = Console()


class ClickFilePicker:
    """File picker backed by a preset path or an interactive prompt."""

    def __init__(self, preset: Optional[Path] = None):
        self.preset = preset

    def _pick(self, title: str) -> Optional[Path]:
        if self.preset is not None:
            return self.preset
        answer = click.prompt(f"{title} (empty to cancel)", default="", show_default=False).strip()
        return Path(answer).expanduser() if answer else None

    async def pick_open(self, title: str) -> Optional[Path]:
        return self._pick(title)

    async def pick_save(self, title: str, default_name: str) -> Optional[Path]:
        return self._pick(title)


def parse_combo(combo: str) -> Tuple[List[str], str]:
    """
    Split 'SUPER+SHIFT+C' into (["SUPER", "SHIFT"], "C").

    Raises:
        MalformedInputError: If there is no modifier or no key
    """
    parts = [p.strip() for p in combo.split("+")]
    if len(parts) < 2 or not all(parts):
        raise MalformedInputError(
            combo,
            "expected MODIFIER[+MODIFIER...]+KEY",
            suggestion="Example: SUPER+SHIFT+C",
        )
    return parts[:-1], parts[-1]


def _save_mode(test: bool) -> SaveMode:
    return SaveMode.TEST if test else SaveMode.PERMANENT


def _run(coro) -> None:
    """Run a command coroutine, reporting ConfigError as exit code 1."""
    try:
        asyncio.run(coro)
    except ConfigError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        if e.suggestion:
            console.print(f"  → {e.suggestion}")
        sys.exit(1)


async def _open_session(settings: ManagerSettings) -> EditSession:
    session = EditSession(LocalFileStore(), settings)
    await session.load_from_store()
    await session.refresh_backups()
    return session


@click.group()
@click.option('--home', type=click.Path(file_okay=False, path_type=Path), help='Home directory override')
@click.option('--settings', 'settings_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Settings TOML file')
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, home: Optional[Path], settings_path: Optional[Path], verbose: bool):
    """Edit Hyprland keybinds and general settings with automatic backups."""
    settings = load_settings(settings_path, home_dir=home, log_level="DEBUG" if verbose else None)

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    ctx.obj = settings


@cli.command()
@click.option('--json', 'output_json', is_flag=True, help='Output JSON instead of formatted tables')
@click.pass_obj
def show(settings: ManagerSettings, output_json: bool):
    """Show keybinds and general settings."""
    async def run():
        session = await _open_session(settings)
        if output_json:
            click.echo(session.document.model_dump_json(indent=2, exclude={"source_text"}))
            return
        display_keybinds(session.document, console)
        display_general(session.document, console)

    _run(run())


@cli.command()
@click.option('--output', type=click.Path(dir_okay=False, path_type=Path),
              help='Write to this file instead of printing')
@click.pass_obj
def export(settings: ManagerSettings, output: Optional[Path]):
    """Print or write the generated configuration."""
    async def run():
        session = await _open_session(settings)
        if output is None:
            display_config_text(session.render(), console)
            return
        display_save_result(await session.export_to(ClickFilePicker(output)), console)

    _run(run())


@cli.command()
@click.pass_obj
def preview(settings: ManagerSettings):
    """Show how regenerating the config would change hyprland.conf."""
    async def run():
        session = await _open_session(settings)
        display_diff(session.preview(), console)

    _run(run())


@cli.command(name="import")
@click.argument('file', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--test', is_flag=True, help='Write hyprland.test.conf instead of hyprland.conf')
@click.pass_obj
def import_config(settings: ManagerSettings, file: Path, test: bool):
    """Replace keybinds with those parsed from FILE and save."""
    async def run():
        session = await _open_session(settings)
        await session.open_file(ClickFilePicker(file))
        display_save_result(await session.save(_save_mode(test)), console)

    _run(run())


@cli.command()
@click.option('--test', is_flag=True, help='Write hyprland.test.conf instead of hyprland.conf')
@click.pass_obj
def save(settings: ManagerSettings, test: bool):
    """Regenerate the config from its parsed form and save it."""
    async def run():
        session = await _open_session(settings)
        session.mark_dirty()
        display_save_result(await session.save(_save_mode(test)), console)

    _run(run())


@cli.group()
def bind():
    """Add or remove keybinds."""
    pass


@bind.command(name="list")
@click.pass_obj
def bind_list(settings: ManagerSettings):
    """List keybinds."""
    async def run():
        session = await _open_session(settings)
        display_keybinds(session.document, console)

    _run(run())


@bind.command(name="add")
@click.argument('combo')
@click.argument('kind', type=click.Choice([k.value for k in ActionKind]))
@click.argument('argument', required=False, default="")
@click.option('--test', is_flag=True, help='Write hyprland.test.conf instead of hyprland.conf')
@click.pass_obj
def bind_add(settings: ManagerSettings, combo: str, kind: str, argument: str, test: bool):
    """
    Add a keybind.

    COMBO is MODIFIER[+MODIFIER...]+KEY, e.g. SUPER+SHIFT+C.
    """
    async def run():
        modifiers, key = parse_combo(combo)
        session = await _open_session(settings)
        keybind = session.add_keybind(modifiers, key, ActionKind(kind), argument)
        console.print(f"Keybind added: {render_combo(keybind)}")
        display_save_result(await session.save(_save_mode(test)), console)

    _run(run())


@bind.command(name="remove")
@click.argument('number', type=int)
@click.option('--test', is_flag=True, help='Write hyprland.test.conf instead of hyprland.conf')
@click.pass_obj
def bind_remove(settings: ManagerSettings, number: int, test: bool):
    """Remove keybind NUMBER (as shown by `bind list`)."""
    async def run():
        session = await _open_session(settings)
        keybinds = session.document.keybinds
        if not 1 <= number <= len(keybinds):
            raise MalformedInputError(str(number), f"expected a keybind number between 1 and {len(keybinds)}")
        session.delete_keybind(keybinds[number - 1].id)
        console.print("Keybind deleted")
        display_save_result(await session.save(_save_mode(test)), console)

    _run(run())


@cli.command()
@click.option('--gaps-in', help='Gaps between windows')
@click.option('--gaps-out', help='Gaps between windows and monitor edges')
@click.option('--border-size', help='Border width in pixels')
@click.option('--border-color', help='Active border color (#rrggbb)')
@click.option('--test', is_flag=True, help='Write hyprland.test.conf instead of hyprland.conf')
@click.pass_obj
def general(settings: ManagerSettings, gaps_in, gaps_out, border_size, border_color, test: bool):
    """Show or change general settings."""
    changes = {
        name: value
        for name, value in (
            ("gaps_in", gaps_in),
            ("gaps_out", gaps_out),
            ("border_size", border_size),
            ("border_color", border_color),
        )
        if value is not None
    }

    async def run():
        session = await _open_session(settings)
        if changes:
            session.update_general(**changes)
            console.print("General settings updated")
        display_general(session.document, console)
        if changes:
            display_save_result(await session.save(_save_mode(test)), console)

    _run(run())


@cli.group()
def backups():
    """Manage hyprland.conf backups."""
    pass


@backups.command(name="list")
@click.pass_obj
def backups_list(settings: ManagerSettings):
    """List backups, newest first."""
    async def run():
        session = await _open_session(settings)
        display_backups(session.backup_history, console)

    _run(run())


@backups.command(name="restore")
@click.argument('name')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_obj
def backups_restore(settings: ManagerSettings, name: str, yes: bool):
    """Restore backup NAME over hyprland.conf."""
    if not yes:
        click.confirm(f"Restore backup: {name}? This will replace your current configuration.", abort=True)

    async def run():
        session = await _open_session(settings)
        display_save_result(await session.restore(name), console)

    _run(run())


@backups.command(name="delete")
@click.argument('name')
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_obj
def backups_delete(settings: ManagerSettings, name: str, yes: bool):
    """Delete backup NAME."""
    if not yes:
        click.confirm(f"Delete backup: {name}?", abort=True)

    async def run():
        session = await _open_session(settings)
        await session.delete_backup(name)
        console.print(f"Backup {name} deleted")

    _run(run())


@backups.command(name="cleanup")
@click.option('--keep', type=click.IntRange(min=0), help='Backups to keep (default from settings)')
@click.pass_obj
def backups_cleanup(settings: ManagerSettings, keep: Optional[int]):
    """Delete all but the newest backups."""
    async def run():
        session = await _open_session(settings)
        removed = await session.cleanup_backups(keep)
        if removed:
            console.print(f"Cleaned up {len(removed)} old backup(s)")
        else:
            console.print(f"Only {len(session.backup_history)} backup(s) exist, no cleanup needed")

    _run(run())


def main():
    cli()
