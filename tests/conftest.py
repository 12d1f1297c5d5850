"""
Pytest configuration and fixtures for Hyprland Configuration Manager tests.

Provides an in-memory file store with failure injection and an operation
log, a stepping clock for deterministic backup names, and a preset picker.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

# Add package root to Python path BEFORE test collection
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

from hypr_config_manager.config.backup_manager import BackupManager
from hypr_config_manager.errors import NotFoundError
from hypr_config_manager.session import EditSession
from hypr_config_manager.settings import ManagerSettings


class InMemoryFileStore:
    """FileStore keeping files in a dict and logging every operation."""

    def __init__(self, files: Optional[Dict[Path, str]] = None):
        self.files: Dict[Path, str] = dict(files or {})
        self.operations: List[Tuple[str, Path]] = []
        self.read_failures: Dict[Path, Exception] = {}
        self.write_failures: List[Tuple[str, Exception]] = []
        self.exact_write_failures: Dict[Path, Exception] = {}

    def fail_read(self, path: Path, error: Exception) -> None:
        self.read_failures[path] = error

    def fail_write(self, name_fragment: str, error: Exception) -> None:
        """Fail writes to any path whose name contains name_fragment."""
        self.write_failures.append((name_fragment, error))

    def fail_write_exact(self, path: Path, error: Exception) -> None:
        self.exact_write_failures[path] = error

    def writes(self) -> List[Path]:
        return [path for op, path in self.operations if op == "write"]

    async def read(self, path: Path) -> str:
        self.operations.append(("read", path))
        if path in self.read_failures:
            raise self.read_failures[path]
        if path not in self.files:
            raise NotFoundError(str(path))
        return self.files[path]

    async def write(self, path: Path, text: str) -> None:
        self.operations.append(("write", path))
        if path in self.exact_write_failures:
            raise self.exact_write_failures[path]
        for fragment, error in self.write_failures:
            if fragment in path.name:
                raise error
        self.files[path] = text

    async def list(self, directory: Path) -> List[str]:
        return sorted(p.name for p in self.files if p.parent == directory)

    async def size(self, path: Path) -> int:
        if path not in self.files:
            raise NotFoundError(str(path))
        return len(self.files[path].encode("utf-8"))

    async def delete(self, path: Path) -> None:
        self.operations.append(("delete", path))
        if path not in self.files:
            raise NotFoundError(str(path))
        del self.files[path]


class SteppingClock:
    """Returns a new UTC time, one minute later, on every call."""

    def __init__(self, start: Optional[datetime] = None, step: timedelta = timedelta(minutes=1)):
        self.current = start or datetime(2026, 10, 19, 8, 30, 5, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        moment = self.current
        self.current = self.current + self.step
        return moment


class PresetPicker:
    """FilePicker returning a fixed answer; None simulates cancellation."""

    def __init__(self, path: Optional[Path]):
        self.path = path
        self.titles: List[str] = []

    async def pick_open(self, title: str) -> Optional[Path]:
        self.titles.append(title)
        return self.path

    async def pick_save(self, title: str, default_name: str) -> Optional[Path]:
        self.titles.append(title)
        return self.path


EXISTING_CONFIG = """# Existing Hyprland config
general {
    gaps_in = 3
}

bind = SUPER, Return, exec, foot
bind = SUPER SHIFT, Q, killactive
bind = SUPER, 3, workspace, 3
monitor = ,preferred,auto,1
"""


@pytest.fixture
def settings(tmp_path) -> ManagerSettings:
    """Settings rooted in a temporary home directory."""
    return ManagerSettings(home_dir=tmp_path / "home")


@pytest.fixture
def store() -> InMemoryFileStore:
    return InMemoryFileStore()


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def backup_manager(store, settings, clock) -> BackupManager:
    return BackupManager(store, settings.canonical_path, clock=clock)


@pytest.fixture
def session(store, settings, backup_manager) -> EditSession:
    return EditSession(store, settings, backups=backup_manager)


@pytest.fixture
def existing_config(store, settings) -> str:
    """Put EXISTING_CONFIG at the canonical path."""
    store.files[settings.canonical_path] = EXISTING_CONFIG
    return EXISTING_CONFIG
