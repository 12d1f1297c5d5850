"""
Timestamped backups of the canonical Hyprland configuration.

Every destructive write of hyprland.conf is preceded by a snapshot of the
current content written next to it:

    hyprland.conf.backup-2026-10-19T08-30-05
    hyprland.conf.pre-restore-2026-10-19T08-41-17

Timestamps are UTC with second precision and sort lexicographically by time.
The in-memory history is ordered newest-first.
"""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..errors import (
    BackupFailure,
    ConfigError,
    ErrorCode,
    MalformedInputError,
    NotFoundError,
)
from ..models import Backup, BackupKind
from ..settings import CANONICAL_FILENAME
from ..storage import FileStore

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"
BACKUP_NAME_PATTERN = re.compile(
    re.escape(CANONICAL_FILENAME)
    + r'\.(backup|pre-restore)-(\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2})(?:-(\d+))?$'
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """
    Filename-safe ISO-8601 timestamp truncated to seconds.

    Naive datetimes are taken as local time. ':' and '.' become '-'.
    """
    iso = moment.astimezone(timezone.utc).replace(microsecond=0, tzinfo=None).isoformat()
    return iso.replace(":", "-").replace(".", "-")


def backup_name(kind: BackupKind, moment: datetime, sequence: int = 0) -> str:
    """Build a backup file name; sequence > 0 disambiguates same-second snapshots."""
    name = f"{CANONICAL_FILENAME}.{kind.value}-{format_timestamp(moment)}"
    if sequence:
        name = f"{name}-{sequence}"
    return name


def parse_backup_name(name: str) -> Optional[Tuple[BackupKind, datetime, int]]:
    """
    Parse a backup file name back into (kind, created_at, sequence).

    Returns:
        Tuple, or None if the name is not a backup name
    """
    match = BACKUP_NAME_PATTERN.match(name)
    if not match:
        return None

    kind_text, timestamp, sequence = match.groups()
    created_at = datetime.strptime(timestamp, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    return BackupKind(kind_text), created_at, int(sequence or 0)


def apply_retention(history: List[Backup], keep_count: int) -> Tuple[List[Backup], List[Backup]]:
    """
    Split a backup history into (kept, removed).

    The newest keep_count backups by creation time are kept; ties keep their
    history order. Nothing is removed when len(history) <= keep_count.

    Raises:
        ValueError: If keep_count is negative
    """
    if keep_count < 0:
        raise ValueError(f"keep_count must be non-negative, got {keep_count}")

    ordered = sorted(history, key=lambda b: b.created_at, reverse=True)
    return ordered[:keep_count], ordered[keep_count:]


class BackupManager:
    """Creates, restores, deletes and prunes backups of the canonical file."""

    def __init__(
        self,
        store: FileStore,
        canonical_path: Path,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Initialize backup manager.

        Args:
            store: File store used for every read/write/delete
            canonical_path: Path of hyprland.conf; backups live beside it
            clock: Source of snapshot timestamps
        """
        self.store = store
        self.canonical_path = canonical_path
        self.directory = canonical_path.parent
        self.clock = clock
        self.history: List[Backup] = []

    def find(self, name: str) -> Optional[Backup]:
        for backup in self.history:
            if backup.name == name:
                return backup
        return None

    def _backup_path(self, name: str) -> Path:
        if not name or Path(name).name != name:
            raise MalformedInputError(name, "backup name must be a plain file name")
        if parse_backup_name(name) is None:
            raise MalformedInputError(
                name,
                "not a backup name",
                suggestion="List backups with: hypr-config backups list",
            )
        return self.directory / name

    async def _unique_name(self, kind: BackupKind, moment: datetime) -> str:
        taken = {b.name for b in self.history}
        taken.update(await self.store.list(self.directory))

        sequence = 0
        name = backup_name(kind, moment)
        while name in taken:
            sequence += 1
            name = backup_name(kind, moment, sequence)
        return name

    async def snapshot(
        self,
        current_text: Optional[str],
        kind: BackupKind = BackupKind.BACKUP
    ) -> Optional[Backup]:
        """
        Store current_text unchanged as a new backup.

        Args:
            current_text: Canonical content, or None when there is no file yet
            kind: Regular backup or pre-restore snapshot

        Returns:
            The new Backup (prepended to history), or None for a first save

        Raises:
            BackupFailure: If the backup could not be written
        """
        if current_text is None:
            logger.info("No existing config to back up - this is the first save")
            return None

        moment = self.clock().replace(microsecond=0)

        try:
            name = await self._unique_name(kind, moment)
            location = self.directory / name
            await self.store.write(location, current_text)
        except ConfigError as e:
            raise BackupFailure(str(self.directory), e.message) from e

        backup = Backup(
            name=name,
            created_at=moment.astimezone(timezone.utc),
            size_bytes=len(current_text.encode("utf-8")),
            location=location,
            kind=kind,
        )
        self.history.insert(0, backup)

        logger.info(f"Created {kind.value} {name} ({backup.size_bytes} bytes)")
        return backup

    async def read(self, name: str) -> str:
        """
        Read a backup's content.

        Raises:
            NotFoundError: If the backup does not exist
        """
        path = self._backup_path(name)
        try:
            return await self.store.read(path)
        except NotFoundError:
            raise NotFoundError(str(path), code=ErrorCode.BACKUP_NOT_FOUND) from None

    async def restore(self, name: str) -> str:
        """
        Copy a backup over the canonical file.

        The current canonical content is first saved as a pre-restore snapshot,
        so the restore can itself be undone. With no canonical file that step
        is skipped.

        Returns:
            The restored text

        Raises:
            NotFoundError: If the backup does not exist
            BackupFailure: If the pre-restore snapshot could not be written
        """
        content = await self.read(name)

        try:
            current = await self.store.read(self.canonical_path)
        except NotFoundError:
            logger.info("No current config to back up before restore")
            current = None

        await self.snapshot(current, kind=BackupKind.PRE_RESTORE)
        await self.store.write(self.canonical_path, content)

        logger.info(f"Restored {name} to {self.canonical_path}")
        return content

    async def delete(self, name: str) -> None:
        """
        Delete a backup from the store and the history.

        Raises:
            NotFoundError: If the backup does not exist in the store
        """
        path = self._backup_path(name)
        try:
            await self.store.delete(path)
        except NotFoundError:
            raise NotFoundError(str(path), code=ErrorCode.BACKUP_NOT_FOUND) from None

        self.history = [b for b in self.history if b.name != name]
        logger.info(f"Deleted backup {name}")

    async def retain(self, keep_count: int) -> List[Backup]:
        """
        Delete every backup beyond the newest keep_count.

        A backup already missing from the store is dropped from the history
        with a warning. Other store errors propagate and leave the unprocessed
        backups in the history.

        Returns:
            Backups that were removed
        """
        kept, removed = apply_retention(self.history, keep_count)
        if not removed:
            logger.debug(f"Only {len(kept)} backup(s) exist, no cleanup needed")
            return []

        deleted = []
        for backup in removed:
            try:
                await self.store.delete(backup.location)
            except NotFoundError:
                logger.warning(f"Backup {backup.name} already missing from store")
            self.history.remove(backup)
            deleted.append(backup)

        logger.info(f"Cleaned up {len(deleted)} old backup(s), keeping newest {keep_count}")
        return deleted

    async def discover(self) -> List[Backup]:
        """
        Rebuild the history from the backup directory.

        Returns:
            History ordered newest-first
        """
        found = []
        for name in await self.store.list(self.directory):
            parsed = parse_backup_name(name)
            if parsed is None:
                continue
            kind, created_at, sequence = parsed
            location = self.directory / name
            found.append((created_at, sequence, Backup(
                name=name,
                created_at=created_at,
                size_bytes=await self.store.size(location),
                location=location,
                kind=kind,
            )))

        found.sort(key=lambda item: (item[0], item[1]), reverse=True)
        self.history = [backup for _, _, backup in found]

        logger.debug(f"Discovered {len(self.history)} backup(s) in {self.directory}")
        return list(self.history)
