"""
Edit session for a Hyprland configuration.

Owns the live ConfigDocument and the dirty flag, and sequences load, save
and restore against the file store and the backup manager. Failed
operations leave the document and the dirty flag as they were.
"""

import asyncio
import difflib
import logging
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError

from .config.backup_manager import BackupManager
from .config.generator import generate, strip_timestamp
from .config.parser import parse, parse_general_block
from .errors import KeybindNotFoundError, MalformedInputError, NotFoundError
from .models import (
    ActionKind,
    Backup,
    ConfigDocument,
    GeneralSettings,
    Keybind,
    SaveMode,
    SaveResult,
    SaveStatus,
)
from .sample import SAMPLE_CONFIG, sample_document
from .settings import ManagerSettings
from .storage import FilePicker, FileStore

logger = logging.getLogger(__name__)


def _validation_message(error: ValidationError) -> str:
    return "; ".join(e["msg"] for e in error.errors())


def _coerce_int(value: Any, default: int) -> int:
    """Coerce form input to int, falling back to default when unparsable."""
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


class EditSession:
    """
    Single live configuration document plus its persistence workflow.

    One instance per process; the file store is injected so the session can
    run against the real filesystem or an in-memory store.
    """

    def __init__(
        self,
        store: FileStore,
        settings: Optional[ManagerSettings] = None,
        backups: Optional[BackupManager] = None
    ):
        """
        Initialize edit session.

        Args:
            store: File store for canonical, test and exported files
            settings: Paths and policies (defaults resolved from the home directory)
            backups: Backup manager (created for the canonical path if None)
        """
        self.store = store
        self.settings = settings or ManagerSettings()
        self.backups = backups or BackupManager(store, self.settings.canonical_path)

        self.document = ConfigDocument()
        # None until something has been loaded or saved
        self.last_saved_text: Optional[str] = None
        self.dirty = False

        # Serializes writes against the canonical path
        self._write_lock = asyncio.Lock()

    @property
    def backup_history(self) -> List[Backup]:
        return self.backups.history

    # Loading

    def _parse(self, text: str) -> ConfigDocument:
        general = self.document.general
        if self.settings.parse_general_block:
            general = parse_general_block(text) or general
        return parse(text, general=general)

    def load(self, text: str) -> None:
        """Replace the document with parsed text, treating it as persisted."""
        self.document = self._parse(text)
        self.last_saved_text = text
        self.dirty = False
        logger.info(f"Loaded config with {len(self.document.keybinds)} keybind(s)")

    def load_sample(self) -> None:
        """Replace the document with starter keybinds."""
        document = sample_document()
        document.general = self.document.general.model_copy()
        self.document = document
        self.last_saved_text = generate(document)
        self.dirty = False
        logger.info("Sample data loaded")

    async def load_from_store(self) -> bool:
        """
        Load the canonical file, falling back to sample data if it is missing.

        Returns:
            True if the canonical file was loaded, False if sample data was used

        Raises:
            PermissionDeniedError: If the canonical file cannot be read
        """
        path = self.settings.canonical_path
        try:
            text = await self.store.read(path)
        except NotFoundError:
            logger.warning(f"No existing Hyprland config found at {path} - starting with defaults")
            self.load_sample()
            return False

        self.load(text)
        return True

    def import_text(self, text: str) -> None:
        """Replace the document with pasted or imported text; this is an unsaved edit."""
        self.document = self._parse(text)
        self.mark_dirty()

    async def open_file(self, picker: FilePicker) -> Optional[Path]:
        """
        Let the user pick a config file and import it.

        Returns:
            The opened path, or None if the user cancelled
        """
        path = await picker.pick_open("Open Hyprland Config")
        if path is None:
            logger.info("Open cancelled")
            return None

        text = await self.store.read(path)
        self.import_text(text)
        logger.info(f"Config loaded from {path}")
        return path

    # Editing

    def mark_dirty(self) -> None:
        self.dirty = True

    def add_keybind(
        self,
        modifiers: List[str],
        key: str,
        action_kind: ActionKind,
        action_argument: str = ""
    ) -> Keybind:
        """
        Append a new keybind.

        Raises:
            MalformedInputError: If the binding is incomplete or invalid
        """
        keybind = self._build_keybind(
            modifiers=modifiers,
            key=key,
            action_kind=action_kind,
            action_argument=action_argument,
        )
        self.document.keybinds.append(keybind)
        self.mark_dirty()
        return keybind

    def update_keybind(self, keybind_id: str, **changes: Any) -> Keybind:
        """
        Replace fields of an existing keybind, keeping its position and id.

        Raises:
            KeybindNotFoundError: If no keybind has this id
            MalformedInputError: If the result is invalid
        """
        current = self.document.find_keybind(keybind_id)
        if current is None:
            raise KeybindNotFoundError(keybind_id)

        fields = current.model_dump()
        fields.update(changes)
        fields["id"] = keybind_id
        updated = self._build_keybind(**fields)

        index = self.document.keybinds.index(current)
        self.document.keybinds[index] = updated
        self.mark_dirty()
        return updated

    def delete_keybind(self, keybind_id: str) -> Keybind:
        """
        Remove a keybind.

        Raises:
            KeybindNotFoundError: If no keybind has this id
        """
        current = self.document.find_keybind(keybind_id)
        if current is None:
            raise KeybindNotFoundError(keybind_id)

        self.document.keybinds.remove(current)
        self.mark_dirty()
        return current

    @staticmethod
    def _build_keybind(**fields: Any) -> Keybind:
        combo = " + ".join([*fields.get("modifiers", []), fields.get("key", "")])
        try:
            keybind = Keybind(**fields)
        except ValidationError as e:
            raise MalformedInputError(combo, _validation_message(e)) from None

        if not keybind.is_well_formed():
            raise MalformedInputError(
                combo,
                "at least one modifier and a key are required",
                suggestion="Select modifiers and enter a key",
            )
        return keybind

    def update_general(self, **fields: Any) -> GeneralSettings:
        """
        Change general settings from form input.

        Numeric fields are coerced; unparsable numbers fall back to the
        defaults and an empty color falls back to '#ffffff'.

        Raises:
            MalformedInputError: If a value is out of range or the color is invalid
        """
        defaults = GeneralSettings()
        values = self.document.general.model_dump()

        for name, value in fields.items():
            if name not in values:
                raise MalformedInputError(name, "unknown general setting")
            if name == "border_color":
                values[name] = value or defaults.border_color
            else:
                values[name] = _coerce_int(value, getattr(defaults, name))

        try:
            general = GeneralSettings(**values)
        except ValidationError as e:
            raise MalformedInputError(str(fields), _validation_message(e)) from None

        self.document.general = general
        self.mark_dirty()
        return general

    # Output

    def render(self) -> str:
        return generate(self.document)

    def preview(self) -> str:
        """Unified diff from the last persisted text to the pending text."""
        saved = SAMPLE_CONFIG if self.last_saved_text is None else self.last_saved_text
        pending = self.render()
        diff = difflib.unified_diff(
            strip_timestamp(saved).splitlines(keepends=True),
            strip_timestamp(pending).splitlines(keepends=True),
            fromfile=f"{self.settings.canonical_path.name} (saved)",
            tofile=f"{self.settings.canonical_path.name} (pending)",
        )
        return "".join(diff)

    async def save(self, mode: SaveMode) -> SaveResult:
        """
        Persist the document.

        Test mode writes hyprland.test.conf and leaves history and dirty alone.
        Permanent mode snapshots the existing canonical file, then overwrites
        it; the overwrite never starts unless the snapshot completed or there
        was no file to snapshot.

        Raises:
            BackupFailure: If the snapshot failed (canonical file untouched)
            PermissionDeniedError: If the canonical file cannot be read or written
        """
        async with self._write_lock:
            if not self.dirty:
                logger.info("No changes to save")
                return SaveResult(status=SaveStatus.NOTHING_TO_SAVE)

            text = self.render()

            if mode == SaveMode.TEST:
                path = self.settings.test_path
                await self.store.write(path, text)
                logger.info(f"Test config saved to {path}. Test with: hyprctl reload")
                return SaveResult(status=SaveStatus.TEST_WRITTEN, path=path)

            path = self.settings.canonical_path
            try:
                current = await self.store.read(path)
            except NotFoundError:
                current = None

            backup = await self.backups.snapshot(current)
            await self.store.write(path, text)

            self.last_saved_text = text
            self.dirty = False

            logger.info(f"Config saved to {path}" + (f" (backup: {backup.name})" if backup else ""))
            return SaveResult(
                status=SaveStatus.SAVED,
                path=path,
                backup=backup,
                first_save=current is None,
            )

    async def export_to(self, picker: FilePicker) -> SaveResult:
        """Write the rendered document to a user-chosen path."""
        path = await picker.pick_save("Save Hyprland Config", self.settings.canonical_path.name)
        if path is None:
            logger.info("Export cancelled")
            return SaveResult(status=SaveStatus.CANCELLED)

        async with self._write_lock:
            await self.store.write(path, self.render())

        logger.info(f"Config exported to {path}")
        return SaveResult(status=SaveStatus.EXPORTED, path=path)

    # Backups

    async def refresh_backups(self) -> List[Backup]:
        return await self.backups.discover()

    async def restore(self, backup_name: str) -> SaveResult:
        """
        Restore a backup over the canonical file and load it.

        Unsaved edits are discarded. The replaced canonical content is kept as
        a pre-restore backup, returned in the result.

        Raises:
            NotFoundError: If the backup does not exist
        """
        async with self._write_lock:
            before = len(self.backup_history)
            text = await self.backups.restore(backup_name)
            self.load(text)

            pre_restore = self.backup_history[0] if len(self.backup_history) > before else None
            return SaveResult(
                status=SaveStatus.RESTORED,
                path=self.settings.canonical_path,
                backup=pre_restore,
            )

    async def delete_backup(self, backup_name: str) -> None:
        async with self._write_lock:
            await self.backups.delete(backup_name)

    async def cleanup_backups(self, keep: Optional[int] = None) -> List[Backup]:
        """Apply the retention policy (settings.backup_keep unless overridden)."""
        keep_count = self.settings.backup_keep if keep is None else keep
        async with self._write_lock:
            return await self.backups.retain(keep_count)
