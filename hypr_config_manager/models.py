"""
Pydantic data models for Hyprland configuration management.

Defines the grammar model (keybinds, general settings, documents) and the
backup/save records exchanged between the engine and its callers.
"""

import re
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


HEX_COLOR_PATTERN = r'^#[0-9a-fA-F]{6}$'
MODIFIER_SEPARATOR_PATTERN = r'[\s+,]'


# Enumerations

class ActionKind(str, Enum):
    """Keybind dispatcher kind."""
    EXEC = "exec"
    WORKSPACE = "workspace"
    MOVE_TO_WORKSPACE = "movetoworkspace"
    KILL_ACTIVE = "killactive"
    TOGGLE_FLOATING = "togglefloating"
    FULLSCREEN = "fullscreen"
    CUSTOM = "custom"

    @property
    def takes_argument(self) -> bool:
        """Whether bindings of this kind carry an argument."""
        return self not in ARGUMENTLESS_KINDS


ARGUMENTLESS_KINDS = frozenset({ActionKind.KILL_ACTIVE, ActionKind.TOGGLE_FLOATING})


class BackupKind(str, Enum):
    """Why a backup was taken."""
    BACKUP = "backup"
    PRE_RESTORE = "pre-restore"


class SaveMode(str, Enum):
    """Save target."""
    TEST = "test"
    PERMANENT = "permanent"


class SaveStatus(str, Enum):
    """Outcome of a save-like session operation."""
    SAVED = "saved"
    TEST_WRITTEN = "test_written"
    EXPORTED = "exported"
    RESTORED = "restored"
    NOTHING_TO_SAVE = "nothing_to_save"
    CANCELLED = "cancelled"


def new_keybind_id() -> str:
    """Return a fresh opaque keybind identifier."""
    return uuid.uuid4().hex


# Core Entities

class Keybind(BaseModel):
    """One shortcut: modifiers + key + dispatcher action."""

    id: str = Field(default_factory=new_keybind_id, description="Opaque unique identifier")
    modifiers: List[str] = Field(default_factory=list, description="Modifier names in typed order")
    key: str = Field(..., description="Key name (e.g., Q, Return, 1)")
    action_kind: ActionKind = Field(..., description="Dispatcher kind")
    action_argument: str = Field("", description="Dispatcher argument (empty for argument-less kinds)")

    @field_validator('modifiers')
    @classmethod
    def validate_modifiers(cls, v: List[str]) -> List[str]:
        """Strip modifier names and reject duplicates and separator characters."""
        stripped = [m.strip() for m in v]
        if any(not m for m in stripped):
            raise ValueError("Modifier names cannot be empty")
        for modifier in stripped:
            if re.search(MODIFIER_SEPARATOR_PATTERN, modifier):
                raise ValueError(f"Modifier name cannot contain whitespace, '+' or ',': {modifier!r}")
        if len(set(stripped)) != len(stripped):
            raise ValueError(f"Duplicate modifiers are not permitted: {stripped}")
        return stripped

    @field_validator('key')
    @classmethod
    def validate_key(cls, v: str) -> str:
        key = v.strip()
        if re.search(r'[,\r\n]', key):
            raise ValueError(f"Key cannot contain ',' or line breaks: {key!r}")
        return key

    @field_validator('action_argument')
    @classmethod
    def validate_action_argument(cls, v: str) -> str:
        argument = v.strip()
        if re.search(r'[\r\n]', argument):
            raise ValueError("Action argument cannot contain line breaks")
        return argument

    @model_validator(mode='after')
    def validate_argument(self):
        """Argument must be empty iff the kind is argument-less."""
        if self.action_kind.takes_argument and not self.action_argument:
            raise ValueError(f"Action '{self.action_kind.value}' requires an argument")
        if not self.action_kind.takes_argument and self.action_argument:
            raise ValueError(f"Action '{self.action_kind.value}' does not take an argument")
        return self

    def is_well_formed(self) -> bool:
        """Check the binding can be rendered as a complete bind line."""
        return bool(self.modifiers) and bool(self.key)

    def same_binding(self, other: "Keybind") -> bool:
        """Compare everything except the identifier."""
        return (
            self.modifiers == other.modifiers
            and self.key == other.key
            and self.action_kind == other.action_kind
            and self.action_argument == other.action_argument
        )


class GeneralSettings(BaseModel):
    """The `general { }` block values managed by the editor."""

    gaps_in: int = Field(5, ge=0, description="Gaps between windows")
    gaps_out: int = Field(10, ge=0, description="Gaps between windows and monitor edges")
    border_size: int = Field(2, ge=0, description="Window border width in pixels")
    border_color: str = Field("#ffffff", description="Active border color (#rrggbb)")

    @field_validator('border_color')
    @classmethod
    def validate_border_color(cls, v: str) -> str:
        """Validate 6-digit hex color with leading '#'."""
        if not re.match(HEX_COLOR_PATTERN, v):
            raise ValueError(f"Invalid border color (expected #rrggbb): {v}")
        return v.lower()


class ConfigDocument(BaseModel):
    """Structured view of a Hyprland configuration."""

    keybinds: List[Keybind] = Field(default_factory=list)
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    source_text: str = Field("", description="Raw text the document was parsed from")

    def find_keybind(self, keybind_id: str) -> Optional[Keybind]:
        for keybind in self.keybinds:
            if keybind.id == keybind_id:
                return keybind
        return None


class Backup(BaseModel):
    """Immutable record of a stored snapshot of the canonical file."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Backup file name")
    created_at: datetime = Field(..., description="Snapshot time (UTC, second precision)")
    size_bytes: int = Field(..., ge=0, description="Size of the stored content")
    location: Path = Field(..., description="Path of the stored copy")
    kind: BackupKind = Field(BackupKind.BACKUP, description="Regular or pre-restore snapshot")


class SaveResult(BaseModel):
    """Result of save, export and restore workflows."""

    status: SaveStatus
    path: Optional[Path] = None
    backup: Optional[Backup] = None
    first_save: bool = False

    @property
    def wrote_file(self) -> bool:
        return self.status in (
            SaveStatus.SAVED, SaveStatus.TEST_WRITTEN, SaveStatus.EXPORTED, SaveStatus.RESTORED
        )
