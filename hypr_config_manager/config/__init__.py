"""
Configuration translation and versioning engine.

Modules:
- parser: Parse hyprland.conf text into a ConfigDocument
- generator: Render a ConfigDocument as canonical hyprland.conf text
- backup_manager: Timestamped snapshots, restore and retention
"""

from .backup_manager import BackupManager, apply_retention
from .generator import generate
from .parser import parse, parse_general_block

__all__ = [
    "BackupManager",
    "apply_retention",
    "generate",
    "parse",
    "parse_general_block",
]
