"""
Hyprland Configuration Manager

Structured editing of hyprland.conf keybinds and general settings, with
canonical regeneration and timestamped backups before every overwrite.
"""

__version__ = "1.0.0"
__author__ = "NixOS Configuration Team"
