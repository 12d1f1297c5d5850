"""
Generator for canonical Hyprland configuration text.

Output sections, in fixed order: header, general block, bind lines, trailer.
The header timestamp is the only part that depends on anything other than
the document.
"""

from datetime import datetime
from typing import Callable, Dict, List, Optional

from ..models import ActionKind, ConfigDocument, GeneralSettings, Keybind

HEADER_TITLE = "# Hyprland Configuration"
TIMESTAMP_PREFIX = "# Generated by hypr-config-manager on "
TRAILER = "# End of configuration"


def _prefixed(keybind: Keybind) -> str:
    return f"{keybind.action_kind.value}, {keybind.action_argument}"


def _bare(keybind: Keybind) -> str:
    return keybind.action_kind.value


def _raw(keybind: Keybind) -> str:
    return keybind.action_argument


ACTION_RENDERERS: Dict[ActionKind, Callable[[Keybind], str]] = {
    ActionKind.EXEC: _prefixed,
    ActionKind.WORKSPACE: _prefixed,
    ActionKind.MOVE_TO_WORKSPACE: _prefixed,
    ActionKind.FULLSCREEN: _prefixed,
    ActionKind.KILL_ACTIVE: _bare,
    ActionKind.TOGGLE_FLOATING: _bare,
    ActionKind.CUSTOM: _raw,
}

# Adding an ActionKind without a renderer fails at import time
_missing_renderers = set(ActionKind) - set(ACTION_RENDERERS)
if _missing_renderers:
    raise RuntimeError(f"No renderer for action kinds: {sorted(k.value for k in _missing_renderers)}")


def hex_to_rgba(hex_color: str) -> str:
    """Convert '#rrggbb' to 'r, g, b, 255'."""
    r = int(hex_color[1:3], 16)
    g = int(hex_color[3:5], 16)
    b = int(hex_color[5:7], 16)
    return f"{r}, {g}, {b}, 255"


def render_action(keybind: Keybind) -> str:
    return ACTION_RENDERERS[keybind.action_kind](keybind)


def render_bind(keybind: Keybind) -> str:
    """Render one `bind = ...` line (without newline)."""
    modifiers = " + ".join(keybind.modifiers)
    return f"bind = {modifiers}, {keybind.key}, {render_action(keybind)}"


def render_combo(keybind: Keybind) -> str:
    """Human-readable combo, e.g. 'SUPER + SHIFT + C'."""
    return " + ".join([*keybind.modifiers, keybind.key])


def describe_action(keybind: Keybind) -> str:
    """Human-readable action description for listings."""
    kind = keybind.action_kind
    if kind == ActionKind.EXEC:
        return f"Launch: {keybind.action_argument}"
    if kind == ActionKind.WORKSPACE:
        return f"Switch to workspace {keybind.action_argument}"
    if kind == ActionKind.MOVE_TO_WORKSPACE:
        return f"Move to workspace {keybind.action_argument}"
    if kind == ActionKind.KILL_ACTIVE:
        return "Close active window"
    if kind == ActionKind.TOGGLE_FLOATING:
        return "Toggle floating mode"
    if kind == ActionKind.FULLSCREEN:
        return "Toggle maximize" if keybind.action_argument == "0" else "Toggle fullscreen"
    return keybind.action_argument


def render_general(general: GeneralSettings) -> List[str]:
    return [
        "general {",
        f"    gaps_in = {general.gaps_in}",
        f"    gaps_out = {general.gaps_out}",
        f"    border_size = {general.border_size}",
        f"    col.active_border = rgba({hex_to_rgba(general.border_color)})",
        "}",
    ]


def generate(document: ConfigDocument, generated_at: Optional[datetime] = None) -> str:
    """
    Render a ConfigDocument as Hyprland configuration text.

    Args:
        document: Document to render
        generated_at: Timestamp for the header line (defaults to now)

    Returns:
        Configuration text ending with a newline
    """
    timestamp = (generated_at or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")

    lines = [
        HEADER_TITLE,
        f"{TIMESTAMP_PREFIX}{timestamp}",
        "",
        "# General configuration",
        *render_general(document.general),
        "",
        "# Keybinds",
    ]
    lines.extend(render_bind(keybind) for keybind in document.keybinds)
    lines.extend(["", TRAILER])

    return "\n".join(lines) + "\n"


def strip_timestamp(text: str) -> str:
    """Drop the generation timestamp line so outputs can be compared."""
    return "\n".join(
        line for line in text.split("\n") if not line.startswith(TIMESTAMP_PREFIX)
    )
