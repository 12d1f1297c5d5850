"""
Parser for Hyprland configuration text.

Recognizes `bind = <mods>, <key>, <action>` lines and turns them into a
ConfigDocument. Parsing is lenient: lines that do not match, or that match but
cannot form a valid Keybind, are skipped and never raise.
"""

import logging
import re
from typing import List, Optional, Tuple

from pydantic import ValidationError

from ..models import ActionKind, ConfigDocument, GeneralSettings, Keybind

logger = logging.getLogger(__name__)

BIND_PATTERN = re.compile(r'^\s*bind\s*=\s*([^,\n]+),\s*([^,\n]+),\s*(.*)$')
GENERAL_BLOCK_PATTERN = re.compile(r'^\s*general\s*\{(.*?)^\s*\}', re.MULTILINE | re.DOTALL)
SETTING_PATTERN = re.compile(r'^\s*([\w.]+)\s*=\s*(.+?)\s*$')
RGBA_TUPLE_PATTERN = re.compile(r'rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*[\d.]+\s*)?\)')
RGBA_HEX_PATTERN = re.compile(r'rgba\(([0-9a-fA-F]{6})(?:[0-9a-fA-F]{2})?\)')

# Only these prefixes are classified; movetoworkspace, togglefloating and
# fullscreen lines come back as CUSTOM with the full action text.
PREFIXED_KINDS = (
    ("exec,", ActionKind.EXEC),
    ("workspace,", ActionKind.WORKSPACE),
)


def split_modifiers(modifiers_text: str) -> List[str]:
    """
    Split a modifier group into names, keeping typed order.

    `SUPER + SHIFT` and `SUPER SHIFT` both yield ["SUPER", "SHIFT"].
    Empty tokens are dropped and repeats keep their first position.
    """
    if "+" in modifiers_text:
        tokens = [t.strip() for t in modifiers_text.split("+")]
    else:
        tokens = modifiers_text.split()

    modifiers = []
    for token in tokens:
        if token and token not in modifiers:
            modifiers.append(token)
    return modifiers


def classify_action(action: str) -> Tuple[ActionKind, str]:
    """
    Classify a bind action by literal prefix.

    Returns:
        (kind, argument) where argument is the trimmed remainder for prefixed
        kinds, empty for killactive and the full action text otherwise
    """
    for prefix, kind in PREFIXED_KINDS:
        if action.startswith(prefix):
            return kind, action[len(prefix):].strip()

    if action == ActionKind.KILL_ACTIVE.value:
        return ActionKind.KILL_ACTIVE, ""

    return ActionKind.CUSTOM, action


def parse_bind_line(line: str) -> Optional[Keybind]:
    """Parse one line, returning None when it is not a usable bind line."""
    match = BIND_PATTERN.match(line)
    if not match:
        return None

    modifiers_text, key, action = (group.strip() for group in match.groups())
    kind, argument = classify_action(action)

    try:
        return Keybind(
            modifiers=split_modifiers(modifiers_text),
            key=key,
            action_kind=kind,
            action_argument=argument,
        )
    except ValidationError as e:
        logger.debug(f"Skipping bind line {line!r}: {e.errors()[0]['msg']}")
        return None


def parse(text: str, general: Optional[GeneralSettings] = None) -> ConfigDocument:
    """
    Parse configuration text into a ConfigDocument.

    Only bind lines are extracted. Every other line, including the general
    block, is dropped here; the caller decides which GeneralSettings the
    document carries.

    Args:
        text: Raw configuration text
        general: Settings to attach (defaults when None)

    Returns:
        ConfigDocument with keybinds in order of appearance
    """
    keybinds = []
    skipped = 0

    for line in text.splitlines():
        keybind = parse_bind_line(line)
        if keybind is not None:
            keybinds.append(keybind)
        elif line.strip() and not line.lstrip().startswith("#"):
            skipped += 1

    # TODO: skipped lines are lost on the next save; keep them as opaque passthrough lines
    if skipped:
        logger.debug(f"Parser skipped {skipped} non-bind line(s)")
    logger.debug(f"Parsed {len(keybinds)} keybind(s)")

    return ConfigDocument(
        keybinds=keybinds,
        general=general.model_copy() if general else GeneralSettings(),
        source_text=text,
    )


def _parse_color(value: str) -> Optional[str]:
    match = RGBA_TUPLE_PATTERN.search(value)
    if match:
        channels = [int(c) for c in match.groups()]
        if all(0 <= c <= 255 for c in channels):
            return "#" + "".join(f"{c:02x}" for c in channels)
        return None

    match = RGBA_HEX_PATTERN.search(value)
    if match:
        return "#" + match.group(1).lower()
    return None


def parse_general_block(text: str) -> Optional[GeneralSettings]:
    """
    Read the first `general { }` block back into GeneralSettings.

    Entries that are missing or cannot be coerced keep their defaults.

    Returns:
        GeneralSettings, or None if the text has no general block
    """
    match = GENERAL_BLOCK_PATTERN.search(text)
    if not match:
        return None

    values = {}
    for line in match.group(1).splitlines():
        setting = SETTING_PATTERN.match(line)
        if not setting:
            continue
        name, value = setting.groups()

        if name in ("gaps_in", "gaps_out", "border_size"):
            try:
                number = int(value)
            except ValueError:
                continue
            if number >= 0:
                values[name] = number
        elif name == "col.active_border":
            color = _parse_color(value)
            if color:
                values["border_color"] = color

    return GeneralSettings(**values)
