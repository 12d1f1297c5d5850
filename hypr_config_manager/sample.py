"""Sample configuration used when no hyprland.conf exists yet."""

from .models import ActionKind, ConfigDocument, GeneralSettings, Keybind

SAMPLE_CONFIG = """# Example Hyprland Configuration

general {
    gaps_in = 5
    gaps_out = 10
    border_size = 2
    col.active_border = rgba(255, 255, 255, 255)
}

# Keybinds
bind = SUPER, Q, exec, kitty
bind = SUPER SHIFT, C, killactive
bind = SUPER, 1, workspace, 1
bind = SUPER, 2, workspace, 2
bind = SUPER, F, togglefloating

# Window rules
windowrule = float, ^(kitty)$
"""


def sample_document() -> ConfigDocument:
    """Starter keybinds shown to a first-time user."""
    return ConfigDocument(
        keybinds=[
            Keybind(modifiers=["SUPER"], key="Q", action_kind=ActionKind.EXEC, action_argument="kitty"),
            Keybind(modifiers=["SUPER", "SHIFT"], key="C", action_kind=ActionKind.KILL_ACTIVE),
            Keybind(modifiers=["SUPER"], key="1", action_kind=ActionKind.WORKSPACE, action_argument="1"),
        ],
        general=GeneralSettings(),
    )
