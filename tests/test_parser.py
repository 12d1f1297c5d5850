"""
Parser test suite.

Tests cover:
- Bind line recognition and modifier splitting
- Action classification (exec, workspace, killactive, custom)
- Lenient handling of malformed and unrelated lines
- The opt-in general { } block reader
"""

import pytest

from hypr_config_manager.config.parser import (
    classify_action,
    parse,
    parse_bind_line,
    parse_general_block,
    split_modifiers,
)
from hypr_config_manager.models import ActionKind, GeneralSettings
from hypr_config_manager.sample import SAMPLE_CONFIG


class TestBindLines:
    """Test recognition of `bind = mods, key, action` lines."""

    def test_exec_binding(self):
        document = parse("bind = SUPER, Q, exec, kitty")

        assert len(document.keybinds) == 1
        keybind = document.keybinds[0]
        assert keybind.modifiers == ["SUPER"]
        assert keybind.key == "Q"
        assert keybind.action_kind == ActionKind.EXEC
        assert keybind.action_argument == "kitty"

    def test_space_separated_modifiers_with_killactive(self):
        document = parse("bind = SUPER SHIFT, C, killactive")

        keybind = document.keybinds[0]
        assert keybind.modifiers == ["SUPER", "SHIFT"]
        assert keybind.key == "C"
        assert keybind.action_kind == ActionKind.KILL_ACTIVE
        assert keybind.action_argument == ""

    def test_plus_separated_modifiers_keep_order(self):
        keybind = parse("bind = SHIFT + SUPER +ALT, X, exec, foot").keybinds[0]
        assert keybind.modifiers == ["SHIFT", "SUPER", "ALT"]

    def test_whitespace_tolerance(self):
        keybind = parse("   bind=SUPER,Return,exec,foot --server   ").keybinds[0]
        assert keybind.key == "Return"
        assert keybind.action_kind == ActionKind.EXEC
        assert keybind.action_argument == "foot --server"

    def test_exec_argument_keeps_commas(self):
        keybind = parse("bind = SUPER, E, exec, notify-send a, b").keybinds[0]
        assert keybind.action_argument == "notify-send a, b"

    def test_workspace_binding(self):
        keybind = parse("bind = SUPER, 1, workspace, 1").keybinds[0]
        assert keybind.action_kind == ActionKind.WORKSPACE
        assert keybind.action_argument == "1"

    def test_keybinds_in_order_of_appearance(self):
        document = parse(SAMPLE_CONFIG)
        assert [kb.key for kb in document.keybinds] == ["Q", "C", "1", "2", "F"]

    def test_fresh_unique_ids(self):
        first = parse(SAMPLE_CONFIG)
        second = parse(SAMPLE_CONFIG)

        ids = [kb.id for kb in first.keybinds] + [kb.id for kb in second.keybinds]
        assert len(set(ids)) == len(ids)

    def test_repeated_modifier_collapsed(self):
        keybind = parse("bind = SUPER + SUPER + SHIFT, A, exec, a").keybinds[0]
        assert keybind.modifiers == ["SUPER", "SHIFT"]


class TestActionClassification:
    """Only exec, workspace and killactive are classified; the rest are custom."""

    @pytest.mark.parametrize("action,kind,argument", [
        ("exec, kitty", ActionKind.EXEC, "kitty"),
        ("exec,kitty", ActionKind.EXEC, "kitty"),
        ("workspace, 4", ActionKind.WORKSPACE, "4"),
        ("killactive", ActionKind.KILL_ACTIVE, ""),
        ("movetoworkspace, 3", ActionKind.CUSTOM, "movetoworkspace, 3"),
        ("togglefloating", ActionKind.CUSTOM, "togglefloating"),
        ("fullscreen, 1", ActionKind.CUSTOM, "fullscreen, 1"),
        ("killactive, now", ActionKind.CUSTOM, "killactive, now"),
        ("pseudo,", ActionKind.CUSTOM, "pseudo,"),
    ])
    def test_classify(self, action, kind, argument):
        assert classify_action(action) == (kind, argument)

    def test_togglefloating_parses_as_custom(self):
        keybind = parse("bind = SUPER, F, togglefloating").keybinds[0]
        assert keybind.action_kind == ActionKind.CUSTOM
        assert keybind.action_argument == "togglefloating"


class TestLenientParsing:
    """Malformed input never raises; unusable lines are dropped."""

    @pytest.mark.parametrize("line", [
        "bind = SUPER, Q",
        "bind = SUPER, Q, exec,",
        "bind = SUPER, Q, ",
        "unbind = SUPER, Q, exec, kitty",
        "bindm = SUPER, mouse:272, movewindow",
        "# bind = SUPER, Q, exec, kitty",
        "windowrule = float, ^(kitty)$",
        "",
    ])
    def test_unusable_lines_skipped(self, line):
        assert parse_bind_line(line) is None

    def test_garbage_text(self):
        document = parse("{{{ not a config\n\x00\nbind =\n= , ,")
        assert document.keybinds == []

    def test_empty_text(self):
        document = parse("")
        assert document.keybinds == []
        assert document.source_text == ""

    def test_valid_lines_survive_around_invalid_ones(self):
        text = "bind = SUPER, Q\nbind = SUPER, W, exec, firefox\nnonsense\n"
        document = parse(text)
        assert [kb.key for kb in document.keybinds] == ["W"]


class TestDocumentFields:
    """Test source text and general settings handling."""

    def test_source_text_preserved(self):
        assert parse(SAMPLE_CONFIG).source_text == SAMPLE_CONFIG

    def test_general_block_ignored_by_default(self):
        document = parse("general {\n    gaps_in = 20\n}\n")
        assert document.general == GeneralSettings()

    def test_caller_supplied_general_is_copied(self):
        general = GeneralSettings(gaps_in=9)
        document = parse("bind = SUPER, Q, exec, kitty", general=general)

        assert document.general.gaps_in == 9
        document.general.gaps_in = 1
        assert general.gaps_in == 9


def test_split_modifiers_drops_empty_tokens():
    assert split_modifiers(" + SUPER ++ SHIFT + ") == ["SUPER", "SHIFT"]


class TestGeneralBlock:
    """Test the opt-in general block reader."""

    def test_reads_generated_block(self):
        text = (
            "general {\n"
            "    gaps_in = 8\n"
            "    gaps_out = 16\n"
            "    border_size = 3\n"
            "    col.active_border = rgba(51, 204, 255, 255)\n"
            "}\n"
        )
        assert parse_general_block(text) == GeneralSettings(
            gaps_in=8, gaps_out=16, border_size=3, border_color="#33ccff"
        )

    def test_reads_hex_rgba(self):
        text = "general {\n    col.active_border = rgba(33ccffee)\n}\n"
        assert parse_general_block(text).border_color == "#33ccff"

    def test_missing_block(self):
        assert parse_general_block("bind = SUPER, Q, exec, kitty") is None

    def test_bad_values_keep_defaults(self):
        text = (
            "general {\n"
            "    gaps_in = lots\n"
            "    gaps_out = -4\n"
            "    col.active_border = rgba(300, 0, 0, 255)\n"
            "    layout = dwindle\n"
            "}\n"
        )
        assert parse_general_block(text) == GeneralSettings()
