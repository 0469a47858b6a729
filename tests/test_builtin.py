import pytest

from triadchat.avatar.base import AvatarSize, AvatarState
from triadchat.avatar.builtin import (
    ai_default,
    all_builtins,
    claude,
    human_default,
    neko,
    render_ai,
    render_human,
    robot_guardian,
)
from triadchat.style import Color

ALL_STATES = list(AvatarState)


def render_text(lines):
    return "\n".join(line.text() for line in lines)


def test_all_builtins_have_unique_preset_names():
    names = [plugin.preset_name for plugin in all_builtins()]
    assert len(set(names)) == len(names)


def test_builtin_preset_names():
    names = [plugin.preset_name for plugin in all_builtins()]
    assert names == ["human_default", "ai_default", "robot_guardian", "claude", "neko"]


@pytest.mark.parametrize("state", ALL_STATES)
def test_compact_render_is_single_visible_line_for_every_builtin_state(state):
    for plugin in all_builtins():
        rendered = plugin.render(state, AvatarSize.COMPACT)
        assert len(rendered) == 1, plugin.preset_name
        assert render_text(rendered).strip() != "", plugin.preset_name


def test_active_ai_states_change_every_builtin_avatar():
    for plugin in all_builtins():
        idle = plugin.render(AvatarState.IDLE, AvatarSize.NORMAL)
        thinking = plugin.render(AvatarState.THINKING, AvatarSize.NORMAL)
        acting = plugin.render(AvatarState.ACTING, AvatarSize.NORMAL)
        assert idle != thinking, plugin.preset_name
        assert idle != acting, plugin.preset_name


def test_presence_states_change_human_facing_builtin_avatars():
    for plugin in all_builtins():
        online = render_text(plugin.render(AvatarState.ONLINE, AvatarSize.COMPACT))
        away = render_text(plugin.render(AvatarState.AWAY, AvatarSize.COMPACT))
        offline = render_text(plugin.render(AvatarState.OFFLINE, AvatarSize.COMPACT))
        assert online != away, plugin.preset_name
        assert online != offline, plugin.preset_name


@pytest.mark.parametrize("size", list(AvatarSize))
@pytest.mark.parametrize("state", ALL_STATES)
def test_every_plugin_renders_every_state_and_size(state, size):
    for plugin in all_builtins():
        assert len(plugin.render(state, size)) >= 1


def test_human_normal_idle_art():
    lines = human_default().render(AvatarState.IDLE, AvatarSize.NORMAL)
    assert [line.text() for line in lines] == [" (^_^)", "  |H|", "  / \\"]
    assert all(line.spans[0].style.fg == Color.CYAN for line in lines)


def test_human_thinking_falls_back_to_neutral_face():
    assert render_text(human_default().render(AvatarState.THINKING, AvatarSize.COMPACT)) == "[H]·"


def test_ai_compact_thinking():
    (line,) = ai_default().render(AvatarState.THINKING, AvatarSize.COMPACT)
    assert line.text() == "[AI]…"
    assert line.spans[0].style.fg == Color.YELLOW


def test_ai_normal_is_pixel_grid():
    lines = ai_default().render(AvatarState.IDLE, AvatarSize.NORMAL)
    assert len(lines) == 4
    assert all(len(line.spans) == 8 for line in lines)
    assert lines == ai_default().render(AvatarState.IDLE, AvatarSize.EXPRESSIVE)


def test_ai_thinking_grid_uses_orange_sockets():
    lines = ai_default().render(AvatarState.THINKING, AvatarSize.NORMAL)
    colours = {span.style.fg for line in lines for span in line.spans}
    colours |= {span.style.bg for line in lines for span in line.spans}
    assert Color.rgb(255, 165, 0) in colours


def test_render_helpers_match_presets():
    for state in ALL_STATES:
        for size in AvatarSize:
            assert render_human(state, size) == human_default().render(state, size)
            assert render_ai(state, size) == ai_default().render(state, size)


def test_text_presets_use_their_colour():
    expected = {
        robot_guardian(): Color.YELLOW,
        claude(): Color.LIGHT_MAGENTA,
        neko(): Color.LIGHT_RED,
    }
    for plugin, colour in expected.items():
        lines = plugin.render(AvatarState.BUSY, AvatarSize.EXPRESSIVE)
        assert all(span.style.fg == colour for line in lines for span in line.spans)


def test_neko_compact_online():
    assert render_text(neko().render(AvatarState.ONLINE, AvatarSize.COMPACT)) == "=^・ω・^="