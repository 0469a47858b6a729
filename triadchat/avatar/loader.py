"""Registry of avatar presets and the ANSI-to-span converter for plugin output."""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path

from triadchat.avatar.base import AvatarPlugin, AvatarSize, AvatarState
from triadchat.avatar.builtin import ai_default, all_builtins
from triadchat.style import Color, Line, Span, Style


class AvatarManager:
    """Holds the available avatar presets and renders them by name.

    Builtin presets are always registered first. Further plugins may be passed
    in; a plugin whose preset name matches an earlier one replaces it.
    """

    def __init__(
        self,
        plugin_dir: str | os.PathLike[str] | None = None,
        extra_plugins: Iterable[AvatarPlugin] = (),
    ) -> None:
        self.plugin_dir = Path(plugin_dir) if plugin_dir is not None else None
        plugins = [*all_builtins(), *extra_plugins]

        # Keep the last plugin registered under each name, in original order.
        seen: set[str] = set()
        kept: list[AvatarPlugin] = []
        for plugin in reversed(plugins):
            if plugin.preset_name not in seen:
                seen.add(plugin.preset_name)
                kept.append(plugin)
        kept.reverse()
        self._plugins = kept

    def render(self, preset: str, state: AvatarState, size: AvatarSize) -> list[Line]:
        """Render a preset; unknown presets fall back to ``ai_default``."""
        plugin = self._find_plugin(preset)
        if plugin is None:
            return ai_default().render(state, size)
        return plugin.render(state, size)

    def list_all_presets(self) -> list[str]:
        """Names of all available presets, without duplicates."""
        return [plugin.preset_name for plugin in self._plugins]

    def _find_plugin(self, preset: str) -> AvatarPlugin | None:
        return next((p for p in self._plugins if p.preset_name == preset), None)


# ─── ANSI parsing ────────────────────────────────────────────────────────────

_FOREGROUND: dict[int, Color] = {
    30: Color.BLACK,
    31: Color.RED,
    32: Color.GREEN,
    33: Color.YELLOW,
    34: Color.BLUE,
    35: Color.MAGENTA,
    36: Color.CYAN,
    37: Color.GRAY,
    90: Color.DARK_GRAY,
    91: Color.LIGHT_RED,
    92: Color.LIGHT_GREEN,
    93: Color.LIGHT_YELLOW,
    94: Color.LIGHT_BLUE,
    95: Color.LIGHT_MAGENTA,
    96: Color.LIGHT_CYAN,
    97: Color.WHITE,
}
_BACKGROUND: dict[int, Color] = {code + 10: color for code, color in _FOREGROUND.items()}

_CODE = re.compile(r"\+?[0-9]+")
_U32_MAX = 0xFFFF_FFFF


def _apply_code(style: Style, code: int) -> Style:
    if code == 0:
        return Style()
    if code == 1:
        return replace(style, bold=True)
    if code == 39:
        return style.with_fg(None)
    if code == 49:
        return style.with_bg(None)
    if code in _FOREGROUND:
        return style.with_fg(_FOREGROUND[code])
    if code in _BACKGROUND:
        return style.with_bg(_BACKGROUND[code])
    return style


def _apply_params(style: Style, params: str) -> Style:
    for param in params.split(";"):
        if _CODE.fullmatch(param) is None:
            continue
        code = int(param)
        if code <= _U32_MAX:
            style = _apply_code(style, code)
    return style


def _split_lines(text: str) -> list[str]:
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _parse_line(line: str) -> Line:
    spans: list[Span] = []
    style = Style()
    pos = 0
    while (esc_start := line.find("\x1b", pos)) != -1:
        if esc_start > pos:
            spans.append(Span(line[pos:esc_start], style))
        if line.startswith("\x1b[", esc_start):
            m_pos = line.find("m", esc_start)
            if m_pos != -1:
                style = _apply_params(style, line[esc_start + 2:m_pos])
                pos = m_pos + 1
            else:
                pos = esc_start + 2
        else:
            pos = esc_start + 1
    if pos < len(line):
        spans.append(Span(line[pos:], style))
    return Line(tuple(spans))


def parse_ansi(text: str) -> list[Line]:
    """Convert text with basic SGR colour escapes into styled lines."""
    return [_parse_line(line) for line in _split_lines(text)]