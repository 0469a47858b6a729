"""Avatar states, sizes, the plugin interface and the half-block pixel renderer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum

from triadchat.style import Color, Line, Span, Style


class AvatarState(Enum):
    """Logical state of an avatar subject (AI or human peer)."""

    # AI states
    IDLE = "idle"
    THINKING = "thinking"
    ACTING = "acting"
    DISABLED = "disabled"
    FAILED = "failed"
    # Peer presence states
    ONLINE = "online"
    OFFLINE = "offline"
    BUSY = "busy"
    AWAY = "away"


class AvatarSize(Enum):
    """Rendering size hint for avatar art."""

    COMPACT = "compact"
    NORMAL = "normal"
    EXPRESSIVE = "expressive"

    @classmethod
    def for_width(cls, cols: int) -> AvatarSize:
        """Compact below 80 terminal columns, otherwise normal."""
        return cls.COMPACT if cols < 80 else cls.NORMAL


class AvatarPlugin(ABC):
    """Something that renders avatar art for a named preset."""

    @property
    @abstractmethod
    def preset_name(self) -> str:
        """The unique preset name, e.g. ``"human_default"``."""

    @abstractmethod
    def render(self, state: AvatarState, size: AvatarSize) -> list[Line]:
        """Render the avatar for the given state and size."""


def _cell(top: Color, bottom: Color) -> Span:
    if top == Color.RESET and bottom == Color.RESET:
        return Span(" ")
    if bottom == Color.RESET:
        return Span("▀", Style(fg=top))
    if top == Color.RESET:
        return Span("▄", Style(fg=bottom))
    return Span("▀", Style(fg=top, bg=bottom))


def colors_to_spans(colors: Sequence[Sequence[Color]]) -> list[Line]:
    """Turn a colour grid into lines where each character covers two vertical pixels."""
    if not colors:
        return []
    width = max((len(row) for row in colors), default=0)
    lines: list[Line] = []
    for y in range(0, len(colors), 2):
        top_row = list(colors[y])
        bottom_row = list(colors[y + 1]) if y + 1 < len(colors) else []
        top_row += [Color.RESET] * (width - len(top_row))
        bottom_row += [Color.RESET] * (width - len(bottom_row))
        lines.append(Line(tuple(_cell(t, b) for t, b in zip(top_row, bottom_row))))
    return lines