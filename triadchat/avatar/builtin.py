"""The avatar presets that ship with the application."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from triadchat.avatar.base import AvatarPlugin, AvatarSize, AvatarState, colors_to_spans
from triadchat.style import Color, Line, Span, Style

S = AvatarState


def _table(
    entries: Iterable[tuple[tuple[AvatarState, ...], str]], default: str | None = None
) -> dict[AvatarState, str]:
    table: dict[AvatarState, str] = {}
    for states, text in entries:
        for state in states:
            table[state] = text
    for state in AvatarState:
        if state not in table:
            if default is None:
                raise ValueError(f"no art for state {state}")
            table[state] = default
    return table


class _TextAvatar(AvatarPlugin):
    """An avatar drawn from per-state text art in a single colour."""

    def __init__(
        self,
        name: str,
        color: Color,
        arts: Mapping[AvatarSize, Mapping[AvatarState, str]],
    ) -> None:
        self._name = name
        self._color = color
        self._arts = arts

    @property
    def preset_name(self) -> str:
        return self._name

    def render(self, state: AvatarState, size: AvatarSize) -> list[Line]:
        style = Style(fg=self._color)
        art = self._arts[size][state]
        return [Line((Span(text, style),)) for text in art.split("\n")]


# ─── human_default ───────────────────────────────────────────────────────────

_HUMAN = {
    AvatarSize.COMPACT: _table(
        [
            ((S.ONLINE, S.IDLE), "[H]●"),
            ((S.BUSY, S.ACTING), "[H]◉"),
            ((S.AWAY,), "[H]◌"),
            ((S.OFFLINE, S.DISABLED, S.FAILED), "[H]○"),
        ],
        default="[H]·",
    ),
    AvatarSize.NORMAL: _table(
        [
            ((S.ONLINE, S.IDLE), " (^_^)\n  |H|\n  / \\"),
            ((S.BUSY, S.ACTING), " (>_<)\n  |H|\n  / \\"),
            ((S.AWAY,), " (-_-)\n  |H|\n  / \\"),
            ((S.OFFLINE, S.DISABLED, S.FAILED), " (x_x)\n  |H|\n  / \\"),
        ],
        default=" (o_o)\n  |H|\n  / \\",
    ),
    AvatarSize.EXPRESSIVE: _table(
        [
            ((S.ONLINE, S.IDLE), "  .-\"\"-.\n ( ^_^ )\n  \\|H|/\n  / | \\\n /  |  \\"),
            ((S.BUSY, S.ACTING), "  .-\"\"-.\n ( >_< )\n  \\|H|/\n  / | \\\n /  |  \\"),
            ((S.AWAY,), "  .-\"\"-.\n ( -_- )\n  \\|H|/\n  / | \\\n /  |  \\"),
            (
                (S.OFFLINE, S.DISABLED, S.FAILED),
                "  .-\"\"-.\n ( x_x )\n  \\|H|/\n  / | \\\n /  |  \\",
            ),
        ],
        default="  .-\"\"-.\n ( o_o )\n  \\|H|/\n  / | \\\n /  |  \\",
    ),
}


def human_default() -> AvatarPlugin:
    """The ``human_default`` preset."""
    return _TextAvatar("human_default", Color.CYAN, _HUMAN)


# ─── ai_default ──────────────────────────────────────────────────────────────

_AI_COMPACT: dict[AvatarState, tuple[str, Color]] = {
    S.IDLE: ("[AI]◆", Color.GREEN),
    S.ONLINE: ("[AI]◆", Color.GREEN),
    S.THINKING: ("[AI]…", Color.YELLOW),
    S.ACTING: ("[AI]▶", Color.MAGENTA),
    S.DISABLED: ("[AI]□", Color.GRAY),
    S.FAILED: ("[AI]✗", Color.RED),
}
_AI_COMPACT_DEFAULT = ("[AI]·", Color.GRAY)


class _AiDefault(AvatarPlugin):
    """The pixel-art AI face, coloured by what the AI is doing."""

    @property
    def preset_name(self) -> str:
        return "ai_default"

    @staticmethod
    def _grid(state: AvatarState) -> list[list[Color]]:
        if state is S.THINKING:
            h, s, p = Color.YELLOW, Color.rgb(255, 165, 0), Color.WHITE
        elif state is S.ACTING:
            h, s, p = Color.MAGENTA, Color.BLUE, Color.CYAN
        else:
            h, s, p = Color.GREEN, Color.DARK_GRAY, Color.WHITE
        x = Color.RESET
        return [
            [x, x, h, h, h, h, x, x],
            [x, h, h, h, h, h, h, x],
            [h, h, h, h, h, h, h, h],
            [h, s, s, h, h, s, s, h],
            [h, p, p, h, h, p, p, h],
            [h, h, h, h, h, h, h, h],
            [x, h, h, h, h, h, h, x],
            [x, x, h, h, h, h, x, x],
        ]

    def render(self, state: AvatarState, size: AvatarSize) -> list[Line]:
        if size is AvatarSize.COMPACT:
            text, color = _AI_COMPACT.get(state, _AI_COMPACT_DEFAULT)
            return [Line((Span(text, Style(fg=color)),))]
        return colors_to_spans(self._grid(state))


def ai_default() -> AvatarPlugin:
    """The ``ai_default`` preset."""
    return _AiDefault()


# ─── robot_guardian ──────────────────────────────────────────────────────────

_ROBOT = {
    AvatarSize.COMPACT: _table(
        [
            ((S.IDLE, S.ONLINE), "[RG]■"),
            ((S.THINKING,), "[RG]⠿"),
            ((S.ACTING,), "[RG]⚡"),
            ((S.DISABLED,), "[RG]░"),
            ((S.FAILED,), "[RG]✗"),
            ((S.BUSY,), "[RG]◈"),
            ((S.AWAY,), "[RG]◇"),
            ((S.OFFLINE,), "[RG]□"),
        ]
    ),
    AvatarSize.NORMAL: _table(
        [
            ((S.IDLE, S.ONLINE), " <|=|>\n [RG]\n  /|\\"),
            ((S.THINKING,), " <|?|>\n [RG] ~\n  /|\\"),
            ((S.ACTING,), " <|!|>\n [RG]\n  >>\\"),
            ((S.DISABLED,), " <|-|>\n [RG]\n  /|\\"),
            ((S.FAILED,), " <|X|>\n [RG]\n  /|\\"),
            ((S.BUSY,), " <|*|>\n [RG]\n  /|\\"),
            ((S.AWAY,), " <|.|>\n [RG]\n  /|\\"),
            ((S.OFFLINE,), " <| |>\n [RG]\n  /|\\"),
        ]
    ),
    AvatarSize.EXPRESSIVE: _table(
        [
            ((S.IDLE, S.ONLINE), " ┌─────┐\n │ |=| │\n │[RG] │\n └──┬──┘\n   /|\\"),
            ((S.THINKING,), " ┌─────┐\n │ |?| │~\n │[RG] │\n └──┬──┘\n   /|\\"),
            ((S.ACTING,), " ┌─────┐\n │ |!| │\n │[RG] │\n └──┬──┘\n  >>|\\"),
            ((S.DISABLED,), " ┌─────┐\n │ |-| │\n │[RG] │\n └──┬──┘\n   /|\\"),
            ((S.FAILED,), " ┌─────┐\n │ |X| │\n │[RG] │\n └──┬──┘\n   /|\\"),
            ((S.BUSY,), " ┌─────┐\n │ |*| │\n │[RG] │\n └──┬──┘\n   /|\\"),
            ((S.AWAY,), " ┌─────┐\n │ |.| │\n │[RG] │\n └──┬──┘\n   /|\\"),
            ((S.OFFLINE,), " ┌─────┐\n │ | | │\n │[RG] │\n └──┬──┘\n   /|\\"),
        ]
    ),
}


def robot_guardian() -> AvatarPlugin:
    """The ``robot_guardian`` preset."""
    return _TextAvatar("robot_guardian", Color.YELLOW, _ROBOT)


# ─── claude ──────────────────────────────────────────────────────────────────

_CLAUDE = {
    AvatarSize.COMPACT: _table(
        [
            ((S.IDLE, S.ONLINE), "◈(・ω・)"),
            ((S.THINKING,), "◉(・・・)"),
            ((S.ACTING,), "▶(☆ω☆)"),
            ((S.FAILED,), "✕(×_×)"),
            ((S.DISABLED,), "○(・ー・)"),
            ((S.BUSY,), "◉(>ω<)"),
            ((S.AWAY,), "◈(-ω-)"),
            ((S.OFFLINE,), "○(._.)"),
        ]
    ),
    AvatarSize.NORMAL: _table(
        [
            ((S.IDLE, S.ONLINE), " (・ω・)\n╰[claude]╯\n  /   \\"),
            ((S.THINKING,), " (・・・)\n╰[claude]╯ ~\n  /   \\"),
            ((S.ACTING,), " (☆ω☆)\n╰[claude]╯>>\n  >>  \\"),
            ((S.FAILED,), " (×_×)\n╰[claude]╯\n  /   \\"),
            ((S.DISABLED,), " (・ー・)\n╰[claude]╯\n  /   \\"),
            ((S.BUSY,), " (>ω<)\n╰[claude]╯\n  / ! \\"),
            ((S.AWAY,), " (-ω-)\n╰[claude]╯\n  /   \\"),
            ((S.OFFLINE,), " (._. )\n╰[claude]╯\n  /   \\"),
        ]
    ),
    AvatarSize.EXPRESSIVE: _table(
        [
            ((S.IDLE, S.ONLINE), "╭──────╮\n│ ◕ω◕  │\n│claude│\n╰──┬───╯\n __|__\n/     \\"),
            ((S.THINKING,), "╭──────╮\n│ ◉ ◉  │~\n│claude│\n╰──┬───╯\n __|__\n/     \\"),
            ((S.ACTING,), "╭──────╮\n│ ☆ω☆  │\n│claude│\n╰──┬───╯\n >>|__\n/>>   \\"),
            ((S.FAILED,), "╭──────╮\n│ ×_×  │\n│claude│\n╰──┬───╯\n __|__\n/     \\"),
            ((S.DISABLED,), "╭──────╮\n│ ・ー・ │\n│claude│\n╰──┬───╯\n __|__\n/     \\"),
            ((S.BUSY,), "╭──────╮\n│ >ω<  │\n│claude│\n╰──┬───╯\n __|__\n/ ! \\"),
            ((S.AWAY,), "╭──────╮\n│ -ω-  │\n│claude│\n╰──┬───╯\n __|__\nz/    \\"),
            ((S.OFFLINE,), "╭──────╮\n│ ._.  │\n│claude│\n╰──┬───╯\n __|__\n/     \\"),
        ]
    ),
}


def claude() -> AvatarPlugin:
    """The ``claude`` preset."""
    return _TextAvatar("claude", Color.LIGHT_MAGENTA, _CLAUDE)


# ─── neko ────────────────────────────────────────────────────────────────────

_NEKO = {
    AvatarSize.COMPACT: _table(
        [
            ((S.ONLINE, S.IDLE), "=^・ω・^="),
            ((S.AWAY,), "=^-ω-^="),
            ((S.OFFLINE,), "=^x_x^="),
            ((S.BUSY, S.ACTING), "=^>ω<^="),
            ((S.THINKING,), "=^・・・^="),
            ((S.DISABLED,), "=^・ー・^="),
            ((S.FAILED,), "=^×_×^="),
        ]
    ),
    AvatarSize.NORMAL: _table(
        [
            ((S.ONLINE, S.IDLE), " /\\_/\\\n( ^ω^ )\n > 🐾 <"),
            ((S.AWAY,), " /\\_/\\\n( -ω- )\n > zzz"),
            ((S.OFFLINE,), " /\\_/\\\n( x_x )\n >    <"),
            ((S.BUSY, S.ACTING), " /\\_/\\\n( >ω< )\n > !! <"),
            ((S.THINKING,), " /\\_/\\\n( ・・・)\n > ... <"),
            ((S.DISABLED,), " /\\_/\\\n( ・ー・)\n >    <"),
            ((S.FAILED,), " /\\_/\\\n( ×_× )\n > !! <"),
        ]
    ),
    AvatarSize.EXPRESSIVE: _table(
        [
            (
                (S.ONLINE, S.IDLE),
                " /\\_____/\\\n/  ^   ^  \\\n\\ ( ◕ω◕ ) /\n \\  =^=  /\n  \\/   \\/\n  neko!",
            ),
            (
                (S.AWAY,),
                " /\\_____/\\\n/  -   -  \\\n\\ ( -ω- ) /\n \\  =^=  /\n  \\/   \\/\n  zzzz",
            ),
            (
                (S.OFFLINE,),
                " /\\_____/\\\n/  x   x  \\\n\\ ( x_x ) /\n \\  =^=  /\n  \\/   \\/\n  gone",
            ),
            (
                (S.BUSY, S.ACTING),
                " /\\_____/\\\n/  >   <  \\\n\\ ( >ω< ) /\n \\  =^=  /\n  \\/   \\/\n  busy!",
            ),
            (
                (S.THINKING,),
                " /\\_____/\\\n/  .   .  \\\n\\ (・・・) /\n \\  =^=  /\n  \\/   \\/\n  hmm...",
            ),
            (
                (S.DISABLED,),
                " /\\_____/\\\n/  -   -  \\\n\\ (・ー・) /\n \\  =^=  /\n  \\/   \\/\n  ...",
            ),
            (
                (S.FAILED,),
                " /\\_____/\\\n/  ×   ×  \\\n\\ ( ×_× ) /\n \\  =^=  /\n  \\/   \\/\n  oh no",
            ),
        ]
    ),
}


def neko() -> AvatarPlugin:
    """The ``neko`` preset."""
    return _TextAvatar("neko", Color.LIGHT_RED, _NEKO)


# ─── all presets ─────────────────────────────────────────────────────────────


def all_builtins() -> list[AvatarPlugin]:
    """Every builtin preset, in registration order."""
    return [human_default(), ai_default(), robot_guardian(), claude(), neko()]


def render_human(state: AvatarState, size: AvatarSize) -> list[Line]:
    """Render the ``human_default`` avatar."""
    return human_default().render(state, size)


def render_ai(state: AvatarState, size: AvatarSize) -> list[Line]:
    """Render the ``ai_default`` avatar."""
    return ai_default().render(state, size)