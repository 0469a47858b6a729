"""Terminal styling primitives: colours, styles, spans and lines."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar


@dataclass(frozen=True)
class Color:
    """A terminal colour: a named palette entry or a 24-bit RGB value."""

    name: str
    components: tuple[int, int, int] | None = None

    RESET: ClassVar[Color]
    BLACK: ClassVar[Color]
    RED: ClassVar[Color]
    GREEN: ClassVar[Color]
    YELLOW: ClassVar[Color]
    BLUE: ClassVar[Color]
    MAGENTA: ClassVar[Color]
    CYAN: ClassVar[Color]
    GRAY: ClassVar[Color]
    DARK_GRAY: ClassVar[Color]
    LIGHT_RED: ClassVar[Color]
    LIGHT_GREEN: ClassVar[Color]
    LIGHT_YELLOW: ClassVar[Color]
    LIGHT_BLUE: ClassVar[Color]
    LIGHT_MAGENTA: ClassVar[Color]
    LIGHT_CYAN: ClassVar[Color]
    WHITE: ClassVar[Color]

    @classmethod
    def rgb(cls, red: int, green: int, blue: int) -> Color:
        """Build a true-colour value; each component must fit in a byte."""
        for component in (red, green, blue):
            if isinstance(component, bool) or not isinstance(component, int):
                raise TypeError(f"colour component must be an int, got {component!r}")
            if not 0 <= component <= 255:
                raise ValueError(f"colour component out of range: {component}")
        return cls("Rgb", (red, green, blue))

    @property
    def is_rgb(self) -> bool:
        return self.components is not None


Color.RESET = Color("Reset")
Color.BLACK = Color("Black")
Color.RED = Color("Red")
Color.GREEN = Color("Green")
Color.YELLOW = Color("Yellow")
Color.BLUE = Color("Blue")
Color.MAGENTA = Color("Magenta")
Color.CYAN = Color("Cyan")
Color.GRAY = Color("Gray")
Color.DARK_GRAY = Color("DarkGray")
Color.LIGHT_RED = Color("LightRed")
Color.LIGHT_GREEN = Color("LightGreen")
Color.LIGHT_YELLOW = Color("LightYellow")
Color.LIGHT_BLUE = Color("LightBlue")
Color.LIGHT_MAGENTA = Color("LightMagenta")
Color.LIGHT_CYAN = Color("LightCyan")
Color.WHITE = Color("White")

NAMED_COLORS: dict[str, Color] = {
    color.name: color
    for color in (
        Color.RESET,
        Color.BLACK,
        Color.RED,
        Color.GREEN,
        Color.YELLOW,
        Color.BLUE,
        Color.MAGENTA,
        Color.CYAN,
        Color.GRAY,
        Color.DARK_GRAY,
        Color.LIGHT_RED,
        Color.LIGHT_GREEN,
        Color.LIGHT_YELLOW,
        Color.LIGHT_BLUE,
        Color.LIGHT_MAGENTA,
        Color.LIGHT_CYAN,
        Color.WHITE,
    )
}


@dataclass(frozen=True)
class Style:
    """Foreground, background and boldness of a piece of text."""

    fg: Color | None = None
    bg: Color | None = None
    bold: bool = False

    def with_fg(self, color: Color | None) -> Style:
        return replace(self, fg=color)

    def with_bg(self, color: Color | None) -> Style:
        return replace(self, bg=color)


@dataclass(frozen=True)
class Span:
    """A run of text sharing one style."""

    content: str
    style: Style = Style()


@dataclass(frozen=True)
class Line:
    """One rendered line made of styled spans."""

    spans: tuple[Span, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "spans", tuple(self.spans))

    def text(self) -> str:
        """The plain text of the line, without styling."""
        return "".join(span.content for span in self.spans)