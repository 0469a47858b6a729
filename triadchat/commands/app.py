"""Application commands typed by the user and the manager that dispatches them."""

from __future__ import annotations

import re
import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from triadchat.modes import AiFrequency, AiMode


class CommandError(ValueError):
    """Raised when a command line cannot be turned into a command."""


class SummaryCommandKind(Enum):
    SUMMARY = "summary"
    TODOS = "todos"
    DECISIONS = "decisions"
    CONTEXT = "context"


@dataclass(frozen=True)
class Summary:
    kind: SummaryCommandKind


@dataclass(frozen=True)
class SetAiMode:
    mode: AiMode


@dataclass(frozen=True)
class SetAiQuiet:
    enabled: bool


@dataclass(frozen=True)
class SetAiFrequency:
    frequency: AiFrequency


@dataclass(frozen=True)
class RoomCreate:
    peers: tuple[str, ...]
    ai_mode: AiMode | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "peers", tuple(self.peers))


@dataclass(frozen=True)
class RoomList:
    pass


@dataclass(frozen=True)
class RoomSwitch:
    room_id: str


@dataclass(frozen=True)
class PeerConnect:
    target: str


@dataclass(frozen=True)
class Peers:
    pass


@dataclass(frozen=True)
class TrustList:
    pass


@dataclass(frozen=True)
class TrustAdd:
    target: str


@dataclass(frozen=True)
class TrustRemove:
    target: str


@dataclass(frozen=True)
class Skills:
    pass


@dataclass(frozen=True)
class Skill:
    name: str
    args: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


@dataclass(frozen=True)
class RunProposal:
    proposal_id: int


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class AvatarSet:
    """Change a target's avatar preset."""

    target: str
    preset: str


@dataclass(frozen=True)
class AvatarPreview:
    """Show the current avatar in all sizes."""


@dataclass(frozen=True)
class AvatarMode:
    """Change the global avatar size."""

    mode: str


@dataclass(frozen=True)
class AvatarList:
    """List the available presets."""


@dataclass(frozen=True)
class ArtList:
    pass


@dataclass(frozen=True)
class ArtReload:
    pass


@dataclass(frozen=True)
class Help:
    pass


AppCommand = (
    Summary
    | SetAiMode
    | SetAiQuiet
    | SetAiFrequency
    | RoomCreate
    | RoomList
    | RoomSwitch
    | PeerConnect
    | Peers
    | TrustList
    | TrustAdd
    | TrustRemove
    | Skills
    | Skill
    | RunProposal
    | Cancel
    | AvatarSet
    | AvatarPreview
    | AvatarMode
    | AvatarList
    | ArtList
    | ArtReload
    | Help
)


class Command(ABC):
    """Parses the parameters of one named slash command."""

    name: str

    @abstractmethod
    def parse_params(self, params: list[str]) -> AppCommand:
        """Build the command from its shell-split parameters; raise CommandError on bad input."""


_FIRST_WORD = re.compile(r"\s")


class CommandManager:
    """Routes ``/name params...`` input lines to the registered command parsers."""

    COMMAND_PREFIX = "/"

    def __init__(self) -> None:
        self._parsers: dict[str, Command] = {}

    def register(self, command: Command) -> CommandManager:
        """Add a parser, replacing any with the same name; returns the manager."""
        self._parsers[command.name] = command
        return self

    def find_command(self, text: str) -> AppCommand | None:
        """Parse an input line.

        Returns None when the line is not a known command and raises
        CommandError when it is one but its parameters are invalid.
        """
        if not text.startswith(self.COMMAND_PREFIX):
            return None
        parts = _FIRST_WORD.split(text[len(self.COMMAND_PREFIX):], maxsplit=1)
        first = parts[0]
        if first == "help":
            return Help()

        parser = self._parsers.get(first)
        if parser is None:
            return None
        param_str = parts[1] if len(parts) > 1 else ""
        try:
            params = shlex.split(param_str)
        except ValueError as error:
            raise CommandError(str(error)) from None
        return parser.parse_params(params)