"""Messages exchanged between chat peers and the AI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from triadchat.modes import AiMode

RoomId = str
MemberId = str


@dataclass
class TodoItem:
    text: str
    assignee: str | None = None


@dataclass
class StructuredOutput:
    """Todos, decisions and skill suggestions extracted from an AI reply."""

    todos: list[TodoItem] = field(default_factory=list)
    decisions: list[str] = field(default_factory=list)
    skill_suggestions: list[str] = field(default_factory=list)
    raw_text: str | None = None

    @classmethod
    def empty(cls) -> StructuredOutput:
        return cls()

    @classmethod
    def raw(cls, text: str) -> StructuredOutput:
        return cls(raw_text=str(text))

    def is_empty(self) -> bool:
        return (
            not self.todos
            and not self.decisions
            and not self.skill_suggestions
            and self.raw_text is None
        )


class AiIntent(Enum):
    CLARIFY = "clarify"
    SUMMARY = "summary"
    TODO = "todo"
    DECISION = "decision"
    SKILL_SUGGEST = "skill_suggest"
    SKIP = "skip"


@dataclass
class AiPayload:
    text: str = ""
    intent: AiIntent = AiIntent.CLARIFY
    structured: StructuredOutput | None = None


@dataclass
class SkillResultPayload:
    skill_name: str
    summary: str
    success: bool


@dataclass
class PeerInfo:
    user_name: str
    server_port: int
    node_version: str
    avatar: str = ""


class ChunkKind(Enum):
    DATA = "data"
    ERROR = "error"
    END = "end"


@dataclass(frozen=True)
class Chunk:
    """A piece of a file transfer: data, an error marker or the end marker."""

    kind: ChunkKind
    data: bytes = b""

    def __post_init__(self) -> None:
        if self.kind is not ChunkKind.DATA and self.data:
            raise ValueError(f"{self.kind.value} chunk cannot carry data")
        object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def data_chunk(cls, data: bytes) -> Chunk:
        return cls(ChunkKind.DATA, bytes(data))

    @classmethod
    def error(cls) -> Chunk:
        return cls(ChunkKind.ERROR)

    @classmethod
    def end(cls) -> Chunk:
        return cls(ChunkKind.END)


@dataclass
class HelloLan:
    user_name: str
    server_port: int


@dataclass
class HelloUser:
    user_name: str


@dataclass
class UserMessage:
    text: str


@dataclass
class UserData:
    file_name: str
    chunk: Chunk


@dataclass
class AiMessage:
    payload: AiPayload


@dataclass
class PeerInfoMessage:
    info: PeerInfo


@dataclass
class RoomCreate:
    room_id: RoomId
    members: list[MemberId] = field(default_factory=list)


@dataclass
class RoomCreateV2:
    room_id: RoomId
    members: list[MemberId] = field(default_factory=list)
    ai_mode: AiMode | None = None


@dataclass
class RoomJoin:
    room_id: RoomId


@dataclass
class SkillResult:
    payload: SkillResultPayload


NetMessage = (
    HelloLan
    | HelloUser
    | UserMessage
    | UserData
    | AiMessage
    | PeerInfoMessage
    | RoomCreate
    | RoomCreateV2
    | RoomJoin
    | SkillResult
)