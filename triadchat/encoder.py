"""Binary wire encoding of peer messages.

The layout is little-endian: enum variants are tagged with a u32 index,
strings and byte strings carry a u64 length prefix, options a one-byte tag
and booleans a single 0/1 byte.
"""

from __future__ import annotations

import struct
from collections.abc import Callable
from typing import TypeVar

from triadchat.message import (
    AiIntent,
    AiMessage,
    AiPayload,
    Chunk,
    ChunkKind,
    HelloLan,
    HelloUser,
    NetMessage,
    PeerInfo,
    PeerInfoMessage,
    RoomCreate,
    RoomCreateV2,
    RoomJoin,
    SkillResult,
    SkillResultPayload,
    StructuredOutput,
    TodoItem,
    UserData,
    UserMessage,
)
from triadchat.modes import AiMode

T = TypeVar("T")

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")

_INTENTS = tuple(AiIntent)
_MODES = tuple(AiMode)
_CHUNK_KINDS = (ChunkKind.DATA, ChunkKind.ERROR, ChunkKind.END)


class DecodeError(ValueError):
    """Raised when bytes do not form a valid message."""


# ─── encoding ────────────────────────────────────────────────────────────────


def _put_u16(buf: bytearray, value: int) -> None:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"value does not fit in u16: {value}")
    buf.extend(_U16.pack(value))


def _put_tag(buf: bytearray, index: int) -> None:
    buf.extend(_U32.pack(index))


def _put_bool(buf: bytearray, value: bool) -> None:
    buf.extend(_U8.pack(1 if value else 0))


def _put_bytes(buf: bytearray, value: bytes) -> None:
    buf.extend(_U64.pack(len(value)))
    buf.extend(value)


def _put_str(buf: bytearray, value: str) -> None:
    _put_bytes(buf, value.encode("utf-8"))


def _put_option(buf: bytearray, value: T | None, put: Callable[[bytearray, T], None]) -> None:
    if value is None:
        buf.extend(_U8.pack(0))
    else:
        buf.extend(_U8.pack(1))
        put(buf, value)


def _put_str_list(buf: bytearray, values: list[str]) -> None:
    buf.extend(_U64.pack(len(values)))
    for value in values:
        _put_str(buf, value)


def _put_todo(buf: bytearray, todo: TodoItem) -> None:
    _put_str(buf, todo.text)
    _put_option(buf, todo.assignee, _put_str)


def _put_structured(buf: bytearray, output: StructuredOutput) -> None:
    buf.extend(_U64.pack(len(output.todos)))
    for todo in output.todos:
        _put_todo(buf, todo)
    _put_str_list(buf, output.decisions)
    _put_str_list(buf, output.skill_suggestions)
    _put_option(buf, output.raw_text, _put_str)


def _put_payload(buf: bytearray, payload: AiPayload) -> None:
    _put_str(buf, payload.text)
    _put_tag(buf, _INTENTS.index(payload.intent))
    _put_option(buf, payload.structured, _put_structured)


def _put_chunk(buf: bytearray, chunk: Chunk) -> None:
    _put_tag(buf, _CHUNK_KINDS.index(chunk.kind))
    if chunk.kind is ChunkKind.DATA:
        _put_bytes(buf, chunk.data)


def _put_mode(buf: bytearray, mode: AiMode) -> None:
    _put_tag(buf, _MODES.index(mode))


def encode(message: NetMessage) -> bytes:
    """Serialise a network message to its wire bytes."""
    buf = bytearray()
    match message:
        case HelloLan(user_name, server_port):
            _put_tag(buf, 0)
            _put_str(buf, user_name)
            _put_u16(buf, server_port)
        case HelloUser(user_name):
            _put_tag(buf, 1)
            _put_str(buf, user_name)
        case UserMessage(text):
            _put_tag(buf, 2)
            _put_str(buf, text)
        case UserData(file_name, chunk):
            _put_tag(buf, 3)
            _put_str(buf, file_name)
            _put_chunk(buf, chunk)
        case AiMessage(payload):
            _put_tag(buf, 4)
            _put_payload(buf, payload)
        case PeerInfoMessage(info):
            _put_tag(buf, 5)
            _put_str(buf, info.user_name)
            _put_u16(buf, info.server_port)
            _put_str(buf, info.node_version)
            _put_str(buf, info.avatar)
        case RoomCreateV2(room_id, members, ai_mode):
            _put_tag(buf, 7)
            _put_str(buf, room_id)
            _put_str_list(buf, members)
            _put_option(buf, ai_mode, _put_mode)
        case RoomCreate(room_id, members):
            _put_tag(buf, 6)
            _put_str(buf, room_id)
            _put_str_list(buf, members)
        case RoomJoin(room_id):
            _put_tag(buf, 8)
            _put_str(buf, room_id)
        case SkillResult(payload):
            _put_tag(buf, 9)
            _put_str(buf, payload.skill_name)
            _put_str(buf, payload.summary)
            _put_bool(buf, payload.success)
        case _:
            raise TypeError(f"not a network message: {message!r}")
    return bytes(buf)


# ─── decoding ────────────────────────────────────────────────────────────────


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def _take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise DecodeError("unexpected end of message")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def _unpack(self, fmt: struct.Struct) -> int:
        return fmt.unpack(self._take(fmt.size))[0]

    def u8(self) -> int:
        return self._unpack(_U8)

    def u16(self) -> int:
        return self._unpack(_U16)

    def u32(self) -> int:
        return self._unpack(_U32)

    def u64(self) -> int:
        return self._unpack(_U64)

    def boolean(self) -> bool:
        value = self.u8()
        if value not in (0, 1):
            raise DecodeError(f"invalid bool encoding: {value}")
        return value == 1

    def raw_bytes(self) -> bytes:
        return self._take(self.u64())

    def string(self) -> str:
        try:
            return self.raw_bytes().decode("utf-8")
        except UnicodeDecodeError as error:
            raise DecodeError(f"invalid utf-8 string: {error}") from None

    def option(self, read: Callable[[], T]) -> T | None:
        tag = self.u8()
        if tag == 0:
            return None
        if tag == 1:
            return read()
        raise DecodeError(f"invalid option tag: {tag}")

    def seq(self, read: Callable[[], T]) -> list[T]:
        return [read() for _ in range(self.u64())]

    def variant(self, options: tuple[T, ...]) -> T:
        index = self.u32()
        if index >= len(options):
            raise DecodeError(f"invalid variant index: {index}")
        return options[index]


def _read_todo(r: _Reader) -> TodoItem:
    return TodoItem(r.string(), r.option(r.string))


def _read_structured(r: _Reader) -> StructuredOutput:
    return StructuredOutput(
        todos=r.seq(lambda: _read_todo(r)),
        decisions=r.seq(r.string),
        skill_suggestions=r.seq(r.string),
        raw_text=r.option(r.string),
    )


def _read_payload(r: _Reader) -> AiPayload:
    return AiPayload(r.string(), r.variant(_INTENTS), r.option(lambda: _read_structured(r)))


def _read_chunk(r: _Reader) -> Chunk:
    kind = r.variant(_CHUNK_KINDS)
    if kind is ChunkKind.DATA:
        return Chunk.data_chunk(r.raw_bytes())
    return Chunk(kind)


def _read_message(r: _Reader) -> NetMessage:
    match r.u32():
        case 0:
            return HelloLan(r.string(), r.u16())
        case 1:
            return HelloUser(r.string())
        case 2:
            return UserMessage(r.string())
        case 3:
            return UserData(r.string(), _read_chunk(r))
        case 4:
            return AiMessage(_read_payload(r))
        case 5:
            return PeerInfoMessage(PeerInfo(r.string(), r.u16(), r.string(), r.string()))
        case 6:
            return RoomCreate(r.string(), r.seq(r.string))
        case 7:
            return RoomCreateV2(r.string(), r.seq(r.string), r.option(lambda: r.variant(_MODES)))
        case 8:
            return RoomJoin(r.string())
        case 9:
            return SkillResult(SkillResultPayload(r.string(), r.string(), r.boolean()))
        case index:
            raise DecodeError(f"invalid variant index: {index}")


def decode(data: bytes) -> NetMessage:
    """Parse wire bytes into a network message; trailing bytes are ignored."""
    return _read_message(_Reader(data))