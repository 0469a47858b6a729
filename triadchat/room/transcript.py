"""Append-only JSON-lines transcripts of room conversations."""

from __future__ import annotations

import json
import os
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import IO, Any

import platformdirs


def _new_id() -> str:
    return f"msg-{time.time_ns()}"


def _now() -> str:
    return datetime.now().astimezone().isoformat()


@dataclass
class TranscriptEntry:
    """One message as stored in a room transcript."""

    id: str
    room_id: str
    sender_id: str
    sender_type: str
    text: str
    kind: str
    timestamp: str
    intent: str | None = None
    structured: Any = None

    @classmethod
    def chat(
        cls, room_id: str, sender_id: str, sender_type: str, kind: str, text: str
    ) -> TranscriptEntry:
        return cls(
            id=_new_id(),
            room_id=room_id,
            sender_id=sender_id,
            sender_type=sender_type,
            text=text,
            kind=kind,
            timestamp=_now(),
        )

    @classmethod
    def ai(
        cls,
        room_id: str,
        sender_id: str,
        text: str,
        intent: str | None,
        structured: Any,
        kind: str,
    ) -> TranscriptEntry:
        return cls(
            id=_new_id(),
            room_id=room_id,
            sender_id=sender_id,
            sender_type="ai",
            text=text,
            kind=kind,
            timestamp=_now(),
            intent=intent,
            structured=structured,
        )

    def to_json(self) -> str:
        """The entry as one compact JSON object."""
        record = {
            "id": self.id,
            "room_id": self.room_id,
            "sender_id": self.sender_id,
            "sender_type": self.sender_type,
            "text": self.text,
            "kind": self.kind,
            "timestamp": self.timestamp,
            "intent": self.intent,
            "structured": self.structured,
        }
        return json.dumps(record, ensure_ascii=False, separators=(",", ":"))


class TranscriptWriter:
    """Appends entries to ``<base>/triadchat/transcripts/<room_id>.jsonl``."""

    def __init__(self, file: IO[str], path: Path) -> None:
        self._file = file
        self._path = path

    @classmethod
    def open(cls, room_id: str) -> TranscriptWriter:
        return cls.open_with_base(platformdirs.user_data_path(), room_id)

    @classmethod
    def open_with_base(cls, base: str | os.PathLike[str], room_id: str) -> TranscriptWriter:
        directory = cls.transcript_dir(base)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{room_id}.jsonl"
        return cls(path.open("a", encoding="utf-8"), path)

    def append(self, entry: TranscriptEntry) -> None:
        self._file.write(entry.to_json() + "\n")
        self._file.flush()

    def path(self) -> Path:
        return self._path

    def close(self) -> None:
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def __enter__(self) -> TranscriptWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @staticmethod
    def transcript_dir(base: str | os.PathLike[str]) -> Path:
        return Path(base) / "triadchat" / "transcripts"

    @classmethod
    def append_to_base(cls, base: str | os.PathLike[str], entry: TranscriptEntry) -> None:
        """Append one entry to the transcript of its room under ``base``."""
        with cls.open_with_base(base, entry.room_id) as writer:
            writer.append(entry)