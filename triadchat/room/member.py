"""Participants of a chat room."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from triadchat.modes import AiMode


class MemberKind(Enum):
    HUMAN = "human"
    AI = "ai"


@dataclass
class Member:
    """A room participant; AI members may carry the mode they run in."""

    id: str
    kind: MemberKind
    ai_mode: AiMode | None = None

    @classmethod
    def human(cls, member_id: str) -> Member:
        return cls(str(member_id), MemberKind.HUMAN)

    @classmethod
    def ai(cls, member_id: str, ai_mode: AiMode) -> Member:
        return cls(str(member_id), MemberKind.AI, ai_mode)

    @classmethod
    def remote_ai(cls, member_id: str) -> Member:
        """An AI member whose mode is not known locally."""
        return cls(str(member_id), MemberKind.AI)