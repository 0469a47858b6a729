"""AI behaviour modes and intervention frequencies."""

from __future__ import annotations

from enum import Enum


class AiMode(Enum):
    """How the AI clerk takes part in a conversation."""

    CLERK = "clerk"
    LISTENER = "listener"
    MODERATOR = "moderator"
    OPERATOR = "operator"
    COMPANION = "companion"

    @classmethod
    def parse(cls, value: str) -> AiMode:
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"unknown ai mode: {value}") from None

    def __str__(self) -> str:
        return self.value


class AiFrequency(Enum):
    """How often the AI is allowed to intervene."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"

    @classmethod
    def parse(cls, value: str) -> AiFrequency:
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"unknown ai frequency: {value}") from None

    def __str__(self) -> str:
        return self.value