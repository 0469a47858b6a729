"""Running a skill through the AI mediator with a time limit."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from triadchat.message import SkillResultPayload
from triadchat.skill.registry import SkillMeta

SKILL_TIMEOUT_SECS = 60


class SkillRunner(Protocol):
    async def run_skill(self, name: str, args: Sequence[str]) -> str: ...


@dataclass
class PendingSkillExecution:
    """A skill waiting for the user to confirm it."""

    meta: SkillMeta
    args: list[str] = field(default_factory=list)


def _timeout_message(meta: SkillMeta, seconds: float) -> str:
    return (
        f"Skill '{meta.name}' timed out after {seconds:g}s. "
        "Check that the skill script is executable and not hanging."
    )


def timeout_summary(meta: SkillMeta) -> str:
    """The summary reported when a skill exceeds the standard time limit."""
    return _timeout_message(meta, SKILL_TIMEOUT_SECS)


class SkillExecutor:
    """Runs skills and turns every outcome into a result payload."""

    @staticmethod
    async def run(
        mediator: SkillRunner,
        meta: SkillMeta,
        args: Sequence[str],
        timeout: float = SKILL_TIMEOUT_SECS,
    ) -> SkillResultPayload:
        try:
            async with asyncio.timeout(timeout):
                try:
                    summary = await mediator.run_skill(meta.name, list(args))
                except Exception as error:
                    return SkillResultPayload(meta.name, str(error), False)
        except TimeoutError:
            return SkillResultPayload(meta.name, _timeout_message(meta, timeout), False)
        return SkillResultPayload(meta.name, summary, True)