import asyncio
from pathlib import Path

import pytest

from triadchat.skill.executor import PendingSkillExecution, SkillExecutor, timeout_summary
from triadchat.skill.registry import InvokeMode, RiskLevel, SkillMeta, SkillScope


def make_meta(name="review-auth"):
    return SkillMeta(
        name=name,
        scope=SkillScope.WORKSPACE,
        invoke_mode=InvokeMode.CONFIRM,
        allowed_tools=[],
        risk=RiskLevel.MEDIUM,
        description="Review auth",
        args_hint=None,
        path=Path("SKILL.md"),
    )


class FakeMediator:
    def __init__(self, result=None, error=None, delay=0.0):
        self.result = result
        self.error = error
        self.delay = delay
        self.calls = []

    async def run_skill(self, name, args):
        self.calls.append((name, list(args)))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


def test_timeout_summary_includes_guidance():
    summary = timeout_summary(make_meta())
    assert "Skill 'review-auth' timed out after 60s" in summary
    assert "not hanging" in summary


@pytest.mark.asyncio
async def test_successful_run_reports_summary():
    mediator = FakeMediator(result="all good")
    result = await SkillExecutor.run(mediator, make_meta(), ["T-1"])
    assert result.skill_name == "review-auth"
    assert result.summary == "all good"
    assert result.success is True
    assert mediator.calls == [("review-auth", ["T-1"])]


@pytest.mark.asyncio
async def test_failing_run_reports_error_text():
    mediator = FakeMediator(error=RuntimeError("script exited with status 2"))
    result = await SkillExecutor.run(mediator, make_meta(), [])
    assert result.success is False
    assert result.summary == "script exited with status 2"


@pytest.mark.asyncio
async def test_slow_run_times_out():
    mediator = FakeMediator(result="late", delay=1.0)
    result = await SkillExecutor.run(mediator, make_meta("slow"), [], timeout=0.05)
    assert result.success is False
    assert "Skill 'slow' timed out" in result.summary
    assert "not hanging" in result.summary


@pytest.mark.asyncio
async def test_inner_timeout_error_is_a_skill_failure():
    mediator = FakeMediator(error=TimeoutError("backend timeout"))
    result = await SkillExecutor.run(mediator, make_meta(), [])
    assert result.success is False
    assert result.summary == "backend timeout"


def test_pending_execution_holds_meta_and_args():
    pending = PendingSkillExecution(make_meta(), ["a", "b"])
    assert pending.meta.name == "review-auth"
    assert pending.args == ["a", "b"]