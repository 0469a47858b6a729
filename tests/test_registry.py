import json
import os
from pathlib import Path

import pytest

from triadchat.skill.registry import (
    InvokeMode,
    RiskLevel,
    SkillMeta,
    SkillRegistry,
    SkillScope,
)

REVIEW_AUTH = """---
name: review-auth
invoke: confirm
risk: medium
allowed-tools: [Read, Grep]
description: 認証ロジックをレビューする
args_hint: <ticket-id>
---

# Review Auth
"""

BROKEN = """---
name: broken-skill
invoke: [not valid
---
"""


def write_skill(workspace: Path, dirname: str, text: str) -> Path:
    directory = workspace / ".claude" / "skills" / dirname
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "SKILL.md"
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def workspace(tmp_path):
    ws = tmp_path / "ws"
    ws.mkdir()
    write_skill(ws, "review-auth", REVIEW_AUTH)
    write_skill(ws, "broken-skill", BROKEN)
    return ws


@pytest.fixture
def cache_base(tmp_path):
    base = tmp_path / "cache"
    base.mkdir()
    return base


def test_scan_reads_valid_skills_and_skips_invalid_frontmatter(workspace, cache_base):
    registry = SkillRegistry.scan_with_cache_base(workspace, cache_base)

    assert len(registry.skills()) == 1
    skill = registry.find("review-auth")
    assert skill is not None
    assert skill.invoke_mode == InvokeMode.CONFIRM
    assert skill.risk == RiskLevel.MEDIUM
    assert skill.allowed_tools == ["Read", "Grep"]
    assert skill.args_hint == "<ticket-id>"
    assert skill.description == "認証ロジックをレビューする"
    assert skill.scope == SkillScope.WORKSPACE


def test_scan_uses_cache_file_without_breaking_results(workspace, cache_base):
    first = SkillRegistry.scan_with_cache_base(workspace, cache_base)
    second = SkillRegistry.scan_with_cache_base(workspace, cache_base)

    assert len(first.skills()) == len(second.skills())
    assert SkillRegistry.cache_path(cache_base).exists()


def test_missing_skills_directory_returns_empty_registry(tmp_path):
    registry = SkillRegistry.scan(tmp_path)
    assert registry.skills() == []


def test_display_labels_are_human_readable():
    assert str(InvokeMode.AUTO_SAFE) == "auto-safe"
    assert str(RiskLevel.LOW) == "low"
    assert InvokeMode.AUTO_SAFE.as_str() == "auto-safe"
    assert RiskLevel.HIGH.as_str() == "high"


def test_cache_path_layout(tmp_path):
    assert SkillRegistry.cache_path(tmp_path) == tmp_path / "triadchat" / "skills_cache.json"


def test_cache_entries_are_reused_while_mtime_matches(workspace, cache_base):
    SkillRegistry.scan_with_cache_base(workspace, cache_base)
    cache_path = SkillRegistry.cache_path(cache_base)
    data = json.loads(cache_path.read_text(encoding="utf-8"))
    assert data["entries"][0]["meta"]["invoke_mode"] == "confirm"
    data["entries"][0]["meta"]["description"] = "from cache"
    cache_path.write_text(json.dumps(data), encoding="utf-8")

    registry = SkillRegistry.scan_with_cache_base(workspace, cache_base)
    assert registry.find("review-auth").description == "from cache"


def test_stale_cache_entry_is_reparsed(workspace, cache_base):
    SkillRegistry.scan_with_cache_base(workspace, cache_base)
    cache_path = SkillRegistry.cache_path(cache_base)
    data = json.loads(cache_path.read_text(encoding="utf-8"))
    data["entries"][0]["meta"]["description"] = "from cache"
    data["entries"][0]["mtime_ms"] += 5000
    cache_path.write_text(json.dumps(data), encoding="utf-8")

    registry = SkillRegistry.scan_with_cache_base(workspace, cache_base)
    assert registry.find("review-auth").description == "認証ロジックをレビューする"


def test_corrupt_cache_is_ignored(workspace, cache_base):
    cache_path = SkillRegistry.cache_path(cache_base)
    cache_path.parent.mkdir(parents=True)
    cache_path.write_text("{not json", encoding="utf-8")

    registry = SkillRegistry.scan_with_cache_base(workspace, cache_base)
    assert [s.name for s in registry.skills()] == ["review-auth"]


def test_skills_are_sorted_by_name(tmp_path, cache_base):
    write_skill(tmp_path, "z-dir", "---\nname: alpha\n---\n")
    write_skill(tmp_path, "a-dir", "---\nname: zulu\n---\n")
    registry = SkillRegistry.scan_with_cache_base(tmp_path, cache_base)
    assert [s.name for s in registry.skills()] == ["alpha", "zulu"]


def test_defaults_and_description_fallback(tmp_path, cache_base):
    write_skill(tmp_path, "s", "# Heading\n---\nname: plain\nargs_hint: '   '\n---\n")
    skill = SkillRegistry.scan_with_cache_base(tmp_path, cache_base).find("plain")
    assert skill.description == "Heading"
    assert skill.args_hint is None
    assert skill.invoke_mode == InvokeMode.CONFIRM
    assert skill.risk == RiskLevel.MEDIUM
    assert skill.allowed_tools == []


def test_auto_safe_and_args_hint_alias(tmp_path, cache_base):
    write_skill(
        tmp_path,
        "s",
        "---\nname: fast\ninvoke: auto_safe\nscope: user\nrisk: low\nargs-hint: <x>\n---\n",
    )
    skill = SkillRegistry.scan_with_cache_base(tmp_path, cache_base).find("fast")
    assert skill.invoke_mode == InvokeMode.AUTO_SAFE
    assert skill.scope == SkillScope.USER
    assert skill.risk == RiskLevel.LOW
    assert skill.args_hint == "<x>"


def test_hyphenated_invoke_value_is_rejected(tmp_path, cache_base):
    write_skill(tmp_path, "s", "---\nname: fast\ninvoke: auto-safe\n---\n")
    registry = SkillRegistry.scan_with_cache_base(tmp_path, cache_base)
    assert registry.find("fast") is None
    assert registry.skills() == []


def test_missing_frontmatter_or_name_is_skipped(tmp_path, cache_base):
    write_skill(tmp_path, "a", "no front matter here\n")
    write_skill(tmp_path, "b", "---\ndescription: nameless\n---\n")
    assert SkillRegistry.scan_with_cache_base(tmp_path, cache_base).skills() == []


def test_skill_path_points_at_file(workspace, cache_base):
    skill = SkillRegistry.scan_with_cache_base(workspace, cache_base).find("review-auth")
    assert skill.path == workspace / ".claude" / "skills" / "review-auth" / "SKILL.md"


def test_empty_registry_find_returns_none():
    registry = SkillRegistry.empty()
    assert registry.find("anything") is None
    assert registry.skills() == []


def test_meta_dict_round_trip():
    meta = SkillMeta(
        name="deploy",
        scope=SkillScope.USER,
        invoke_mode=InvokeMode.SUGGEST,
        allowed_tools=["Bash"],
        risk=RiskLevel.HIGH,
        description="Deploy",
        args_hint="<env>",
        path=Path("x") / "SKILL.md",
    )
    assert SkillMeta.from_dict(meta.to_dict()) == meta


def test_meta_from_dict_rejects_bad_enum():
    data = SkillMeta(name="x").to_dict()
    data["risk"] = "extreme"
    with pytest.raises(ValueError):
        SkillMeta.from_dict(data)