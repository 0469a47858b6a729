"""Discovery of workspace skills described by ``SKILL.md`` front matter."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import platformdirs
import yaml

logger = logging.getLogger(__name__)


class SkillScope(Enum):
    USER = "user"
    WORKSPACE = "workspace"


class InvokeMode(Enum):
    """How a skill may be started."""

    MANUAL = "manual"
    CONFIRM = "confirm"
    AUTO_SAFE = "auto_safe"
    SUGGEST = "suggest"

    def as_str(self) -> str:
        """The human-readable label."""
        return self.value.replace("_", "-")

    def __str__(self) -> str:
        return self.as_str()


class RiskLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    def as_str(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.as_str()


@dataclass
class SkillMeta:
    """What is known about one skill."""

    name: str
    scope: SkillScope = SkillScope.WORKSPACE
    invoke_mode: InvokeMode = InvokeMode.CONFIRM
    allowed_tools: list[str] = field(default_factory=list)
    risk: RiskLevel = RiskLevel.MEDIUM
    description: str = ""
    args_hint: str | None = None
    path: Path = field(default_factory=lambda: Path("SKILL.md"))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "scope": self.scope.value,
            "invoke_mode": self.invoke_mode.value,
            "allowed_tools": list(self.allowed_tools),
            "risk": self.risk.value,
            "description": self.description,
            "args_hint": self.args_hint,
            "path": str(self.path),
        }

    @classmethod
    def from_dict(cls, data: Any) -> SkillMeta:
        """Rebuild a meta record; raises ValueError or TypeError on bad data."""
        if not isinstance(data, dict):
            raise TypeError("skill meta must be an object")
        args_hint = data.get("args_hint")
        if args_hint is not None and not isinstance(args_hint, str):
            raise TypeError("args_hint must be a string")
        return cls(
            name=_require_str(data["name"], "name"),
            scope=SkillScope(data["scope"]),
            invoke_mode=InvokeMode(data["invoke_mode"]),
            allowed_tools=_str_list(data["allowed_tools"], "allowed_tools"),
            risk=RiskLevel(data["risk"]),
            description=_require_str(data["description"], "description"),
            args_hint=args_hint,
            path=Path(_require_str(data["path"], "path")),
        )


def _require_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string")
    return value


def _str_list(value: Any, key: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise TypeError(f"{key} must be a list of strings")
    return list(value)


def _optional_enum(data: dict[Any, Any], key: str, enum: type[Enum]) -> Any:
    value = data.get(key)
    if value is None:
        return None
    return enum(_require_str(value, key))


@dataclass
class _Frontmatter:
    name: str
    scope: SkillScope | None
    invoke: InvokeMode | None
    allowed_tools: list[str] | None
    risk: RiskLevel | None
    description: str
    args_hint: str | None

    @classmethod
    def from_mapping(cls, data: dict[Any, Any]) -> _Frontmatter:
        if "args_hint" in data and "args-hint" in data:
            raise ValueError("duplicate field args_hint")
        args_hint = data.get("args_hint", data.get("args-hint"))
        if args_hint is not None:
            args_hint = _require_str(args_hint, "args_hint")
        tools = data.get("allowed-tools")
        description = data.get("description")
        return cls(
            name=_require_str(data["name"], "name"),
            scope=_optional_enum(data, "scope", SkillScope),
            invoke=_optional_enum(data, "invoke", InvokeMode),
            allowed_tools=None if tools is None else _str_list(tools, "allowed-tools"),
            risk=_optional_enum(data, "risk", RiskLevel),
            description="" if description is None else _require_str(description, "description"),
            args_hint=args_hint,
        )


def _extract_frontmatter(raw: str) -> str | None:
    parts = raw.split("---", 2)
    if len(parts) < 2:
        return None
    return parts[1].strip()


def _parse_frontmatter(text: str) -> _Frontmatter | None:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        return _Frontmatter.from_mapping(data)
    except (KeyError, TypeError, ValueError):
        return None


def _fallback_description(raw: str) -> str:
    for line in raw.split("\n"):
        line = line.removesuffix("\r")
        if line.strip() and not line.startswith("---"):
            return line.lstrip("#").strip()
    return ""


def _file_mtime_ms(path: Path) -> int:
    try:
        mtime_ns = os.stat(path).st_mtime_ns
    except OSError:
        return 0
    return max(mtime_ns, 0) // 1_000_000


@dataclass
class _CacheEntry:
    path: str
    mtime_ms: int
    meta: SkillMeta


def _read_cache(path: Path) -> dict[str, _CacheEntry]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        entries = data["entries"]
        if not isinstance(entries, list):
            raise TypeError("entries must be a list")
        cache: dict[str, _CacheEntry] = {}
        for item in entries:
            mtime = item["mtime_ms"]
            if isinstance(mtime, bool) or not isinstance(mtime, int) or mtime < 0:
                raise TypeError("mtime_ms must be a non-negative integer")
            entry = _CacheEntry(_require_str(item["path"], "path"), mtime, SkillMeta.from_dict(item["meta"]))
            cache[entry.path] = entry
        return cache
    except (OSError, ValueError, TypeError, KeyError):
        return {}


def _write_cache(path: Path, skills: list[SkillMeta]) -> None:
    entries = [
        {"path": str(meta.path), "mtime_ms": _file_mtime_ms(meta.path), "meta": meta.to_dict()}
        for meta in skills
    ]
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({"entries": entries}, ensure_ascii=False, indent=2), encoding="utf-8")
    except OSError:
        pass


class SkillRegistry:
    """The skills found under ``<workspace>/.claude/skills``, sorted by name."""

    def __init__(self, skills: list[SkillMeta] | None = None) -> None:
        self._skills = list(skills or [])

    @classmethod
    def empty(cls) -> SkillRegistry:
        return cls()

    @classmethod
    def scan(cls, workspace: str | os.PathLike[str]) -> SkillRegistry:
        """Scan a workspace, caching parsed skills under the user data directory."""
        try:
            cache_base = platformdirs.user_data_path()
        except Exception:
            cache_base = Path(workspace)
        return cls.scan_with_cache_base(workspace, cache_base)

    @classmethod
    def scan_with_cache_base(
        cls, workspace: str | os.PathLike[str], cache_base: str | os.PathLike[str]
    ) -> SkillRegistry:
        """Scan a workspace, keeping the parse cache under ``cache_base``."""
        skills_dir = Path(workspace) / ".claude" / "skills"
        if not skills_dir.exists():
            return cls.empty()

        cache_path = cls.cache_path(cache_base)
        cache = _read_cache(cache_path)
        try:
            entries = sorted(skills_dir.iterdir())
        except OSError:
            return cls.empty()

        skills: list[SkillMeta] = []
        for entry in entries:
            skill_path = entry / "SKILL.md"
            if not skill_path.exists():
                continue

            mtime = _file_mtime_ms(skill_path)
            cached = cache.get(str(skill_path))
            if cached is not None and cached.mtime_ms == mtime:
                skills.append(cached.meta)
                continue

            try:
                raw = skill_path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            frontmatter = _extract_frontmatter(raw)
            if frontmatter is None:
                logger.warning("skill frontmatter missing: %s", skill_path)
                continue
            parsed = _parse_frontmatter(frontmatter)
            if parsed is None:
                logger.warning("skill frontmatter parse failed: %s", skill_path)
                continue

            hint = parsed.args_hint if parsed.args_hint and parsed.args_hint.strip() else None
            skills.append(
                SkillMeta(
                    name=parsed.name,
                    scope=parsed.scope or SkillScope.WORKSPACE,
                    invoke_mode=parsed.invoke or InvokeMode.CONFIRM,
                    allowed_tools=parsed.allowed_tools or [],
                    risk=parsed.risk or RiskLevel.MEDIUM,
                    description=parsed.description or _fallback_description(raw),
                    args_hint=hint,
                    path=skill_path,
                )
            )

        skills.sort(key=lambda meta: meta.name)
        _write_cache(cache_path, skills)
        return cls(skills)

    def skills(self) -> list[SkillMeta]:
        return list(self._skills)

    def find(self, name: str) -> SkillMeta | None:
        return next((skill for skill in self._skills if skill.name == name), None)

    @staticmethod
    def cache_path(base: str | os.PathLike[str]) -> Path:
        return Path(base) / "triadchat" / "skills_cache.json"