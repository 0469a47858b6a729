"""Application configuration, persisted as TOML in the user's config directory."""

from __future__ import annotations

import getpass
import ipaddress
import os
import re
import string
import tomllib
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any

import platformdirs
import tomli_w

from triadchat.style import NAMED_COLORS, Color

DEFAULT_DISCOVERY_ADDR = "238.255.0.1:5877"

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_SOCKET_ADDR_V4 = re.compile(r"([0-9.]+):([0-9]+)")
_PORT = re.compile(r"\+?[0-9]+")


def _parse_socket_addr_v4(text: str) -> str | None:
    match = _SOCKET_ADDR_V4.fullmatch(text)
    if match is None:
        return None
    host, port = match.groups()
    try:
        ipaddress.IPv4Address(host)
    except ValueError:
        return None
    if int(port) > 0xFFFF:
        return None
    return text


def _parse_port(text: str) -> int | None:
    if _PORT.fullmatch(text) is None:
        return None
    port = int(text)
    return port if port <= 0xFFFF else None


def _default_user_name() -> str:
    try:
        return getpass.getuser()
    except (OSError, KeyError, ImportError):
        return "unknown"


@dataclass
class UserConfig:
    """Per-user display preferences."""

    avatar: str = "human_default"
    ai_avatar: str = "ai_default"


class AiProvider(Enum):
    CLAUDE = "claude"
    CODEX = "codex"
    GEMINI = "gemini"
    CUSTOM = "custom"

    def invocation(self) -> tuple[str, tuple[str, ...]]:
        """The program and leading arguments used to call this provider."""
        return _INVOCATIONS[self]

    def label(self) -> str:
        return self.value


_INVOCATIONS = {
    AiProvider.CLAUDE: ("claude", ("-p",)),
    AiProvider.CODEX: ("codex", ("exec",)),
    AiProvider.GEMINI: ("gemini", ("-p",)),
    AiProvider.CUSTOM: ("", ()),
}


@dataclass
class AiConfig:
    enabled: bool = True
    provider: AiProvider = AiProvider.CLAUDE
    command: str | None = None
    timeout_secs: int = 30


class DefaultPermission(Enum):
    CONFIRM_REQUIRED = "confirm-required"
    TRUSTED_AUTO_SAFE = "trusted-auto-safe"
    DENY_REMOTE_EXEC = "deny-remote-exec"

    def as_str(self) -> str:
        return self.value


@dataclass
class SecurityConfig:
    default_permission: str = DefaultPermission.CONFIRM_REQUIRED.value
    trusted_peers: list[str] = field(default_factory=list)

    def default_permission_policy(self) -> DefaultPermission:
        """The configured policy; unknown values fall back to confirm-required."""
        try:
            return DefaultPermission(self.default_permission)
        except ValueError:
            return DefaultPermission.CONFIRM_REQUIRED


@dataclass
class LanguageConfig:
    ai_output: str
    ui: str

    @classmethod
    def from_lang_env_value(cls, lang: str | None) -> LanguageConfig:
        """Derive languages from a LANG-style value such as ``ja_JP.UTF-8``."""
        normalized = (lang or "").split(".")[0].split("_")[0].translate(_ASCII_LOWER)
        match normalized:
            case "en":
                return cls("en", "en")
            case "zh":
                return cls("zh", "en")
            case "ko":
                return cls("ko", "en")
            case "ja":
                return cls("ja", "ja")
            case _:
                return cls("en", "en")

    @classmethod
    def from_lang_env(cls, lang: str | None) -> LanguageConfig:
        return cls.from_lang_env_value(lang)


def _language_from_environment() -> LanguageConfig:
    return LanguageConfig.from_lang_env_value(os.environ.get("LANG"))


_PAIR_FIELDS = {"system_info_color", "system_warning_color", "system_error_color"}


@dataclass
class Theme:
    message_colors: tuple[Color, ...]
    my_user_color: Color
    date_color: Color
    system_info_color: tuple[Color, Color]
    system_warning_color: tuple[Color, Color]
    system_error_color: tuple[Color, Color]
    chat_panel_color: Color
    progress_bar_color: Color
    command_color: Color
    input_panel_color: Color
    mention_me_color: Color
    mention_other_color: Color

    @classmethod
    def dark(cls) -> Theme:
        return cls(
            message_colors=(Color.BLUE, Color.YELLOW, Color.CYAN, Color.MAGENTA),
            my_user_color=Color.GREEN,
            date_color=Color.DARK_GRAY,
            system_info_color=(Color.CYAN, Color.LIGHT_CYAN),
            system_warning_color=(Color.YELLOW, Color.LIGHT_YELLOW),
            system_error_color=(Color.RED, Color.LIGHT_RED),
            chat_panel_color=Color.WHITE,
            progress_bar_color=Color.LIGHT_GREEN,
            command_color=Color.LIGHT_YELLOW,
            input_panel_color=Color.WHITE,
            mention_me_color=Color.YELLOW,
            mention_other_color=Color.CYAN,
        )

    @classmethod
    def light(cls) -> Theme:
        return cls(
            message_colors=(Color.BLUE, Color.YELLOW, Color.CYAN, Color.MAGENTA),
            my_user_color=Color.GREEN,
            date_color=Color.DARK_GRAY,
            system_info_color=(Color.CYAN, Color.LIGHT_CYAN),
            system_warning_color=(Color.YELLOW, Color.LIGHT_YELLOW),
            system_error_color=(Color.RED, Color.LIGHT_RED),
            chat_panel_color=Color.BLACK,
            progress_bar_color=Color.LIGHT_GREEN,
            command_color=Color.LIGHT_YELLOW,
            input_panel_color=Color.BLACK,
            mention_me_color=Color.rgb(255, 215, 0),
            mention_other_color=Color.BLUE,
        )


# ─── TOML mapping helpers ────────────────────────────────────────────────────


def _color_to_toml(color: Color) -> Any:
    if color.components is not None:
        return {"Rgb": list(color.components)}
    return color.name


def _color_from_toml(value: Any, key: str) -> Color:
    if isinstance(value, str) and value in NAMED_COLORS:
        return NAMED_COLORS[value]
    if isinstance(value, dict) and set(value) == {"Rgb"}:
        components = value["Rgb"]
        if isinstance(components, list) and len(components) == 3:
            try:
                return Color.rgb(*components)
            except (TypeError, ValueError):
                pass
    raise ValueError(f"invalid colour for `{key}`: {value!r}")


def _field(table: dict[str, Any], key: str, kind: type, where: str) -> Any:
    if key not in table:
        raise ValueError(f"missing field `{key}` in {where}")
    value = table[key]
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"invalid type for `{key}` in {where}")
    return value


def _str_list(table: dict[str, Any], key: str, where: str) -> list[str]:
    values = _field(table, key, list, where)
    if not all(isinstance(value, str) for value in values):
        raise ValueError(f"invalid type for `{key}` in {where}")
    return list(values)


def _theme_to_toml(theme: Theme) -> dict[str, Any]:
    table: dict[str, Any] = {}
    for item in fields(theme):
        value = getattr(theme, item.name)
        if isinstance(value, tuple):
            table[item.name] = [_color_to_toml(color) for color in value]
        else:
            table[item.name] = _color_to_toml(value)
    return table


def _theme_from_toml(table: dict[str, Any]) -> Theme:
    values: dict[str, Any] = {}
    for item in fields(Theme):
        raw = _field(table, item.name, object, "theme")
        if item.name == "message_colors" or item.name in _PAIR_FIELDS:
            if not isinstance(raw, list):
                raise ValueError(f"invalid type for `{item.name}` in theme")
            colors = tuple(_color_from_toml(value, item.name) for value in raw)
            if item.name in _PAIR_FIELDS and len(colors) != 2:
                raise ValueError(f"`{item.name}` must hold two colours")
            values[item.name] = colors
        else:
            values[item.name] = _color_from_toml(raw, item.name)
    return Theme(**values)


def _ai_from_toml(table: dict[str, Any]) -> AiConfig:
    provider_name = table.get("provider", AiProvider.CLAUDE.value)
    try:
        provider = AiProvider(provider_name)
    except ValueError:
        raise ValueError(f"unknown ai provider: {provider_name!r}") from None
    command = table.get("command")
    if command is not None and not isinstance(command, str):
        raise ValueError("invalid type for `command` in ai")
    timeout = _field(table, "timeout_secs", int, "ai")
    if timeout < 0:
        raise ValueError("`timeout_secs` must not be negative")
    return AiConfig(
        enabled=_field(table, "enabled", bool, "ai"),
        provider=provider,
        command=command,
        timeout_secs=timeout,
    )


@dataclass
class Config:
    """All settings of the chat application."""

    discovery_addr: str = DEFAULT_DISCOVERY_ADDR
    tcp_server_port: int = 0
    user_name: str = field(default_factory=_default_user_name)
    terminal_bell: bool = True
    language: LanguageConfig = field(default_factory=_language_from_environment)
    ai: AiConfig = field(default_factory=AiConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    theme: Theme = field(default_factory=Theme.dark)
    user: UserConfig = field(default_factory=UserConfig)

    @staticmethod
    def config_dir_path_with_base(base: str | os.PathLike[str]) -> Path:
        return Path(base) / "triadchat"

    @staticmethod
    def config_file_path_with_base(base: str | os.PathLike[str]) -> Path:
        return Config.config_dir_path_with_base(base) / "config.toml"

    @staticmethod
    def config_dir_path() -> Path:
        return Config.config_dir_path_with_base(platformdirs.user_config_path())

    @staticmethod
    def config_file_path() -> Path:
        return Config.config_file_path_with_base(platformdirs.user_config_path())

    def to_toml(self) -> str:
        ai: dict[str, Any] = {
            "enabled": self.ai.enabled,
            "provider": self.ai.provider.value,
            "timeout_secs": self.ai.timeout_secs,
        }
        if self.ai.command is not None:
            ai["command"] = self.ai.command
        document = {
            "discovery_addr": self.discovery_addr,
            "tcp_server_port": self.tcp_server_port,
            "user_name": self.user_name,
            "terminal_bell": self.terminal_bell,
            "language": {"ai_output": self.language.ai_output, "ui": self.language.ui},
            "ai": ai,
            "security": {
                "default_permission": self.security.default_permission,
                "trusted_peers": list(self.security.trusted_peers),
            },
            "theme": _theme_to_toml(self.theme),
            "user": {"avatar": self.user.avatar, "ai_avatar": self.user.ai_avatar},
        }
        return tomli_w.dumps(document)

    @classmethod
    def from_toml(cls, text: str) -> Config:
        """Parse a config document; raises ValueError when it is incomplete or invalid."""
        document = tomllib.loads(text)
        discovery = _field(document, "discovery_addr", str, "config")
        if _parse_socket_addr_v4(discovery) is None:
            raise ValueError(f"invalid discovery address: {discovery!r}")
        port = _field(document, "tcp_server_port", int, "config")
        if not 0 <= port <= 0xFFFF:
            raise ValueError(f"invalid tcp server port: {port}")
        language = _field(document, "language", dict, "config")
        security = _field(document, "security", dict, "config")
        user_table = document.get("user")
        if user_table is None:
            user = UserConfig()
        elif isinstance(user_table, dict):
            user = UserConfig(
                avatar=_field(user_table, "avatar", str, "user"),
                ai_avatar=_field(user_table, "ai_avatar", str, "user"),
            )
        else:
            raise ValueError("invalid type for `user` in config")
        return cls(
            discovery_addr=discovery,
            tcp_server_port=port,
            user_name=_field(document, "user_name", str, "config"),
            terminal_bell=_field(document, "terminal_bell", bool, "config"),
            language=LanguageConfig(
                ai_output=_field(language, "ai_output", str, "language"),
                ui=_field(language, "ui", str, "language"),
            ),
            ai=_ai_from_toml(_field(document, "ai", dict, "config")),
            security=SecurityConfig(
                default_permission=_field(security, "default_permission", str, "security"),
                trusted_peers=_str_list(security, "trusted_peers", "security"),
            ),
            theme=_theme_from_toml(_field(document, "theme", dict, "config")),
            user=user,
        )

    @classmethod
    def load(cls, base: str | os.PathLike[str] | None = None) -> Config:
        """Read the config file under ``base``, writing defaults when it is missing.

        Any failure to read or parse the file yields the default configuration.
        """
        if base is None:
            base = platformdirs.user_config_path()
        directory = cls.config_dir_path_with_base(base)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError:
            return cls()
        path = cls.config_file_path_with_base(base)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            config = cls()
            try:
                path.write_text(config.to_toml(), encoding="utf-8")
            except OSError:
                pass
            return config
        except (OSError, UnicodeDecodeError):
            return cls()
        try:
            return cls.from_toml(text)
        except ValueError:
            return cls()

    @classmethod
    def from_options(
        cls,
        discovery: str | None = None,
        tcp_server_port: str | int | None = None,
        username: str | None = None,
        quiet: bool = False,
        theme: str | None = None,
        base: str | os.PathLike[str] | None = None,
    ) -> Config:
        """Load the stored config and apply command-line overrides to it."""
        config = cls.load(base)
        if discovery is not None and _parse_socket_addr_v4(discovery) is not None:
            config.discovery_addr = discovery
        if tcp_server_port is not None:
            port = _parse_port(str(tcp_server_port))
            if port is not None:
                config.tcp_server_port = port
        if username is not None:
            config.user_name = username
        if quiet:
            config.terminal_bell = False
        if theme is not None:
            config.theme = Theme.dark() if theme == "dark" else Theme.light()
        return config