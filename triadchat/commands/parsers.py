"""Parsers for every slash command the chat understands."""

from __future__ import annotations

import re

from triadchat.commands.app import (
    AppCommand,
    ArtList,
    ArtReload,
    AvatarList,
    AvatarMode,
    AvatarPreview,
    AvatarSet,
    Cancel,
    Command,
    CommandError,
    CommandManager,
    PeerConnect,
    Peers,
    RoomCreate,
    RoomList,
    RoomSwitch,
    RunProposal,
    SetAiFrequency,
    SetAiMode,
    SetAiQuiet,
    Skill,
    Skills,
    Summary,
    SummaryCommandKind,
    TrustAdd,
    TrustList,
    TrustRemove,
)
from triadchat.modes import AiFrequency, AiMode

_AI_USAGE = (
    "usage: /ai mode <mode>\n"
    "  clerk      - responds to decisions and task markers\n"
    "  listener   - silent; never auto-intervenes\n"
    "  moderator  - intervenes on ambiguous or contradictory messages\n"
    "  operator   - responds to execute, deploy, or run requests\n"
    "  companion  - chats actively and replies to direct prompts\n"
    "usage: /ai quiet <on|off>\n"
    "usage: /ai freq <low|normal|high>"
)

_NUMBER = re.compile(r"\+?[0-9]+")
_USIZE_MAX = 2**64 - 1


def _first(params: list[str], default: str | None = None) -> str | None:
    return params[0] if params else default


def _arg(params: list[str], index: int, usage: str) -> str:
    if index >= len(params):
        raise CommandError(usage)
    return params[index]


def _parse_mode(value: str) -> AiMode:
    try:
        return AiMode.parse(value)
    except ValueError as error:
        raise CommandError(str(error)) from None


class AiCommand(Command):
    name = "ai"

    def parse_params(self, params: list[str]) -> AppCommand:
        subcommand = _first(params, "help")
        rest = params[1:]
        match subcommand:
            case "mode":
                return SetAiMode(_parse_mode(_first(rest, "clerk")))
            case "quiet":
                value = _first(rest, "on")
                if value == "on":
                    return SetAiQuiet(True)
                if value == "off":
                    return SetAiQuiet(False)
                raise CommandError(f"unknown quiet value: {value}")
            case "freq":
                value = _first(rest, "normal")
                try:
                    return SetAiFrequency(AiFrequency.parse(value))
                except ValueError as error:
                    raise CommandError(str(error)) from None
            case _:
                raise CommandError(_AI_USAGE)


class ArtCommand(Command):
    name = "art"

    def parse_params(self, params: list[str]) -> AppCommand:
        match _first(params, "help"):
            case "list":
                return ArtList()
            case "reload":
                return ArtReload()
            case _:
                raise CommandError("usage: /art list | /art reload")


class AvatarCommand(Command):
    name = "avatar"

    _SET_USAGE = "usage: /avatar set <target> <preset>"

    def parse_params(self, params: list[str]) -> AppCommand:
        match _first(params, "help"):
            case "set":
                target = _arg(params, 1, self._SET_USAGE)
                preset = _arg(params, 2, self._SET_USAGE)
                return AvatarSet(target, preset)
            case "preview":
                return AvatarPreview()
            case "mode":
                return AvatarMode(_first(params[1:], "normal"))
            case "list":
                return AvatarList()
            case _:
                raise CommandError(
                    "usage: /avatar set <target> <preset> | /avatar preview"
                    " | /avatar mode <compact|normal|expressive> | /avatar list"
                )


class PeerCommand(Command):
    name = "peer"

    _USAGE = "usage: /peer connect <host:port>"

    def parse_params(self, params: list[str]) -> AppCommand:
        subcommand = _first(params)
        if subcommand is None:
            raise CommandError(self._USAGE)
        if subcommand == "connect":
            return PeerConnect(_arg(params, 1, self._USAGE))
        raise CommandError(f"unknown peer command: {subcommand}")


class TrustCommand(Command):
    name = "trust"

    def parse_params(self, params: list[str]) -> AppCommand:
        match _first(params, "list"):
            case "list":
                return TrustList()
            case "add":
                return TrustAdd(_arg(params, 1, "usage: /trust add <peer|fingerprint>"))
            case "remove":
                return TrustRemove(_arg(params, 1, "usage: /trust remove <peer|fingerprint>"))
            case other:
                raise CommandError(f"unknown trust command: {other}")


class RoomCommand(Command):
    name = "room"

    def parse_params(self, params: list[str]) -> AppCommand:
        match _first(params, "list"):
            case "create":
                return self._parse_create(params[1:])
            case "list":
                return RoomList()
            case "switch":
                return RoomSwitch(_arg(params, 1, "usage: /room switch <room_id|index>"))
            case other:
                raise CommandError(f"unknown room command: {other}")

    @staticmethod
    def _parse_create(args: list[str]) -> AppCommand:
        peers: list[str] = []
        ai_mode: AiMode | None = None
        remaining = iter(args)
        for value in remaining:
            if value.startswith("@"):
                peers.append(value.lstrip("@"))
            elif value == "--ai":
                mode_value = next(remaining, None)
                if mode_value is None:
                    raise CommandError("missing value for --ai")
                ai_mode = _parse_mode(mode_value)
            else:
                raise CommandError(f"unknown room argument: {value}")
        if not peers:
            raise CommandError("usage: /room create @user1 [@user2] [--ai <mode>]")
        return RoomCreate(tuple(peers), ai_mode)


class PeersCommand(Command):
    name = "peers"

    def parse_params(self, params: list[str]) -> AppCommand:
        return Peers()


class SkillsCommand(Command):
    name = "skills"

    def parse_params(self, params: list[str]) -> AppCommand:
        return Skills()


class SkillCommand(Command):
    name = "skill"

    def parse_params(self, params: list[str]) -> AppCommand:
        name = _arg(params, 0, "usage: /skill <name> [args]")
        return Skill(name, tuple(params[1:]))


class RunCommand(Command):
    name = "run"

    def parse_params(self, params: list[str]) -> AppCommand:
        value = _arg(params, 0, "usage: /run <proposal_id>")
        if _NUMBER.fullmatch(value) is None or int(value) > _USIZE_MAX:
            raise CommandError(f"invalid proposal id: {value}")
        return RunProposal(int(value))


class CancelCommand(Command):
    name = "cancel"

    def parse_params(self, params: list[str]) -> AppCommand:
        return Cancel()


class SummaryCommand(Command):
    """One of the summary-style commands, each bound to a summary kind."""

    def __init__(self, name: str, kind: SummaryCommandKind) -> None:
        self.name = name
        self.kind = kind

    @classmethod
    def summary(cls) -> SummaryCommand:
        return cls("summary", SummaryCommandKind.SUMMARY)

    @classmethod
    def todos(cls) -> SummaryCommand:
        return cls("todos", SummaryCommandKind.TODOS)

    @classmethod
    def decisions(cls) -> SummaryCommand:
        return cls("decisions", SummaryCommandKind.DECISIONS)

    @classmethod
    def context(cls) -> SummaryCommand:
        return cls("context", SummaryCommandKind.CONTEXT)

    def parse_params(self, params: list[str]) -> AppCommand:
        return Summary(self.kind)


def default_manager() -> CommandManager:
    """A manager with every chat command registered."""
    manager = CommandManager()
    for command in (
        AiCommand(),
        ArtCommand(),
        AvatarCommand(),
        PeerCommand(),
        TrustCommand(),
        RoomCommand(),
        PeersCommand(),
        SkillsCommand(),
        SkillCommand(),
        RunCommand(),
        CancelCommand(),
        SummaryCommand.summary(),
        SummaryCommand.todos(),
        SummaryCommand.decisions(),
        SummaryCommand.context(),
    ):
        manager.register(command)
    return manager