import pytest

from triadchat.commands.app import (
    ArtList,
    ArtReload,
    AvatarList,
    AvatarMode,
    AvatarPreview,
    AvatarSet,
    Cancel,
    CommandError,
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
from triadchat.commands.parsers import (
    AiCommand,
    ArtCommand,
    AvatarCommand,
    CancelCommand,
    PeerCommand,
    PeersCommand,
    RoomCommand,
    RunCommand,
    SkillCommand,
    SkillsCommand,
    SummaryCommand,
    TrustCommand,
    default_manager,
)
from triadchat.modes import AiFrequency, AiMode

# ─── /ai ──────────────────────────────────────────────────────────────────────


def test_ai_companion_mode():
    assert AiCommand().parse_params(["mode", "companion"]) == SetAiMode(AiMode.COMPANION)


def test_ai_unknown_mode_errors():
    with pytest.raises(CommandError):
        AiCommand().parse_params(["mode", "unknown_mode"])


def test_ai_error_describes_modes():
    with pytest.raises(CommandError) as info:
        AiCommand().parse_params(["wat"])
    message = str(info.value)
    for expected in ("usage: /ai mode <mode>", "clerk", "listener", "moderator", "operator"):
        assert expected in message


def test_ai_mode_defaults_to_clerk():
    assert AiCommand().parse_params(["mode"]) == SetAiMode(AiMode.CLERK)


def test_ai_quiet_defaults_on_and_accepts_off():
    assert AiCommand().parse_params(["quiet"]) == SetAiQuiet(True)
    assert AiCommand().parse_params(["quiet", "off"]) == SetAiQuiet(False)


def test_ai_quiet_bad_value():
    with pytest.raises(CommandError, match="unknown quiet value: maybe"):
        AiCommand().parse_params(["quiet", "maybe"])


def test_ai_freq():
    assert AiCommand().parse_params(["freq"]) == SetAiFrequency(AiFrequency.NORMAL)
    assert AiCommand().parse_params(["freq", "high"]) == SetAiFrequency(AiFrequency.HIGH)
    with pytest.raises(CommandError, match="unknown ai frequency: often"):
        AiCommand().parse_params(["freq", "often"])


def test_ai_without_params_is_usage():
    with pytest.raises(CommandError, match="usage: /ai quiet"):
        AiCommand().parse_params([])


# ─── /art ─────────────────────────────────────────────────────────────────────


def test_art_list_and_reload():
    assert ArtCommand().parse_params(["list"]) == ArtList()
    assert ArtCommand().parse_params(["reload"]) == ArtReload()


def test_art_unknown_subcommand():
    with pytest.raises(CommandError):
        ArtCommand().parse_params(["bogus"])


# ─── /avatar ──────────────────────────────────────────────────────────────────


def test_avatar_set():
    assert AvatarCommand().parse_params(["set", "me", "neko"]) == AvatarSet("me", "neko")


def test_avatar_set_missing_preset():
    with pytest.raises(CommandError, match="usage: /avatar set <target> <preset>"):
        AvatarCommand().parse_params(["set", "me"])


def test_avatar_other_subcommands():
    assert AvatarCommand().parse_params(["preview"]) == AvatarPreview()
    assert AvatarCommand().parse_params(["mode"]) == AvatarMode("normal")
    assert AvatarCommand().parse_params(["mode", "compact"]) == AvatarMode("compact")
    assert AvatarCommand().parse_params(["list"]) == AvatarList()


def test_avatar_unknown():
    with pytest.raises(CommandError):
        AvatarCommand().parse_params([])


# ─── /peer and /trust ─────────────────────────────────────────────────────────


def test_peer_connect():
    assert PeerCommand().parse_params(["connect", "host:1"]) == PeerConnect("host:1")


def test_peer_errors():
    with pytest.raises(CommandError, match="usage: /peer connect"):
        PeerCommand().parse_params([])
    with pytest.raises(CommandError, match="usage: /peer connect"):
        PeerCommand().parse_params(["connect"])
    with pytest.raises(CommandError, match="unknown peer command: drop"):
        PeerCommand().parse_params(["drop"])


def test_trust_subcommands():
    assert TrustCommand().parse_params([]) == TrustList()
    assert TrustCommand().parse_params(["add", "tanaka"]) == TrustAdd("tanaka")
    assert TrustCommand().parse_params(["remove", "tanaka"]) == TrustRemove("tanaka")


def test_trust_errors():
    with pytest.raises(CommandError, match="usage: /trust remove"):
        TrustCommand().parse_params(["remove"])
    with pytest.raises(CommandError, match="unknown trust command: nuke"):
        TrustCommand().parse_params(["nuke"])


# ─── /room ────────────────────────────────────────────────────────────────────


def test_room_create_accepts_companion_mode():
    parsed = RoomCommand().parse_params(["create", "@user", "--ai", "companion"])
    assert parsed == RoomCreate(("user",), AiMode.COMPANION)


def test_room_create_unknown_mode_errors():
    with pytest.raises(CommandError):
        RoomCommand().parse_params(["create", "@user", "--ai", "unknown_mode"])


def test_room_create_requires_peers():
    with pytest.raises(CommandError, match="usage: /room create"):
        RoomCommand().parse_params(["create", "--ai", "clerk"])


def test_room_create_missing_ai_value():
    with pytest.raises(CommandError, match="missing value for --ai"):
        RoomCommand().parse_params(["create", "@user", "--ai"])


def test_room_create_unknown_argument():
    with pytest.raises(CommandError, match="unknown room argument: user"):
        RoomCommand().parse_params(["create", "user"])


def test_room_create_strips_all_leading_ats():
    assert RoomCommand().parse_params(["create", "@@a", "@b"]) == RoomCreate(("a", "b"))


def test_room_list_and_switch():
    assert RoomCommand().parse_params([]) == RoomList()
    assert RoomCommand().parse_params(["switch", "2"]) == RoomSwitch("2")
    with pytest.raises(CommandError):
        RoomCommand().parse_params(["switch"])


def test_peers_ignores_params():
    assert PeersCommand().parse_params(["x"]) == Peers()


# ─── skills ───────────────────────────────────────────────────────────────────


def test_skills_and_cancel():
    assert SkillsCommand().parse_params([]) == Skills()
    assert CancelCommand().parse_params([]) == Cancel()


def test_skill_with_args():
    parsed = SkillCommand().parse_params(["review-auth", "T-1", "fast"])
    assert parsed == Skill("review-auth", ("T-1", "fast"))


def test_skill_requires_name():
    with pytest.raises(CommandError, match="usage: /skill"):
        SkillCommand().parse_params([])


def test_run_proposal():
    assert RunCommand().parse_params(["1"]) == RunProposal(1)


def test_run_rejects_non_numbers():
    with pytest.raises(CommandError):
        RunCommand().parse_params(["abc"])
    with pytest.raises(CommandError):
        RunCommand().parse_params(["-1"])
    with pytest.raises(CommandError, match="usage: /run"):
        RunCommand().parse_params([])


# ─── summary ──────────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "factory, name, kind",
    [
        (SummaryCommand.summary, "summary", SummaryCommandKind.SUMMARY),
        (SummaryCommand.todos, "todos", SummaryCommandKind.TODOS),
        (SummaryCommand.decisions, "decisions", SummaryCommandKind.DECISIONS),
        (SummaryCommand.context, "context", SummaryCommandKind.CONTEXT),
    ],
)
def test_summary_commands(factory, name, kind):
    command = factory()
    assert command.name == name
    assert command.parse_params(["ignored"]) == Summary(kind)


# ─── default manager ──────────────────────────────────────────────────────────


def test_default_manager_routes_commands():
    manager = default_manager()
    assert manager.find_command("/room create @a --ai clerk") == RoomCreate(("a",), AiMode.CLERK)
    assert manager.find_command("/todos") == Summary(SummaryCommandKind.TODOS)
    assert manager.find_command("/run 1") == RunProposal(1)
    assert manager.find_command("/send file.txt") is None


def test_default_manager_surfaces_usage_errors():
    with pytest.raises(CommandError, match="usage: /ai mode"):
        default_manager().find_command("/ai")