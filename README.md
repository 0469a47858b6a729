# triadchat

The building blocks of a terminal chat in which people on a local network
talk alongside an AI clerk: configuration, the wire format for peer
messages, avatar art, slash-command parsing, rooms and transcripts, and the
registry of workspace skills.

Install with its test extras:

```
pip install -e ".[test]"
pytest
```

## Configuration

`triadchat.config.Config` holds the multicast discovery address, the TCP
server port, the user name, the terminal bell, the language, the AI settings,
the security policy, the colour theme and the avatar presets.

```python
from triadchat.config import Config

config = Config.load(base="/tmp/conf")        # reads or creates triadchat/config.toml
config = Config.from_options(
    discovery="238.255.0.1:5877",
    tcp_server_port="4000",
    username="alice",
    quiet=True,
    theme="light",
    base="/tmp/conf",
)
print(config.to_toml())
```

`Config.load` falls back to the defaults when the file cannot be read or
parsed; when the file is missing it writes the defaults there. Without a
`base` it uses the user's configuration directory. `Config.from_toml` parses
a document and raises `ValueError` when it is incomplete or invalid.
`from_options` ignores a discovery address that is not `ipv4:port` and a
port that is not a number from 0 to 65535.

`AiProvider.invocation()` gives the program and leading arguments used to
reach each supported AI command-line tool (`claude -p`, `codex exec`,
`gemini -p`, or nothing for `custom`).
`SecurityConfig.default_permission_policy()` turns the stored string into a
`DefaultPermission`, treating unknown values as `confirm-required`.
`LanguageConfig.from_lang_env_value("ja_JP.UTF-8")` derives the AI output and
interface languages from a `LANG`-style value. `Theme.dark()` and
`Theme.light()` give the two colour themes.

## Peer messages

Messages exchanged between peers are dataclasses in `triadchat.message`:
`HelloLan`, `HelloUser`, `UserMessage`, `UserData` (carrying a `Chunk`),
`AiMessage`, `PeerInfoMessage`, `RoomCreate`, `RoomCreateV2`, `RoomJoin` and
`SkillResult`. `triadchat.encoder.encode` turns one into little-endian bytes
and `triadchat.encoder.decode` reads it back, raising `DecodeError` on
malformed input. Bytes written as `RoomCreate` stay readable as
`RoomCreate`.

```python
from triadchat.encoder import decode, encode
from triadchat.message import PeerInfo, PeerInfoMessage

data = encode(PeerInfoMessage(PeerInfo("alice", 4000, "0.1.0", "neko")))
assert decode(data) == PeerInfoMessage(PeerInfo("alice", 4000, "0.1.0", "neko"))
```

AI behaviour modes (`clerk`, `listener`, `moderator`, `operator`,
`companion`) and frequencies (`low`, `normal`, `high`) live in
`triadchat.modes` as `AiMode` and `AiFrequency`.

## Avatars

Five presets are built in (`triadchat.avatar.builtin`): `human_default`,
`ai_default`, `robot_guardian`, `claude` and `neko`. Each renders in
`AvatarSize.COMPACT`, `NORMAL` or `EXPRESSIVE` for any `AvatarState`, as a
list of `triadchat.style.Line` objects made of styled `Span`s.
`AvatarSize.for_width(cols)` picks compact below 80 columns.

`AvatarManager` looks presets up by name and falls back to `ai_default` for
names it does not know. Extra `AvatarPlugin` objects can be passed as
`extra_plugins`; one with the name of an earlier preset replaces it.

```python
from triadchat.avatar.base import AvatarSize, AvatarState
from triadchat.avatar.loader import AvatarManager

manager = AvatarManager()
for line in manager.render("neko", AvatarState.ONLINE, AvatarSize.NORMAL):
    print(line.text())
```

`triadchat.avatar.loader.parse_ansi` converts text with basic SGR colour
escapes into styled lines, and `triadchat.avatar.base.colors_to_spans` turns
a colour grid into half-block pixel art.

## Slash commands

`triadchat.commands.parsers.default_manager()` returns a `CommandManager`
with every command registered: `/ai`, `/art`, `/avatar`, `/peer`, `/trust`,
`/room`, `/peers`, `/skills`, `/skill`, `/run`, `/cancel`, `/summary`,
`/todos`, `/decisions`, `/context` and `/help`.

```python
from triadchat.commands.parsers import default_manager

manager = default_manager()
command = manager.find_command("/room create @bob @carol --ai clerk")
# RoomCreate(peers=('bob', 'carol'), ai_mode=AiMode.CLERK)
```

Parameters are split shell-style. Lines that are not known commands give
`None`; bad arguments raise `CommandError` with a usage message. Further
parsers are added with `CommandManager.register`.

## Rooms and transcripts

`triadchat.room.engine.RoomEngine` creates rooms (adding an `ops-ai` member
when an AI mode is given), accepts rooms announced by peers, and switches the
active room by id or by 1-based index, raising `UnknownRoomError` otherwise.
`triadchat.room.transcript.TranscriptWriter` appends `TranscriptEntry`
records as JSON lines to `<base>/triadchat/transcripts/<room_id>.jsonl`; it
is a context manager.

## Skills

`triadchat.skill.registry.SkillRegistry.scan(workspace)` reads every
`.claude/skills/*/SKILL.md` below a workspace, parses its YAML front matter,
skips broken files, sorts skills by name and keeps a modification-time cache
(`scan_with_cache_base` chooses where). `triadchat.skill.executor.SkillExecutor.run`
awaits `run_skill(name, args)` on any object that provides it, with a time
limit of 60 seconds by default, and reports success, failure or timeout as a
`SkillResultPayload`.

## What this package does not do

There is no program to run: the package has no command-line entry point, no
terminal screen, no networking (peer discovery, TCP connections, file
transfer) and no AI mediator that calls the AI tools or decides when the AI
should step in. `AvatarManager` does not load plugins from its `plugin_dir`;
only the builtin presets and plugins passed in are available.