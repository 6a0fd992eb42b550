"""Hook categories, the settings.json hook mapping, and DND defaults."""

from typing import NamedTuple

SOUND_EXTENSIONS = (".wav", ".mp3")
HOOK_TIMEOUT = 5

MUTE_MARKER = ".muted"
DND_MARKER = ".dnd"

# Slash commands copied into ~/.claude/commands
COMMAND_FILES = ("mute.md", "unmute.md")


class HookCategory(NamedTuple):
    key: str
    abbr: str
    description: str


HOOKS = [
    HookCategory("start", "str", "Session starting"),
    HookCategory("prompt", "pmt", "User submitted prompt"),
    HookCategory("permission", "prm", "Permission prompt"),
    HookCategory("stop", "stp", "Done responding"),
    HookCategory("subagent", "sub", "Spawning subagent"),
    HookCategory("task-completed", "tsk", "Task finished"),
    HookCategory("error", "err", "Tool failure"),
    HookCategory("compact", "cmp", "Context compaction"),
    HookCategory("idle", "idl", "Waiting for input"),
    HookCategory("teammate-idle", "tmt", "Teammate went idle"),
    HookCategory("end", "end", "Session over"),
]

HOOK_KEYS = [hook.key for hook in HOOKS]

# Claude Code event -> [(matcher or None, category)]
HOOK_EVENTS = {
    "SessionStart": [("startup", "start")],
    "SessionEnd": [(None, "end")],
    "Notification": [("permission_prompt", "permission"), ("idle_prompt", "idle")],
    "Stop": [(None, "stop")],
    "SubagentStart": [(None, "subagent")],
    "PostToolUseFailure": [(None, "error")],
    "UserPromptSubmit": [(None, "prompt")],
    "TaskCompleted": [(None, "task-completed")],
    "PreCompact": [(None, "compact")],
    "TeammateIdle": [(None, "teammate-idle")],
}

# Processes whose presence means a call or screen share is in progress
DND_DEFAULTS = [
    "CptHost",
    "FaceTime",
    "Microsoft Teams",
    "Webex",
]


def build_hooks_config(command: str) -> dict:
    """Build the ``hooks`` section of settings.json.

    Args:
        command: Shell prefix invoking play-sound.sh; the category is appended.
    """
    config: dict[str, list] = {}
    for event, entries in HOOK_EVENTS.items():
        matchers = []
        for matcher, category in entries:
            entry: dict = {}
            if matcher:
                entry["matcher"] = matcher
            entry["hooks"] = [
                {"type": "command", "command": f"{command} {category}", "timeout": HOOK_TIMEOUT}
            ]
            matchers.append(entry)
        config[event] = matchers
    return config


HOOKS_CONFIG = build_hooks_config('/bin/bash "$HOME/.claude/hooks/play-sound.sh"')
