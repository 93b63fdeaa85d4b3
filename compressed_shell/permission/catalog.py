"""
Command catalogs and heuristic tokenization.

Commands are never parsed into a syntax tree. They are split on whitespace,
and for verbose detection on the sequencing/pipe operators.
"""

import re

# Read-only, non-destructive commands auto-allowed without a grant.
SAFE_COMMANDS: tuple[str, ...] = (
    "cd",
    "ls",
    "pwd",
    "tree",
    "find",
    "locate",
    "which",
    "whereis",
    "type",
    "cat",
    "head",
    "tail",
    "less",
    "more",
    "file",
    "stat",
    "wc",
    "diff",
    "grep",
    "egrep",
    "fgrep",
    "rg",
    "ag",
    "awk",
    "sed",
    "sort",
    "uniq",
    "cut",
    "tr",
    "whoami",
    "hostname",
    "uname",
    "date",
    "uptime",
    "env",
    "printenv",
    "id",
    "git status",
    "git log",
    "git branch",
    "git diff",
    "git show",
    "git remote",
    "git config --get",
    "git config --list",
    "git rev-parse",
    "git describe",
    "ps",
    "top",
    "htop",
    "df",
    "du",
    "free",
    "lsof",
    "ping",
    "curl",
    "wget",
    "nslookup",
    "dig",
    "host",
    "node --version",
    "npm --version",
    "pnpm --version",
    "yarn --version",
    "python --version",
    "python3 --version",
    "pip --version",
    "go version",
    "rustc --version",
    "cargo --version",
    "java -version",
    "javac -version",
)

# Tools that typically produce high-volume output.
VERBOSE_COMMANDS: tuple[str, ...] = (
    "npm",
    "yarn",
    "pnpm",
    "pip",
    "apt",
    "apt-get",
    "brew",
    "docker",
    "docker-compose",
    "make",
    "cargo",
    "tsc",
    "webpack",
    "vite",
    "eslint",
    "prettier",
    "npx",
)

_SEGMENT_SEPARATOR = re.compile(r"\s*(?:&&|\|\||;|\|)\s*")


def split_words(command: str) -> list[str]:
    """Split a command into whitespace-delimited tokens."""
    return command.split()


def first_word(command: str) -> str:
    words = split_words(command)
    return words[0] if words else ""


def command_prefix(command: str) -> str:
    """
    Derive the prefix a durable grant is made for.

    The first two tokens when at least two exist ("npm install",
    "docker build"), otherwise the sole token.
    """
    words = split_words(command)
    if len(words) >= 2:
        return f"{words[0]} {words[1]}"
    return words[0] if words else ""


def split_segments(command: str) -> list[str]:
    """Split a command on &&, ||, ; and | into its segments."""
    return _SEGMENT_SEPARATOR.split(command)


def is_safe_command(command: str, catalog: tuple[str, ...] = SAFE_COMMANDS) -> bool:
    """
    Check the command against the safe catalog.

    Only the start of the command is inspected: a safe first clause
    followed by ``&&`` and anything else still matches.
    """
    head = first_word(command)
    for safe in catalog:
        if command == safe or command.startswith(safe + " "):
            return True
        if head == safe:
            return True
    return False


def is_verbose_command(
    command: str, catalog: tuple[str, ...] = VERBOSE_COMMANDS
) -> bool:
    """True when any segment starts with a verbose tool or a hyphenated variant."""
    for segment in split_segments(command):
        head = first_word(segment)
        if not head:
            continue
        if any(head == vc or head.startswith(vc + "-") for vc in catalog):
            return True
    return False


__all__ = [
    "SAFE_COMMANDS",
    "VERBOSE_COMMANDS",
    "split_words",
    "first_word",
    "command_prefix",
    "split_segments",
    "is_safe_command",
    "is_verbose_command",
]
