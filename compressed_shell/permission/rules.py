"""
Durable rule matching.

Rules are strings stored in a project's settings file. A command is allowed
when any rule satisfies any matcher; matchers run in order and the first
hit wins. New rule kinds are added by appending a matcher.

Rule kinds:
- ``<tool>(command:<command>)``        exact command
- ``<tool>(command:<prefix> *)``       two-token prefix plus anything
- ``<tool>(command:<first-word> *)``   legacy single-token prefix
- ``Bash(<prefix>:*)``                 authored outside this tool
"""

import re
from dataclasses import dataclass, field
from typing import Callable

from compressed_shell.permission.catalog import command_prefix, first_word
from compressed_shell.utils.logging import get_logger

logger = get_logger(__name__)

_BASH_RULE = re.compile(r"^Bash\((.+?):\*\)$")


@dataclass(frozen=True)
class RuleContext:
    """Everything a matcher may look at for one command."""

    command: str
    tool_name: str
    prefix: str = field(default="")
    first_word: str = field(default="")

    @classmethod
    def for_command(cls, command: str, tool_name: str) -> "RuleContext":
        return cls(
            command=command,
            tool_name=tool_name,
            prefix=command_prefix(command),
            first_word=first_word(command),
        )


RuleMatcher = Callable[[str, RuleContext], bool]


def build_rule(prefix: str, tool_name: str) -> str:
    """The rule string written by a durable grant for ``prefix``."""
    return f"{tool_name}(command:{prefix} *)"


def match_exact_command(rule: str, ctx: RuleContext) -> bool:
    return rule == f"{ctx.tool_name}(command:{ctx.command})"


def match_prefix_wildcard(rule: str, ctx: RuleContext) -> bool:
    return bool(ctx.prefix) and rule == build_rule(ctx.prefix, ctx.tool_name)


def match_first_word_wildcard(rule: str, ctx: RuleContext) -> bool:
    return bool(ctx.first_word) and rule == build_rule(ctx.first_word, ctx.tool_name)


def match_bash_prefix(rule: str, ctx: RuleContext) -> bool:
    m = _BASH_RULE.match(rule)
    if not m:
        return False
    bash_prefix = m.group(1)
    return ctx.command == bash_prefix or ctx.command.startswith(bash_prefix + " ")


DEFAULT_MATCHERS: tuple[RuleMatcher, ...] = (
    match_exact_command,
    match_prefix_wildcard,
    match_first_word_wildcard,
    match_bash_prefix,
)


class RuleEngine:
    """Ordered matcher list evaluated first-match-wins."""

    def __init__(
        self,
        tool_name: str,
        matchers: tuple[RuleMatcher, ...] | list[RuleMatcher] = DEFAULT_MATCHERS,
    ) -> None:
        self.tool_name = tool_name
        self.matchers = list(matchers)

    def build_rule(self, prefix: str) -> str:
        return build_rule(prefix, self.tool_name)

    def find_match(self, command: str, rules: list[str]) -> str | None:
        """Return the first rule that allows ``command``, if any."""
        ctx = RuleContext.for_command(command, self.tool_name)
        for rule in rules:
            for matcher in self.matchers:
                if matcher(rule, ctx):
                    logger.debug(
                        "durable_rule_matched",
                        command=command,
                        rule=rule,
                        matcher=matcher.__name__,
                    )
                    return rule
        return None


__all__ = [
    "RuleContext",
    "RuleMatcher",
    "RuleEngine",
    "DEFAULT_MATCHERS",
    "build_rule",
    "match_exact_command",
    "match_prefix_wildcard",
    "match_first_word_wildcard",
    "match_bash_prefix",
]
