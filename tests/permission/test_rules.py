"""Tests for durable rule matching."""

import pytest

from compressed_shell.permission.rules import (
    RuleContext,
    RuleEngine,
    build_rule,
    match_bash_prefix,
    match_exact_command,
    match_first_word_wildcard,
    match_prefix_wildcard,
)

TOOL = "mcp__compressed-shell__shell"


@pytest.fixture
def engine():
    return RuleEngine(tool_name=TOOL)


def _ctx(command: str) -> RuleContext:
    return RuleContext.for_command(command, TOOL)


def test_build_rule():
    assert build_rule("npm install", TOOL) == f"{TOOL}(command:npm install *)"


class TestMatchers:
    def test_exact(self):
        rule = f"{TOOL}(command:npm run build)"
        assert match_exact_command(rule, _ctx("npm run build"))
        assert not match_exact_command(rule, _ctx("npm run build --watch"))

    def test_prefix_wildcard(self):
        rule = f"{TOOL}(command:npm install *)"
        assert match_prefix_wildcard(rule, _ctx("npm install lodash"))
        assert match_prefix_wildcard(rule, _ctx("npm install"))
        assert not match_prefix_wildcard(rule, _ctx("npm remove lodash"))

    def test_first_word_wildcard(self):
        rule = f"{TOOL}(command:make *)"
        assert match_first_word_wildcard(rule, _ctx("make build"))
        assert not match_first_word_wildcard(rule, _ctx("cmake build"))

    def test_bash_prefix(self):
        rule = "Bash(npm run:*)"
        assert match_bash_prefix(rule, _ctx("npm run"))
        assert match_bash_prefix(rule, _ctx("npm run test"))
        assert not match_bash_prefix(rule, _ctx("npm runner"))
        assert not match_bash_prefix("Bash(npm run)", _ctx("npm run"))

    def test_other_tool_rule_ignored(self):
        rule = "other_tool(command:npm install *)"
        assert not match_prefix_wildcard(rule, _ctx("npm install lodash"))


class TestRuleEngine:
    def test_find_match_returns_rule(self, engine):
        rules = ["Bash(git push:*)", engine.build_rule("npm install")]
        assert engine.find_match("npm install lodash", rules) == engine.build_rule(
            "npm install"
        )
        assert engine.find_match("git push origin main", rules) == "Bash(git push:*)"

    def test_no_match(self, engine):
        assert engine.find_match("npm remove lodash", [engine.build_rule("npm install")]) is None
        assert engine.find_match("npm install", []) is None

    def test_custom_matcher_list(self):
        engine = RuleEngine(tool_name=TOOL, matchers=[match_exact_command])
        assert engine.find_match("npm install x", [engine.build_rule("npm install")]) is None
