"""Tests for the compression prompt."""

from compressed_shell.compression.prompt import (
    CompressionRequest,
    build_compression_prompt,
    count_lines,
)


def test_count_lines():
    assert count_lines("") == 1
    assert count_lines("a") == 1
    assert count_lines("a\nb") == 2
    assert count_lines("a\nb\n") == 3


def test_prompt_contains_request_fields():
    output = "\n".join(f"line {i}" for i in range(40))
    prompt = build_compression_prompt(output, "npm install", 1)

    assert "COMMAND: npm install" in prompt
    assert "EXIT CODE: 1" in prompt
    assert "ORIGINAL LINES: 40" in prompt
    assert "ALWAYS PRESERVE:" in prompt
    assert "- ALL errors and warnings (error, ERR, warn, fail, FATAL)" in prompt
    assert "REMOVE:" in prompt
    assert "- Progress bars/spinners" in prompt
    assert "max 15 lines, start with SUCCESS/FAILED/WARNING" in prompt
    assert prompt.endswith("Compress this output:\n\n" + output)


def test_output_is_not_template_expanded():
    prompt = build_compression_prompt("{{ command }} {% raw %}", "make", 0)
    assert prompt.endswith("{{ command }} {% raw %}")


def test_request_render_matches_builder():
    request = CompressionRequest(output="a\nb", command="make", exit_code=0)
    assert request.line_count == 2
    assert request.render_prompt() == build_compression_prompt("a\nb", "make", 0)
