"""
Instruction payload sent to the summarization oracle.
"""

from dataclasses import dataclass

from compressed_shell.utils.template import renderer

PRESERVE_ITEMS: tuple[str, ...] = (
    "ALL errors and warnings (error, ERR, warn, fail, FATAL)",
    "Exit code and final status",
    "File paths created/modified/deleted",
    "Counts (X packages installed, Y files compiled)",
    "Timing info (took Xs, duration)",
    "Version numbers",
)

REMOVE_ITEMS: tuple[str, ...] = (
    "Progress bars/spinners",
    "Download speeds/percentages",
    "Repeated similar lines (show count instead)",
    "Verbose file listings",
    "ASCII art",
    "Redundant info logs",
)

MAX_SUMMARY_LINES = 15

COMPRESSION_PROMPT = """You are a terminal output compressor for an AI coding agent. Reduce verbose output while preserving critical information.

COMMAND: {{ command }}
EXIT CODE: {{ exit_code }}
ORIGINAL LINES: {{ line_count }}

ALWAYS PRESERVE:
{% for item in preserve %}
- {{ item }}
{% endfor %}

REMOVE:
{% for item in remove %}
- {{ item }}
{% endfor %}

FORMAT: Bullet points, max {{ max_lines }} lines, start with SUCCESS/FAILED/WARNING

Compress this output:

{{ output }}"""


@dataclass(frozen=True)
class CompressionRequest:
    """What the oracle is asked to compress."""

    output: str
    command: str
    exit_code: int

    @property
    def line_count(self) -> int:
        return count_lines(self.output)

    def render_prompt(self) -> str:
        return build_compression_prompt(self.output, self.command, self.exit_code)


def count_lines(text: str) -> int:
    """Number of newline-separated pieces; an empty string is one line."""
    return len(text.split("\n"))


def build_compression_prompt(output: str, command: str, exit_code: int) -> str:
    return renderer.render(
        COMPRESSION_PROMPT,
        command=command,
        exit_code=exit_code,
        line_count=count_lines(output),
        preserve=PRESERVE_ITEMS,
        remove=REMOVE_ITEMS,
        max_lines=MAX_SUMMARY_LINES,
        output=output,
    )


__all__ = [
    "COMPRESSION_PROMPT",
    "PRESERVE_ITEMS",
    "REMOVE_ITEMS",
    "MAX_SUMMARY_LINES",
    "CompressionRequest",
    "build_compression_prompt",
    "count_lines",
]
