#!/usr/bin/env python3
"""Regenerate the README Usage section from the sunctl CLI help.

Pass --check to fail instead of writing when the section is stale.
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path

from markdown_it import MarkdownIt

ROOT = Path(__file__).resolve().parents[3]
README_PATH = ROOT / "README.md"
USAGE_HEADING = "Usage"
COMMANDS = ("status", "watch", "on", "ramp", "stop", "alarm", "settings")


def get_help(*command: str) -> str:
    env = os.environ.copy()
    env["COLUMNS"] = "80"
    return subprocess.check_output(
        [sys.executable, "-m", "sunctl.main", *command, "--help"],
        cwd=ROOT,
        env=env,
        text=True,
    ).rstrip()


def build_usage_section(top_level: str, commands: dict[str, str]) -> list[str]:
    lines = [f"## {USAGE_HEADING}", "", "```text", "sunctl --help", top_level, "```", ""]
    for name, help_text in commands.items():
        lines += [f"### {name}", "", "```text", help_text, "```", ""]
    return lines


def find_usage_bounds(readme_text: str) -> tuple[int, int]:
    """Line range of the Usage h2 section, up to the next h2 or end of file."""
    tokens = MarkdownIt().parse(readme_text)
    h2_starts = [
        (index, token.map[0])
        for index, token in enumerate(tokens)
        if token.type == "heading_open" and token.tag == "h2" and token.map
    ]

    start = -1
    for index, line in h2_starts:
        if index + 1 >= len(tokens) or tokens[index + 1].type != "inline":
            continue
        if tokens[index + 1].content.strip() == USAGE_HEADING:
            start = line
            break
    if start < 0:
        raise RuntimeError(f"Could not find '## {USAGE_HEADING}' in {README_PATH.name}.")

    end = next((line for _, line in h2_starts if line > start), len(readme_text.splitlines()))
    return start, end


def render_readme(readme_text: str, usage_lines: list[str]) -> str:
    lines = readme_text.splitlines()
    start, end = find_usage_bounds(readme_text)
    return "\n".join(lines[:start] + usage_lines + lines[end:]).rstrip() + "\n"


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--check", action="store_true", help="Only report staleness.")
    args = parser.parse_args()

    readme_text = README_PATH.read_text(encoding="utf-8")
    usage_lines = build_usage_section(
        get_help(), {name: get_help(name) for name in COMMANDS}
    )
    updated = render_readme(readme_text, usage_lines)

    if updated == readme_text:
        print("README usage section is up to date.")
        return 0
    if args.check:
        print("README usage section is stale.", file=sys.stderr)
        return 1

    README_PATH.write_text(updated, encoding="utf-8")
    print("Updated README usage section.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
