"""Parametrized help and ``--examples`` tests for every CLI command."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from obridge.cli import cli

# (CLI args, expected keywords in output)
HELP_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["--help"], ["run", "scan", "link", "exclude", "exclusions", "self-link", "--json"]),
    (["run", "--help"], ["scan + link", "--examples"]),
    (["scan", "--help"], ["snapshot"]),
    (["link", "--help"], ["--dry-run"]),
    (["exclude", "--help"], ["TARGET", "--name", "--outside", "--linked"]),
    (["unexclude", "--help"], ["TARGET", "--name"]),
    (["exclusions", "--help"], ["--aliases"]),
    (["set-flags", "--help"], ["NAME", "--dir", "--no-outside", "--no-linked"]),
    (["self-link", "--help"], ["--on", "--off"]),
]

EXAMPLE_COMMANDS = [
    "run",
    "scan",
    "link",
    "exclude",
    "unexclude",
    "exclusions",
    "set-flags",
    "self-link",
]


def _help_id(args_keywords: tuple[list[str], list[str]]) -> str:
    args, _ = args_keywords
    return "_".join(a for a in args if a != "--help") or "root"


@pytest.mark.parametrize(
    "args,expected_keywords",
    HELP_COMMANDS,
    ids=[_help_id(item) for item in HELP_COMMANDS],
)
def test_command_help(cli_runner: CliRunner, args: list[str], expected_keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    for kw in expected_keywords:
        assert kw in result.output, f"Expected '{kw}' in help output for {args}"


@pytest.mark.parametrize("command", EXAMPLE_COMMANDS)
def test_command_examples(cli_runner: CliRunner, command: str) -> None:
    result = cli_runner.invoke(cli, [command, "--examples"])
    assert result.exit_code == 0
    assert f"Examples for 'cli {command}'" in result.output
    assert f"obridge {command}" in result.output


def test_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "obridge" in result.output


def test_bare_invocation_shows_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage:" in result.output
