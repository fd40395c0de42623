"""Test fixtures for click-mcp."""

import sys
from pathlib import Path

import pytest

from click_mcp import BridgeConfig, Command, Flag

# Tool calls re-execute a program; echo prints back the argv it was given.
ECHO = "/bin/echo"

requires_posix = pytest.mark.skipif(
    sys.platform == "win32" or not Path(ECHO).exists(),
    reason="requires POSIX /bin/echo and /bin/sh",
)


def _noop() -> None:
    """Action placeholder; bridged commands run in a subprocess, never in-process."""


@pytest.fixture
def echo_config() -> BridgeConfig:
    """Bridge config that re-executes /bin/echo instead of this program."""
    return BridgeConfig(command=(ECHO,))


@pytest.fixture
def sub_tree() -> Command:
    """Root 'test' with a 'sub' command taking a required int64 'target'."""
    return Command(
        name="test",
        usage="do a test",
        version="1.0.0",
        action=_noop,
        commands=(
            Command(
                name="sub",
                description="do a sub test",
                flags=(
                    Flag(
                        name="target",
                        type="int64",
                        usage="submarine to target",
                        required=True,
                        default=688,
                    ),
                ),
                action=_noop,
            ),
        ),
    )


@pytest.fixture
def exclusion_tree() -> Command:
    """Tree mixing visible, hidden, 'mcp' and 'help' commands at two levels."""

    def leaf(name: str, *, hidden: bool = False, commands: tuple[Command, ...] = ()) -> Command:
        return Command(
            name=name,
            usage=f"{name} command",
            action=_noop,
            hidden=hidden,
            commands=commands,
        )

    return Command(
        name="test",
        action=_noop,
        commands=(
            leaf("visible"),
            leaf("mcp", commands=(leaf("below-mcp"),)),
            leaf("hidden", hidden=True, commands=(leaf("below-hidden"),)),
            leaf("help"),
            leaf(
                "parent",
                commands=(
                    leaf("visible-sub"),
                    leaf("mcp"),
                    leaf("hidden", hidden=True),
                    leaf("help"),
                ),
            ),
        ),
    )


@pytest.fixture
def sample_app(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Importable module ``sample_app`` defining a click group ``app``."""
    (tmp_path / "sample_app.py").write_text('''
import sys

import click


@click.group(name="app")
def app():
    pass


@app.command(help="Say hello")
@click.option("--name", default="World", help="Who to greet")
def hello(name):
    click.echo(f"Hello, {name}")


@app.command(help="Always fails")
@click.option("--reason", default="broken", help="Failure reason")
def fail(reason):
    click.echo("partial output")
    click.echo(f"failed: {reason}", err=True)
    sys.exit(2)
''')
    monkeypatch.syspath_prepend(str(tmp_path))
    sys.modules.pop("sample_app", None)
    return tmp_path
