"""Configuration for the invocation bridge."""

from __future__ import annotations

import sys
from collections.abc import Mapping
from dataclasses import dataclass


def current_command() -> tuple[str, ...]:
    """Get the argv prefix that re-runs the current program.

    Programs started with ``python -m pkg`` are re-run the same way, so
    relative imports in the package's ``__main__`` keep working. Scripts
    launched as ``python app.py`` are not executable themselves, so they are
    re-run through the current interpreter.
    """
    spec = getattr(sys.modules.get("__main__"), "__spec__", None)
    if spec is not None and spec.name:
        return (sys.executable, "-m", spec.name.removesuffix(".__main__"))

    argv0 = sys.argv[0] if sys.argv and sys.argv[0] else sys.executable
    if argv0.endswith(".py"):
        return (sys.executable, argv0)
    return (argv0,)


@dataclass(frozen=True)
class BridgeConfig:
    """Configuration for the Invoker.

    Values are captured once when the bridge is built and never change while
    the server runs.

    Attributes:
        command: Argv prefix of the program each tool call re-executes.
            Defaults to the currently running program.
        prefix: Path segments inserted before the tool's command path, for
            bridges that serve a subtree reached through a leading path.
        timeout: Wall-clock limit per call (seconds). None means no limit.
        env: Extra environment variables for the child, merged over os.environ.
    """

    command: tuple[str, ...] = ()
    prefix: tuple[str, ...] = ()
    timeout: float | None = None
    env: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.command:
            object.__setattr__(self, "command", current_command())
        else:
            object.__setattr__(self, "command", tuple(self.command))
        object.__setattr__(self, "prefix", tuple(self.prefix))

        if not self.command[0]:
            raise ValueError("command executable cannot be empty")
        if any(not segment for segment in self.prefix):
            raise ValueError(f"prefix segments cannot be empty, got: {self.prefix!r}")
        if self.timeout is not None and self.timeout <= 0.0:
            raise ValueError(f"timeout must be positive or None, got: {self.timeout}")

    @classmethod
    def from_process(cls, *prefix: str, timeout: float | None = None) -> BridgeConfig:
        """Create a config that re-executes the running program."""
        return cls(command=current_command(), prefix=prefix, timeout=timeout)
