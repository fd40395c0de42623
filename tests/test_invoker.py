"""Tests for the invocation bridge."""

import asyncio

import pytest

from click_mcp import (
    BridgeConfig,
    CallResult,
    Invoker,
    RecursionGuardError,
    UnsupportedArgumentError,
)
from click_mcp.invoker import format_value
from tests.conftest import ECHO, requires_posix


class TestFormatValue:
    """Tests for rendering argument values as argv tokens."""

    def test_string_passes_through(self) -> None:
        assert format_value("689") == "689"
        assert format_value("a b; rm -rf /") == "a b; rm -rf /"
        assert format_value("") == ""

    def test_booleans(self) -> None:
        assert format_value(True) == "true"
        assert format_value(False) == "false"

    def test_integers(self) -> None:
        assert format_value(688) == "688"
        assert format_value(-3) == "-3"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (688.0, "688"),
            (0.5, "0.5"),
            (0.1, "0.1"),
            (-2.25, "-2.25"),
            (1e-07, "0.0000001"),
            (1e16, "10000000000000000"),
            (0.0, "0"),
        ],
    )
    def test_floats_shortest_positional(self, value: float, expected: str) -> None:
        assert format_value(value) == expected

    @pytest.mark.parametrize("value", [None, ["a"], {"a": 1}, (1, 2)])
    def test_unsupported_types(self, value: object) -> None:
        with pytest.raises(TypeError):
            format_value(value)


class TestBuildArgs:
    """Tests for argv reconstruction from tool name and arguments."""

    def test_drops_root_segment(self) -> None:
        invoker = Invoker(BridgeConfig(command=(ECHO,)))

        assert invoker.build_args("test", {}) == []
        assert invoker.build_args("test_sub", {}) == ["sub"]
        assert invoker.build_args("test_parent_visible-sub", {}) == ["parent", "visible-sub"]

    def test_prepends_prefix(self) -> None:
        invoker = Invoker(BridgeConfig(command=(ECHO,), prefix=("foo", "bar")))

        assert invoker.build_args("test_sub", {}) == ["foo", "bar", "sub"]

    def test_arguments_as_long_flags(self) -> None:
        invoker = Invoker(BridgeConfig(command=(ECHO,)))

        args = invoker.build_args(
            "test_sub", {"target": "689", "verbose": True, "ratio": 0.5, "count": 3}
        )

        assert args == [
            "sub",
            "--target", "689",
            "--verbose", "true",
            "--ratio", "0.5",
            "--count", "3",
        ]  # fmt: skip

    def test_recursion_guard_in_path(self) -> None:
        invoker = Invoker(BridgeConfig(command=(ECHO,)))

        with pytest.raises(RecursionGuardError) as exc_info:
            invoker.build_args("test_mcp", {})

        assert exc_info.value.command_args == ["mcp"]

    def test_recursion_guard_in_prefix(self) -> None:
        invoker = Invoker(BridgeConfig(command=(ECHO,), prefix=("mcp",)))

        with pytest.raises(RecursionGuardError):
            invoker.build_args("test_sub", {})

    def test_argument_named_mcp_is_allowed(self) -> None:
        invoker = Invoker(BridgeConfig(command=(ECHO,)))

        assert invoker.build_args("test_sub", {"mcp": "x"}) == ["sub", "--mcp", "x"]

    def test_unsupported_argument_value(self) -> None:
        invoker = Invoker(BridgeConfig(command=(ECHO,)))

        with pytest.raises(UnsupportedArgumentError) as exc_info:
            invoker.build_args("test_sub", {"files": ["a", "b"]})

        assert exc_info.value.tool_name == "test_sub"
        assert exc_info.value.argument == "files"


@requires_posix
class TestInvokerSubprocess:
    """Tests that run real child processes."""

    @pytest.mark.asyncio
    async def test_echo_returns_stdout(self) -> None:
        invoker = Invoker(BridgeConfig(command=(ECHO,)))

        result = await invoker("test", {"target": "689"})

        assert result == CallResult.success("--target 689\n")

    @pytest.mark.asyncio
    async def test_echo_with_prefix(self) -> None:
        invoker = Invoker(BridgeConfig(command=(ECHO,), prefix=("foo", "bar")))

        result = await invoker("test_sub", {})

        assert result == CallResult.success("foo bar sub\n")

    @pytest.mark.asyncio
    async def test_shell_metacharacters_are_not_interpreted(self) -> None:
        invoker = Invoker(BridgeConfig(command=(ECHO,)))

        result = await invoker("test", {"name": "$(whoami); echo pwned"})

        assert result.text == "--name $(whoami); echo pwned\n"

    @pytest.mark.asyncio
    async def test_nonzero_exit_returns_stderr_as_error(self) -> None:
        script = 'echo "partial stdout"; echo "bad: $*" >&2; exit 3'
        invoker = Invoker(BridgeConfig(command=("/bin/sh", "-c", script, "sh")))

        result = await invoker("test_sub", {"x": "1"})

        assert result.is_error is True
        assert result.text == "bad: sub --x 1\n"

    @pytest.mark.asyncio
    async def test_success_ignores_stderr(self) -> None:
        invoker = Invoker(BridgeConfig(command=("/bin/sh", "-c", "echo out; echo err >&2", "sh")))

        result = await invoker("test", {})

        assert result == CallResult.success("out\n")

    @pytest.mark.asyncio
    async def test_missing_executable_is_error_result(self) -> None:
        invoker = Invoker(BridgeConfig(command=("/nonexistent/click-mcp-test-binary",)))

        result = await invoker("test_sub", {})

        assert result == CallResult.failure("")

    @pytest.mark.asyncio
    async def test_env_is_merged(self) -> None:
        invoker = Invoker(
            BridgeConfig(
                command=("/bin/sh", "-c", 'echo "$CLICK_MCP_TEST"', "sh"),
                env={"CLICK_MCP_TEST": "from-config"},
            )
        )

        result = await invoker("test", {})

        assert result.text == "from-config\n"

    @pytest.mark.asyncio
    async def test_child_does_not_read_server_stdin(self) -> None:
        invoker = Invoker(BridgeConfig(command=("/bin/sh", "-c", "cat; echo done", "sh")))

        result = await asyncio.wait_for(invoker("test", {}), timeout=10)

        assert result == CallResult.success("done\n")

    @pytest.mark.asyncio
    async def test_timeout_kills_child(self) -> None:
        invoker = Invoker(BridgeConfig(command=("/bin/sleep",), timeout=0.2))

        result = await invoker("test_30", {})

        assert result.is_error is True
        assert "timed out after 0.2s" in result.text

    @pytest.mark.asyncio
    async def test_repeated_calls_classify_identically(self) -> None:
        invoker = Invoker(BridgeConfig(command=(ECHO,)))

        first = await invoker("test_sub", {"target": 1})
        second = await invoker("test_sub", {"target": 1})

        assert first == second == CallResult.success("sub --target 1\n")

    @pytest.mark.asyncio
    async def test_cancellation_kills_child(self, monkeypatch: pytest.MonkeyPatch) -> None:
        processes: list[asyncio.subprocess.Process] = []
        real_exec = asyncio.create_subprocess_exec

        async def spy_exec(*args, **kwargs):
            process = await real_exec(*args, **kwargs)
            processes.append(process)
            return process

        monkeypatch.setattr(asyncio, "create_subprocess_exec", spy_exec)
        invoker = Invoker(BridgeConfig(command=("/bin/sleep",)))

        task = asyncio.create_task(invoker("test_30", {}))
        while not processes:
            await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        returncode = await asyncio.wait_for(processes[0].wait(), timeout=5)
        assert returncode != 0
