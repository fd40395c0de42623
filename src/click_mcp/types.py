"""Command tree and tool descriptor types."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Separates command path segments in a qualified tool name.
TOOL_DELIMITER = "_"


class FlagKind(Enum):
    """Closed set of flag kinds the schema translator understands."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"


# Flag type names (as reported by the CLI framework) -> kind.
# Anything missing here is an unsupported flag type.
FLAG_KINDS: dict[str, FlagKind] = {
    "string": FlagKind.STRING,
    "text": FlagKind.STRING,
    "path": FlagKind.STRING,
    "choice": FlagKind.STRING,
    "bool": FlagKind.BOOLEAN,
    "boolean": FlagKind.BOOLEAN,
    "int": FlagKind.INTEGER,
    "int8": FlagKind.INTEGER,
    "int16": FlagKind.INTEGER,
    "int32": FlagKind.INTEGER,
    "int64": FlagKind.INTEGER,
    "uint": FlagKind.INTEGER,
    "uint8": FlagKind.INTEGER,
    "uint16": FlagKind.INTEGER,
    "uint32": FlagKind.INTEGER,
    "uint64": FlagKind.INTEGER,
    "integer": FlagKind.INTEGER,
    "integer range": FlagKind.INTEGER,
    "float": FlagKind.FLOAT,
    "float32": FlagKind.FLOAT,
    "float64": FlagKind.FLOAT,
    "float range": FlagKind.FLOAT,
}


@dataclass(frozen=True)
class Flag:
    """A typed, named parameter accepted by a command.

    ``type`` is the flag's type name in the source CLI framework; it is
    resolved to a FlagKind by the schema translator.
    """

    name: str
    type: str
    usage: str = ""
    required: bool = False
    default: Any = None

    @property
    def kind(self) -> FlagKind | None:
        """The flag's kind, or None when its type is unsupported."""
        return FLAG_KINDS.get(self.type.lower())


@dataclass(frozen=True)
class Command:
    """One node of a CLI command tree.

    A command with an ``action`` is callable. Hidden commands and everything
    beneath them are never exposed as tools.
    """

    name: str
    description: str = ""
    usage: str = ""
    version: str = ""
    flags: tuple[Flag, ...] = ()
    commands: tuple[Command, ...] = ()
    action: Callable[..., Any] | None = None
    hidden: bool = False

    @property
    def has_action(self) -> bool:
        return self.action is not None


@dataclass(frozen=True)
class ParameterSchema:
    """A parameter of a tool, in JSON Schema terms."""

    name: str
    type: str  # "string", "boolean" or "number"
    description: str = ""
    required: bool = False
    default: str | bool | float | None = None

    def to_json_schema(self) -> dict[str, Any]:
        """Render as a JSON Schema property definition.

        Examples:
            - {"type": "string", "description": "name to greet", "default": "World"}
            - {"type": "number", "description": "first number"}
        """
        prop: dict[str, Any] = {"type": self.type}
        if self.description:
            prop["description"] = self.description
        if self.default is not None:
            prop["default"] = self.default
        return prop


@dataclass(frozen=True)
class ToolDescriptor:
    """A tool exposed to the calling agent."""

    name: str
    description: str
    parameters: tuple[ParameterSchema, ...] = ()

    def input_schema(self) -> dict[str, Any]:
        """Build the tool's JSON Schema input object."""
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {p.name: p.to_json_schema() for p in self.parameters},
        }
        required = [p.name for p in self.parameters if p.required]
        if required:
            schema["required"] = required
        return schema

    def __repr__(self) -> str:
        """Format as: name(params): description"""
        params = ", ".join(
            p.name if p.required else f"{p.name}?" for p in self.parameters
        )
        return f"{self.name}({params}): {self.description}"


@dataclass(frozen=True)
class CallResult:
    """Outcome of one tool call.

    A failed command is still a result (is_error=True carrying stderr), not a
    protocol fault.
    """

    text: str
    is_error: bool = False

    @classmethod
    def success(cls, stdout: str) -> CallResult:
        return cls(text=stdout)

    @classmethod
    def failure(cls, stderr: str) -> CallResult:
        return cls(text=stderr, is_error=True)
