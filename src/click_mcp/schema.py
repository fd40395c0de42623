"""Translation of command flags into tool parameter schemas."""

from __future__ import annotations

from collections.abc import Iterable

from click_mcp.errors import SchemaTranslationError
from click_mcp.types import Flag, FlagKind, ParameterSchema

# Flag added by the CLI framework itself, never a user parameter.
HELP_FLAG = "help"


def translate_flag(flag: Flag) -> ParameterSchema:
    """Translate a single flag into a parameter schema.

    Integer and float flags of every width collapse to "number", with the
    default converted to float. A boolean flag without a default defaults
    to false.

    Raises:
        SchemaTranslationError: If the flag's type is not supported, or its
            default does not fit the type.
    """
    kind = flag.kind

    if kind is FlagKind.STRING:
        # Only non-empty string defaults are advertised
        default = flag.default if flag.default else None
        return ParameterSchema(
            name=flag.name,
            type="string",
            description=flag.usage,
            required=flag.required,
            default=None if default is None else str(default),
        )

    if kind is FlagKind.BOOLEAN:
        default = False if flag.default is None else flag.default
        if not isinstance(default, bool):
            raise SchemaTranslationError(
                flag.name, flag.type, f"invalid boolean default {flag.default!r}"
            )
        return ParameterSchema(
            name=flag.name,
            type="boolean",
            description=flag.usage,
            required=flag.required,
            default=default,
        )

    if kind in (FlagKind.INTEGER, FlagKind.FLOAT):
        try:
            default = None if flag.default is None else float(flag.default)
        except (TypeError, ValueError):
            raise SchemaTranslationError(
                flag.name, flag.type, f"invalid numeric default {flag.default!r}"
            ) from None
        return ParameterSchema(
            name=flag.name,
            type="number",
            description=flag.usage,
            required=flag.required,
            default=default,
        )

    raise SchemaTranslationError(flag.name, flag.type)


def translate_flags(flags: Iterable[Flag]) -> list[ParameterSchema]:
    """Translate a command's flags into parameter schemas, in order.

    The "help" flag is skipped. An unsupported flag type aborts the whole
    translation rather than producing a partial schema list.

    Args:
        flags: Flag definitions of one command.

    Returns:
        One ParameterSchema per flag, excluding "help".

    Raises:
        SchemaTranslationError: If any flag's type is not supported.
    """
    return [translate_flag(flag) for flag in flags if flag.name != HELP_FLAG]
