"""Usage strings and resolved command lines built from a schema."""

from __future__ import annotations

import shlex
from collections.abc import Mapping

from preflight.schema.models import CommandSchema, ParameterType, ParameterValue

DEFAULT_CLI = "stellar"


def generate_usage_string(schema: CommandSchema) -> str:
    """Return the schema's usage template, or derive one from its parameters."""
    if schema.usage:
        return schema.usage

    parts = [f"{DEFAULT_CLI} {schema.name}"]
    for arg in schema.positional_args:
        parts.append(f"<{arg.name}>" if arg.required else f"[{arg.name}]")

    for flag in schema.flags:
        value_part = "" if flag.type == ParameterType.boolean else f" <{flag.name.lstrip('-')}>"
        if flag.required:
            parts.append(f"{flag.name}{value_part}")
        else:
            parts.append(f"[{flag.name}{value_part}]")

    return f"Usage: {' '.join(parts)}"


def resolve_parameters(
    schema: CommandSchema,
    params: Mapping[str, ParameterValue],
) -> dict[str, ParameterValue]:
    """Copy aliased values onto their canonical names and drop the aliases.

    An alias never overrides a value supplied under the canonical name.
    """
    resolved = dict(params)
    for alias, canonical in schema.aliases.items():
        if alias not in resolved:
            continue
        value = resolved.pop(alias)
        if resolved.get(canonical) is None and value is not None:
            resolved[canonical] = value
    return resolved


def _is_truthy(value: ParameterValue) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes"}


def build_command_line(
    schema: CommandSchema,
    params: Mapping[str, ParameterValue],
    cli_path: str | None = None,
) -> str:
    """Render the command line the CLI wrapper would execute.

    Positional values come first in declaration order, then flags. Flags
    that were not supplied fall back to their default value; boolean flags
    are emitted bare when true and omitted otherwise.
    """
    resolved = resolve_parameters(schema, params)
    argv = [cli_path or DEFAULT_CLI, *schema.name.split()]

    for arg in schema.positional_args:
        value = resolved.get(arg.name, arg.default_value)
        if value is not None and value != "":
            argv.append(str(value))

    for flag in schema.flags:
        value = resolved.get(flag.name)
        if value is None:
            value = flag.default_value
        if value is None or value == "":
            continue
        if flag.type == ParameterType.boolean:
            if _is_truthy(value):
                argv.append(flag.name)
            continue
        argv.extend([flag.name, str(value)])

    return shlex.join(argv)


def apply_connection_defaults(
    schema: CommandSchema,
    params: Mapping[str, ParameterValue],
    network: str = "",
    source: str = "",
) -> dict[str, ParameterValue]:
    """Fill ``--network`` and ``--source`` when the caller supplied neither
    the flag nor one of its aliases. Empty values fill nothing."""
    merged = dict(params)
    for name, value in (("--network", network), ("--source", source)):
        if not value or schema.get_parameter(name) is None:
            continue
        keys = {name, *(a for a, c in schema.aliases.items() if c == name)}
        if not keys & merged.keys():
            merged[name] = value
    return merged
