"""Predefined command schemas for Stellar CLI operations."""

from __future__ import annotations

import re

from preflight.schema.models import CommandSchema, ParameterSchema, ParameterType

NETWORK_FLAG = ParameterSchema(
    name="--network",
    label="Network",
    type=ParameterType.enum,
    required=True,
    enum_values=["testnet", "mainnet", "futurenet", "localnet"],
    description="Stellar network to use",
    default_value="testnet",
)

SOURCE_FLAG = ParameterSchema(
    name="--source",
    label="Source Identity",
    type=ParameterType.string,
    required=True,
    description='Source identity for transactions (e.g., "dev")',
    default_value="dev",
)

CONTRACT_ID_ARG = ParameterSchema(
    name="contractId",
    label="Contract ID",
    type=ParameterType.string,
    required=True,
    pattern=re.compile(r"^C[A-Z0-9]{55}$"),
    pattern_description="A 56-character string starting with C (e.g., CABCDEF...)",
    description="The deployed contract identifier",
)

FUNCTION_NAME_ARG = ParameterSchema(
    name="functionName",
    label="Function Name",
    type=ParameterType.string,
    required=True,
    pattern=re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$"),
    pattern_description="A valid function identifier (letters, digits, underscores)",
    description="Contract function to invoke",
)

DRY_RUN_FLAG = ParameterSchema(
    name="--dry-run",
    label="Dry Run",
    type=ParameterType.boolean,
    description="Perform all validation without executing the command",
    default_value=False,
)

NETWORK_ALIASES = {"-n": "--network", "-s": "--source"}

COMMAND_SCHEMAS: dict[str, CommandSchema] = {
    "deploy": CommandSchema(
        name="contract deploy",
        description="Deploy a smart contract to the Stellar network",
        usage="stellar contract deploy --wasm <FILE> --source <IDENTITY> --network <NETWORK>",
        flags=[
            ParameterSchema(
                name="--wasm",
                label="WASM File",
                type=ParameterType.path,
                description="Path to the compiled WASM contract file",
            ),
            NETWORK_FLAG,
            SOURCE_FLAG,
            DRY_RUN_FLAG,
        ],
        aliases=NETWORK_ALIASES,
        requires_network=True,
    ),
    "build": CommandSchema(
        name="contract build",
        description="Build a Soroban smart contract",
        usage="stellar contract build",
        flags=[DRY_RUN_FLAG],
    ),
    "simulate": CommandSchema(
        name="contract invoke",
        description="Simulate a contract function invocation",
        usage=(
            "stellar contract invoke --id <CONTRACT_ID> --source <IDENTITY> "
            "--network <NETWORK> -- <FUNCTION> [ARGS]"
        ),
        positional_args=[CONTRACT_ID_ARG, FUNCTION_NAME_ARG],
        flags=[NETWORK_FLAG, SOURCE_FLAG, DRY_RUN_FLAG],
        aliases=NETWORK_ALIASES,
        requires_network=True,
    ),
    "configure": CommandSchema(
        name="configure",
        description="Configure the Stellar CLI settings",
        usage="stellar configure",
        requires_cli=False,
    ),
}


def get_command_schema(command_name: str) -> CommandSchema | None:
    """Look up a predefined schema by registry key or by command name."""
    schema = COMMAND_SCHEMAS.get(command_name)
    if schema is not None:
        return schema
    for candidate in COMMAND_SCHEMAS.values():
        if candidate.name == command_name:
            return candidate
    return None


def available_commands() -> list[str]:
    return list(COMMAND_SCHEMAS)
