"""Declarative command and parameter schema models."""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

ParameterValue = str | int | float | bool | None


class ParameterType(str, Enum):
    """Value type accepted by a parameter."""

    string = "string"
    number = "number"
    boolean = "boolean"
    enum = "enum"
    path = "path"


class ParameterSchema(BaseModel):
    """One positional argument or flag of a command."""

    model_config = ConfigDict(frozen=True)

    name: str
    label: str | None = None
    type: ParameterType = ParameterType.string
    required: bool = False
    default_value: str | int | float | bool | None = None
    description: str | None = None
    pattern: re.Pattern[str] | None = None
    pattern_description: str | None = None
    enum_values: list[str] = Field(default_factory=list)
    min: float | None = None
    max: float | None = None
    mutually_exclusive_with: list[str] = Field(default_factory=list)
    depends_on: list[str] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.label or self.name

    @model_validator(mode="after")
    def _check_constraints(self) -> ParameterSchema:
        if self.type == ParameterType.enum and not self.enum_values:
            raise ValueError(f"Enum parameter '{self.name}' declares no enum_values")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(
                f"Parameter '{self.name}' has min ({self.min}) greater than max ({self.max})"
            )
        if self.name in self.mutually_exclusive_with or self.name in self.depends_on:
            raise ValueError(f"Parameter '{self.name}' references itself")
        return self


class CommandSchema(BaseModel):
    """A named command with its parameters and runtime requirements.

    Constraint references (``mutually_exclusive_with``, ``depends_on``) and
    alias targets are checked against the command's own parameters when the
    schema is built, so a typo fails at registration instead of never firing.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None
    usage: str | None = None
    positional_args: list[ParameterSchema] = Field(default_factory=list)
    flags: list[ParameterSchema] = Field(default_factory=list)
    aliases: dict[str, str] = Field(default_factory=dict)
    requires_network: bool = False
    requires_cli: bool = True
    required_env_vars: list[str] = Field(default_factory=list)
    required_config_files: list[str] = Field(default_factory=list)
    min_runtime_version: str | None = None

    @property
    def all_parameters(self) -> list[ParameterSchema]:
        """Positional arguments followed by flags, in declaration order."""
        return [*self.positional_args, *self.flags]

    @property
    def parameter_names(self) -> set[str]:
        return {p.name for p in self.all_parameters}

    @property
    def known_names(self) -> set[str]:
        """Every key a caller may supply: parameter names plus alias keys."""
        return self.parameter_names | set(self.aliases)

    def get_parameter(self, name: str) -> ParameterSchema | None:
        for param in self.all_parameters:
            if param.name == name:
                return param
        return None

    @model_validator(mode="after")
    def _check_references(self) -> CommandSchema:
        names = [p.name for p in self.all_parameters]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(
                f"Command '{self.name}' declares duplicate parameters: {', '.join(duplicates)}"
            )

        known = set(names)
        for param in self.all_parameters:
            for ref in (*param.mutually_exclusive_with, *param.depends_on):
                if ref not in known:
                    raise ValueError(
                        f"Parameter '{param.name}' of command '{self.name}' "
                        f"references unknown parameter '{ref}'"
                    )

        for alias, canonical in self.aliases.items():
            if alias in known:
                raise ValueError(
                    f"Alias '{alias}' of command '{self.name}' shadows a parameter name"
                )
            if canonical not in known:
                raise ValueError(
                    f"Alias '{alias}' of command '{self.name}' points to unknown "
                    f"parameter '{canonical}'"
                )
        return self
