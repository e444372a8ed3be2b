"""
Profile models — the declarative inputs of the registry.

Packages, overlays and profiles are loaded once (from the built-in
catalog or envhub.yml) and never mutated afterwards, so every model
here is frozen.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Capability flags a profile may declare
FLAG_REQUIRES_GPU = "requires_gpu"
FLAG_ALLOW_UNFREE = "allow_unfree"
FLAG_OPTIMIZED_INTERPRETER = "optimized_interpreter"

KNOWN_FLAGS = frozenset({FLAG_REQUIRES_GPU, FLAG_ALLOW_UNFREE, FLAG_OPTIMIZED_INTERPRETER})


class PackageSpec(BaseModel):
    """A base package in the catalog, before any overlay is applied."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str = ""
    description: str = ""
    bin: str = "bin"                                      # PATH subdirectory of the prefix
    env: dict[str, str] = Field(default_factory=dict)    # ${prefix} expands to the store path
    unfree: bool = False
    options: dict[str, Any] = Field(default_factory=dict)


class Overlay(BaseModel):
    """A named transformation of one base package.

    ``options`` are merged into the target's build options.
    ``flag_options`` add more options only when the resolving profile
    carries the given capability flag, e.g. CUDA support for GPU
    profiles.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    target: str
    description: str = ""
    options: dict[str, Any] = Field(default_factory=dict)
    flag_options: dict[str, dict[str, Any]] = Field(default_factory=dict)

    @field_validator("flag_options")
    @classmethod
    def _known_flag_keys(cls, value: dict[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
        unknown = sorted(set(value) - KNOWN_FLAGS)
        if unknown:
            raise ValueError(f"unknown capability flags: {', '.join(unknown)}")
        return value

    def effective_options(self, flags: frozenset[str]) -> dict[str, Any]:
        """Options this overlay sets for a profile with the given flags."""
        merged = dict(self.options)
        for flag in sorted(self.flag_options):
            if flag in flags:
                merged.update(self.flag_options[flag])
        return merged


class DiagnosticSpec(BaseModel):
    """One line of startup diagnostics, e.g. the interpreter version.

    Either ``tool`` names an entry of the built-in probe table, or
    ``command`` (and optionally ``pattern``) spell out the probe.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    tool: str = ""
    command: tuple[str, ...] = ()
    pattern: str = ""

    @model_validator(mode="after")
    def _tool_or_command(self) -> DiagnosticSpec:
        if not self.tool and not self.command:
            raise ValueError(f"diagnostic '{self.label}' needs a 'tool' or a 'command'")
        return self


class Profile(BaseModel):
    """A named development environment: packages, overlays and flags."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    shell_name: str = ""
    packages: tuple[str, ...] = ()
    interpreter: str | None = None
    python_packages: tuple[str, ...] = ()
    overlays: tuple[str, ...] = ()
    flags: frozenset[str] = frozenset()
    env: dict[str, str] = Field(default_factory=dict)
    diagnostics: tuple[DiagnosticSpec, ...] = ()

    @field_validator("flags")
    @classmethod
    def _known_flags(cls, value: frozenset[str]) -> frozenset[str]:
        unknown = sorted(set(value) - KNOWN_FLAGS)
        if unknown:
            raise ValueError(f"unknown capability flags: {', '.join(unknown)}")
        # GPU stacks ship proprietary drivers and libraries
        if FLAG_REQUIRES_GPU in value:
            value = value | {FLAG_ALLOW_UNFREE}
        return frozenset(value)

    @model_validator(mode="before")
    @classmethod
    def _default_shell_name(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("shell_name") and data.get("name"):
            data = {**data, "shell_name": f"{data['name']}-dev"}
        return data

    @property
    def requires_gpu(self) -> bool:
        return FLAG_REQUIRES_GPU in self.flags

    @property
    def allow_unfree(self) -> bool:
        return FLAG_ALLOW_UNFREE in self.flags
