"""
Resolution and activation models — what the pipeline produces.

A ResolvedEnvironment is the resolver's output for one profile.
An ActivationResult is the materializer's descriptor of the shell
environment; applying it to a process is the caller's job.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from envhub.core.models.profile import DiagnosticSpec


class ResolvedPackage(BaseModel):
    """A catalog package with every applicable overlay applied."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: str = ""
    options: dict[str, Any] = Field(default_factory=dict)
    overlays: tuple[str, ...] = ()
    python_packages: tuple[str, ...] = ()
    bin: str = "bin"
    env: dict[str, str] = Field(default_factory=dict)
    unfree: bool = False

    def fingerprint(self) -> str:
        """Stable identity of the build inputs (name, version, options, python packages)."""
        payload = json.dumps(
            {
                "name": self.name,
                "version": self.version,
                "options": self.options,
                "python_packages": list(self.python_packages),
            },
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:32]

    @property
    def label(self) -> str:
        return f"{self.name}-{self.version}" if self.version else self.name

    def prefix(self, store_root: str) -> str:
        """Store path of this build, e.g. ``/nix/store/<hash>-python313-3.13``."""
        return f"{store_root.rstrip('/')}/{self.fingerprint()}-{self.label}"

    def bin_dir(self, store_root: str) -> str | None:
        """PATH entry of this build, or None for library-only packages."""
        if not self.bin:
            return None
        return f"{self.prefix(store_root)}/{self.bin}"


class ResolvedEnvironment(BaseModel):
    """The concrete package set of one profile, overlays applied."""

    model_config = ConfigDict(frozen=True)

    profile: str
    shell_name: str
    store_root: str
    flags: frozenset[str] = frozenset()
    packages: tuple[ResolvedPackage, ...] = ()
    variables: dict[str, str] = Field(default_factory=dict)
    diagnostics: tuple[DiagnosticSpec, ...] = ()

    @property
    def package_names(self) -> list[str]:
        return [p.name for p in self.packages]

    def get_package(self, name: str) -> ResolvedPackage | None:
        """Look up a resolved package by name."""
        for pkg in self.packages:
            if pkg.name == name:
                return pkg
        return None

    def to_dict(self) -> dict:
        return {
            "profile": self.profile,
            "shell_name": self.shell_name,
            "flags": sorted(self.flags),
            "packages": [
                {
                    "name": p.name,
                    "version": p.version,
                    "prefix": p.prefix(self.store_root),
                    "overlays": list(p.overlays),
                    "options": p.options,
                    "python_packages": list(p.python_packages),
                }
                for p in self.packages
            ],
            "variables": dict(self.variables),
        }


class ActivationResult(BaseModel):
    """Everything a shell needs to enter a profile.

    ``path`` lists directories to prepend to PATH, resolved packages
    first and in resolver order.
    """

    model_config = ConfigDict(frozen=True)

    profile: str
    shell_name: str = ""
    path: tuple[str, ...] = ()
    variables: dict[str, str] = Field(default_factory=dict)
    diagnostics: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "profile": self.profile,
            "shell_name": self.shell_name,
            "path": list(self.path),
            "variables": dict(self.variables),
            "diagnostics": list(self.diagnostics),
        }
