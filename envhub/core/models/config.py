"""
Config models — the validated shape of envhub.yml.

The YAML keys ``packages``, ``overlays`` and ``profiles`` are
mappings keyed by name; the loader folds each key into the entry's
``name`` field before validation.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from envhub.core.models.profile import Overlay, PackageSpec, Profile

DEFAULT_OVERRIDE_FILE = ".envhub-profile"
DEFAULT_OVERRIDE_ENV = "ENVHUB_PROFILE"
DEFAULT_STORE_ROOT = "/nix/store"


class Settings(BaseModel):
    """Tool-wide settings."""

    default: str = "default"
    store_root: str = DEFAULT_STORE_ROOT
    override_file: str = DEFAULT_OVERRIDE_FILE
    override_env: str = DEFAULT_OVERRIDE_ENV
    probe_timeout: float = Field(default=5.0, gt=0)


class EnvHubConfig(BaseModel):
    """Root configuration: settings, catalog and profiles."""

    settings: Settings = Field(default_factory=Settings)
    packages: list[PackageSpec] = Field(default_factory=list)
    groups: dict[str, list[str]] = Field(default_factory=dict)
    overlays: list[Overlay] = Field(default_factory=list)
    profiles: list[Profile] = Field(default_factory=list)
