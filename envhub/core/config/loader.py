"""
Configuration loader — reads envhub.yml into a populated registry.

This is the primary entry point for loading configuration. It reads
YAML, validates against Pydantic schemas, and registers everything in
a ProfileRegistry. Without an envhub.yml the built-in catalog is used.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from envhub.core.data.catalog import BUILTIN_CATALOG
from envhub.core.errors import ConfigError, InvalidDefault
from envhub.core.models.config import EnvHubConfig
from envhub.core.services.registry import ProfileRegistry

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "envhub.yml"

# Sections whose YAML form is a mapping keyed by entry name
_NAMED_SECTIONS = ("packages", "overlays", "profiles")


@dataclass
class LoadedConfig:
    """A validated configuration plus the registry built from it."""

    config: EnvHubConfig
    registry: ProfileRegistry
    path: Path | None
    project_root: Path

    @property
    def builtin(self) -> bool:
        return self.path is None

    @property
    def default_profile(self) -> str:
        return self.config.settings.default


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for envhub.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to envhub.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        for name in (CONFIG_FILE, "envhub.yaml"):
            candidate = current / name
            if candidate.is_file():
                return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def parse_config(data: Any, source: str = "<config>") -> EnvHubConfig:
    """Validate raw (YAML-shaped) data into an EnvHubConfig.

    ``packages``, ``overlays`` and ``profiles`` may be mappings keyed by
    name (the usual YAML form) or lists of entries with a ``name`` key.

    Raises:
        ConfigError: If the data does not match the schema.
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {source}, got {type(data).__name__}")

    data = copy.deepcopy(data)
    for section in _NAMED_SECTIONS:
        entries = data.get(section)
        if entries is None:
            data.pop(section, None)
        elif isinstance(entries, dict):
            folded = []
            for name, body in entries.items():
                if body is not None and not isinstance(body, dict):
                    raise ConfigError(
                        f"Invalid configuration in {source}: {section}.{name} must be a mapping"
                    )
                folded.append({**(body or {}), "name": name})
            data[section] = folded

    if data.get("groups") is None:
        data.pop("groups", None)
    if data.get("settings") is None:
        data.pop("settings", None)

    try:
        return EnvHubConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {source}: {e}") from e


def build_registry(config: EnvHubConfig) -> ProfileRegistry:
    """Register every catalog entry and profile of *config*.

    Raises:
        ConfigError: For duplicate packages, groups or overlays.
        DuplicateProfile: For a profile defined twice.
        InvalidDefault: If ``settings.default`` is not a profile.
    """
    registry = ProfileRegistry()
    for spec in config.packages:
        registry.add_package(spec)
    for name, members in config.groups.items():
        registry.add_group(name, members)
    for overlay in config.overlays:
        registry.add_overlay(overlay)
    for profile in config.profiles:
        registry.add_profile(profile)

    default = config.settings.default
    if default not in registry:
        raise InvalidDefault(default, registry.names())
    return registry


def load_config(path: Path | None = None, start_dir: Path | None = None) -> LoadedConfig:
    """Load and validate configuration.

    Args:
        path: Explicit path to envhub.yml. If None, searches upward
            from *start_dir* and falls back to the built-in catalog.
        start_dir: Where the upward search begins (default: cwd).

    Raises:
        ConfigError: If an explicit file is missing or any file is invalid.
        InvalidDefault: If the default profile is not defined.
    """
    if path is None:
        path = find_config_file(start_dir)
        if path is None:
            logger.debug("No %s found, using the built-in catalog", CONFIG_FILE)
            config = parse_config(BUILTIN_CATALOG, source="built-in catalog")
            return LoadedConfig(
                config=config,
                registry=build_registry(config),
                path=None,
                project_root=(start_dir or Path.cwd()).resolve(),
            )

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    config = parse_config(data, source=str(path))
    registry = build_registry(config)

    logger.info("Loaded %d profiles from %s", len(registry), path)
    return LoadedConfig(
        config=config,
        registry=registry,
        path=path,
        project_root=path.parent.resolve(),
    )
