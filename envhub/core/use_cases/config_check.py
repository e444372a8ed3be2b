"""
Config check use case — validate envhub.yml and dry-resolve every profile.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from envhub.core.config.loader import LoadedConfig, load_config
from envhub.core.errors import EnvHubError
from envhub.core.services.resolver import Resolver


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    loaded: LoadedConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    resolved: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "builtin": self.loaded.builtin if self.loaded else False,
            "errors": self.errors,
            "warnings": self.warnings,
            "default_profile": self.loaded.default_profile if self.loaded else None,
            "profile_count": len(self.loaded.registry) if self.loaded else 0,
            "resolved_profiles": self.resolved,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate configuration and report issues.

    Args:
        config_path: Optional explicit path to envhub.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult(config_path=config_path)

    try:
        loaded = load_config(config_path)
    except EnvHubError as e:
        result.errors.append(str(e))
        return result

    result.loaded = loaded
    result.config_path = loaded.path
    registry = loaded.registry

    # Overlays must point at catalog packages
    for name in registry.overlay_names():
        overlay = registry.overlay(name)
        if overlay.target not in registry.package_names():
            result.errors.append(
                f"Overlay '{name}' targets unknown package '{overlay.target}'"
            )

    # Every profile must resolve on its own; one resolver shares overlay work
    resolver = Resolver(registry, loaded.config.settings.store_root)
    for profile in registry.profiles():
        try:
            env = resolver.resolve(profile)
        except EnvHubError as e:
            result.errors.append(str(e))
            continue
        result.resolved.append(profile.name)

        unused = sorted(
            name for name in profile.overlays
            if registry.overlay(name).target not in env.package_names
        )
        if unused:
            result.warnings.append(
                f"Profile '{profile.name}': overlays with no target in the profile: "
                f"{', '.join(unused)}"
            )
        if not env.packages:
            result.warnings.append(f"Profile '{profile.name}' has no packages")

    result.valid = len(result.errors) == 0
    return result
