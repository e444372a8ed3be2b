"""
Activate use case — select, resolve and materialize one profile.

The pipeline is strictly linear:

    Selector → Registry → Resolver → Materializer

Structural errors (invalid default, conflicting overlays, dangling
references) abort with ``error`` set and no activation; an unknown
override only adds a warning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from envhub.adapters.shell.command import ShellCommandAdapter
from envhub.core.config.loader import LoadedConfig, load_config
from envhub.core.config.override import OverrideSource, StaticOverride
from envhub.core.errors import EnvHubError
from envhub.core.models.environment import ActivationResult, ResolvedEnvironment
from envhub.core.models.selection import SelectionState
from envhub.core.services.materializer import Materializer
from envhub.core.services.resolver import Resolver
from envhub.core.services.selector import OverrideReader, Selector

logger = logging.getLogger(__name__)


@dataclass
class ActivateResult:
    """Outcome of one activation attempt."""

    selection: SelectionState = field(default_factory=SelectionState)
    resolved: ResolvedEnvironment | None = None
    activation: ActivationResult | None = None
    config_path: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.activation is not None

    @property
    def warnings(self) -> list[str]:
        return self.selection.warnings

    def to_dict(self) -> dict:
        result: dict = {
            "ok": self.ok,
            "config_path": str(self.config_path) if self.config_path else None,
            "selection": self.selection.to_dict(),
        }
        if self.error:
            result["error"] = self.error
            return result
        if self.resolved:
            result["resolved"] = self.resolved.to_dict()
        if self.activation:
            result["activation"] = self.activation.to_dict()
        return result


def override_source_for(loaded: LoadedConfig, profile: str | None = None) -> OverrideReader:
    """``--profile`` when given, otherwise the project's file/env override."""
    if profile:
        return StaticOverride(profile)
    settings = loaded.config.settings
    return OverrideSource(
        loaded.project_root,
        file_name=settings.override_file,
        env_var=settings.override_env,
    )


def activate_loaded(
    loaded: LoadedConfig,
    override: OverrideReader | str | None,
    materializer: Materializer | None = None,
    diagnostics: bool = True,
) -> ActivateResult:
    """Run the pipeline against an already-loaded configuration."""
    result = ActivateResult(config_path=loaded.path)
    settings = loaded.config.settings
    selector = Selector(loaded.registry)

    try:
        selector.select(override, settings.default, state=result.selection)
    except EnvHubError as e:
        result.error = str(e)
        result.selection.error = str(e)
        return result

    name = result.selection.profile
    assert name is not None

    try:
        resolved = Resolver(loaded.registry, settings.store_root).resolve(name)
    except EnvHubError as e:
        logger.error("Activation of '%s' failed: %s", name, e)
        result.selection.fail(str(e))
        result.error = str(e)
        return result

    if materializer is None:
        materializer = Materializer(runner=ShellCommandAdapter(timeout=settings.probe_timeout))
    activation = materializer.materialize(resolved, diagnostics=diagnostics)

    result.resolved = resolved
    result.activation = activation
    result.selection.activate()
    return result


def activate(
    config_path: Path | None = None,
    profile: str | None = None,
    materializer: Materializer | None = None,
    diagnostics: bool = True,
) -> ActivateResult:
    """Load configuration and activate the selected profile.

    Args:
        config_path: Optional explicit path to envhub.yml.
        profile: Explicit profile name; bypasses the override file/env.
        materializer: Materializer to use (tests inject fake probes).
        diagnostics: Whether to run version probes.

    Returns:
        ActivateResult — never raises for configuration or resolution errors.
    """
    try:
        loaded = load_config(config_path)
    except EnvHubError as e:
        return ActivateResult(config_path=config_path, error=str(e))

    return activate_loaded(
        loaded,
        override_source_for(loaded, profile),
        materializer=materializer,
        diagnostics=diagnostics,
    )
