"""
Profile selector — decides which profile one activation uses.

    default not registered     → InvalidDefault (fatal, checked first)
    no override                → default
    override registered        → override
    override not registered    → UnknownProfileWarning, default
"""

from __future__ import annotations

import logging
import warnings
from typing import Protocol

from envhub.core.config.override import Override, StaticOverride
from envhub.core.errors import InvalidDefault, UnknownProfileWarning
from envhub.core.models.selection import SOURCE_DEFAULT, SelectionState
from envhub.core.services.registry import ProfileRegistry

logger = logging.getLogger(__name__)


class OverrideReader(Protocol):
    def read(self) -> Override | None: ...


class Selector:
    """Pick a profile name from an override and a default."""

    def __init__(self, registry: ProfileRegistry):
        self._registry = registry

    def validate_default(self, default_name: str) -> None:
        if default_name not in self._registry:
            raise InvalidDefault(default_name, self._registry.names())

    def select(
        self,
        override_source: OverrideReader | str | None,
        default_name: str,
        state: SelectionState | None = None,
    ) -> SelectionState:
        """Choose the profile and move *state* to ``resolving``.

        Raises:
            InvalidDefault: If *default_name* is not registered. Nothing
                is read or resolved in that case.
        """
        self.validate_default(default_name)
        state = state or SelectionState()

        if isinstance(override_source, str) or override_source is None:
            override_source = StaticOverride(override_source)
        override = override_source.read()

        if override is None:
            state.begin(default_name, SOURCE_DEFAULT)
            return state

        if override.value in self._registry:
            logger.debug("Profile '%s' selected from %s", override.value, override.source)
            state.begin(override.value, override.source, requested=override.value)
            return state

        message = (
            f"Unknown profile '{override.value}' (from {override.source}); "
            f"falling back to default '{default_name}'"
        )
        warnings.warn(message, UnknownProfileWarning, stacklevel=2)
        logger.debug(message)
        state.warnings.append(message)
        state.begin(default_name, SOURCE_DEFAULT, requested=override.value)
        return state

    def select_name(self, override_source: OverrideReader | str | None, default_name: str) -> str:
        """Shorthand for ``select(...).profile``."""
        state = self.select(override_source, default_name)
        assert state.profile is not None
        return state.profile
