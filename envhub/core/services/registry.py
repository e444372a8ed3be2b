"""
Profile registry — named profiles plus the catalog they draw from.

The registry holds four in-memory tables: packages, package groups,
overlays and profiles. It is filled once at load time; resolution
only reads from it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from envhub.core.errors import (
    ConfigError,
    DuplicateProfile,
    UnknownOverlay,
    UnknownPackage,
    UnknownProfile,
)
from envhub.core.models.profile import Overlay, PackageSpec, Profile

logger = logging.getLogger(__name__)

GROUP_PREFIX = "@"


class ProfileRegistry:
    """Registry of profiles, packages, groups and overlays."""

    def __init__(self) -> None:
        self._profiles: dict[str, Profile] = {}
        self._packages: dict[str, PackageSpec] = {}
        self._groups: dict[str, tuple[str, ...]] = {}
        self._overlays: dict[str, Overlay] = {}

    # ── Profiles ────────────────────────────────────────────────

    def register(
        self,
        name: str,
        packages: Iterable[str] = (),
        overlays: Iterable[str] = (),
        flags: Iterable[str] = (),
        **fields: Any,
    ) -> Profile:
        """Register a new profile.

        Raises:
            DuplicateProfile: If a profile with this name already exists.
        """
        if name in self._profiles:
            raise DuplicateProfile(name)
        profile = Profile(
            name=name,
            packages=tuple(packages),
            overlays=tuple(overlays),
            flags=frozenset(flags),
            **fields,
        )
        self._profiles[name] = profile
        logger.debug("Registered profile: %s", name)
        return profile

    def add_profile(self, profile: Profile) -> Profile:
        """Register an already-built Profile model."""
        if profile.name in self._profiles:
            raise DuplicateProfile(profile.name)
        self._profiles[profile.name] = profile
        logger.debug("Registered profile: %s", profile.name)
        return profile

    def lookup(self, name: str) -> Profile:
        """Return the profile called *name*.

        Raises:
            UnknownProfile: If no such profile is registered.
        """
        profile = self._profiles.get(name)
        if profile is None:
            raise UnknownProfile(name, self.names())
        return profile

    def names(self) -> list[str]:
        """Profile names in registration order."""
        return list(self._profiles)

    def profiles(self) -> list[Profile]:
        return list(self._profiles.values())

    def __contains__(self, name: object) -> bool:
        return name in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)

    # ── Packages ────────────────────────────────────────────────

    def add_package(self, spec: PackageSpec) -> None:
        if spec.name in self._packages:
            raise ConfigError(f"Package '{spec.name}' is defined twice")
        self._packages[spec.name] = spec

    def package(self, name: str, profile: str | None = None) -> PackageSpec:
        spec = self._packages.get(name)
        if spec is None:
            raise UnknownPackage(name, profile)
        return spec

    def package_names(self) -> list[str]:
        return list(self._packages)

    # ── Groups ──────────────────────────────────────────────────

    def add_group(self, name: str, members: Iterable[str]) -> None:
        if name in self._groups:
            raise ConfigError(f"Package group '{name}' is defined twice")
        self._groups[name] = tuple(members)

    def groups(self) -> dict[str, tuple[str, ...]]:
        return dict(self._groups)

    def expand(self, refs: Iterable[str], profile: str | None = None) -> list[str]:
        """Expand ``@group`` references into package names.

        Nested groups are expanded depth-first. Duplicates are kept;
        deduplication belongs to the resolver.

        Raises:
            UnknownPackage: For a reference to a group that does not exist.
            ConfigError: For a group that (indirectly) contains itself.
        """
        out: list[str] = []
        self._expand_into(list(refs), out, (), profile)
        return out

    def _expand_into(
        self,
        refs: list[str],
        out: list[str],
        stack: tuple[str, ...],
        profile: str | None,
    ) -> None:
        for ref in refs:
            if not ref.startswith(GROUP_PREFIX):
                out.append(ref)
                continue
            group = ref[len(GROUP_PREFIX):]
            if group in stack:
                cycle = " → ".join(stack + (group,))
                raise ConfigError(f"Package group cycle: {cycle}")
            members = self._groups.get(group)
            if members is None:
                raise UnknownPackage(ref, profile)
            self._expand_into(list(members), out, stack + (group,), profile)

    # ── Overlays ────────────────────────────────────────────────

    def add_overlay(self, overlay: Overlay) -> None:
        if overlay.name in self._overlays:
            raise ConfigError(f"Overlay '{overlay.name}' is defined twice")
        self._overlays[overlay.name] = overlay

    def overlay(self, name: str, profile: str | None = None) -> Overlay:
        overlay = self._overlays.get(name)
        if overlay is None:
            raise UnknownOverlay(name, profile)
        return overlay

    def overlay_names(self) -> list[str]:
        return list(self._overlays)
