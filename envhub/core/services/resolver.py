"""
Package set resolver — expands a profile into a concrete package list.

Resolution of one profile:
    1. Expand ``@group`` references, dedupe keeping first-seen order
       (order decides PATH precedence downstream)
    2. Check the profile's overlays for conflicts, before building anything
    3. Check licenses (unfree packages need the ``allow_unfree`` flag)
    4. Build every package and apply its overlays in declaration order
    5. Derive shell variables

Overlay application is memoized inside one Resolver instance on
(input package and the overlays already on it, overlay, capability
flags). Profiles with the same flags share applications; a GPU
resolution never feeds a non-GPU one.
"""

from __future__ import annotations

import logging
from string import Template

from envhub.core.errors import OverlayConflict, UnfreeNotAllowed
from envhub.core.models.config import DEFAULT_STORE_ROOT
from envhub.core.models.environment import ResolvedEnvironment, ResolvedPackage
from envhub.core.models.profile import Overlay, Profile
from envhub.core.services.registry import ProfileRegistry

logger = logging.getLogger(__name__)

_MemoKey = tuple[str, tuple[str, ...], str, frozenset[str]]


def dedupe(items: list[str] | tuple[str, ...]) -> list[str]:
    """Drop repeated entries, keeping each at its first position."""
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


class Resolver:
    """Resolve profiles of one registry into ResolvedEnvironments."""

    def __init__(self, registry: ProfileRegistry, store_root: str = DEFAULT_STORE_ROOT):
        self._registry = registry
        self._store_root = store_root
        self._memo: dict[_MemoKey, ResolvedPackage] = {}
        self.stats: dict[str, int] = {"applied": 0, "memo_hits": 0}

    @property
    def store_root(self) -> str:
        return self._store_root

    def resolve(self, profile: Profile | str) -> ResolvedEnvironment:
        """Resolve a profile (or profile name).

        Raises:
            UnknownProfile: For a name that is not registered.
            UnknownPackage / UnknownOverlay: For dangling references.
            OverlayConflict: When two overlays disagree on an option.
            UnfreeNotAllowed: For unfree packages without ``allow_unfree``.
        """
        if isinstance(profile, str):
            profile = self._registry.lookup(profile)

        names = self.package_list(profile)
        by_target = self.overlays_by_target(profile)
        self._check_licenses(profile, names)

        packages: list[ResolvedPackage] = []
        for name in names:
            pkg = self._base_package(profile, name)
            for overlay in by_target.get(name, []):
                pkg = self.apply_overlay(pkg, overlay, profile.flags)
            packages.append(pkg)

        unused = sorted(set(by_target) - set(names))
        if unused:
            logger.debug(
                "Profile '%s': overlays target packages it does not include: %s",
                profile.name, unused,
            )

        env = ResolvedEnvironment(
            profile=profile.name,
            shell_name=profile.shell_name,
            store_root=self._store_root,
            flags=profile.flags,
            packages=tuple(packages),
            variables=self._variables(profile, packages),
            diagnostics=profile.diagnostics,
        )
        logger.info(
            "Resolved profile '%s': %d packages, %d overlay applications (%d memoized)",
            profile.name, len(packages), self.stats["applied"], self.stats["memo_hits"],
        )
        return env

    # ── Package list ────────────────────────────────────────────

    def package_list(self, profile: Profile) -> list[str]:
        """Expanded, deduplicated package names of *profile*."""
        names = dedupe(self._registry.expand(profile.packages, profile.name))
        if profile.interpreter and profile.interpreter not in names:
            names.insert(0, profile.interpreter)
        return names

    def _base_package(self, profile: Profile, name: str) -> ResolvedPackage:
        spec = self._registry.package(name, profile.name)
        python_packages: tuple[str, ...] = ()
        if name == profile.interpreter:
            python_packages = tuple(dedupe(profile.python_packages))
        return ResolvedPackage(
            name=spec.name,
            version=spec.version,
            options=dict(spec.options),
            python_packages=python_packages,
            bin=spec.bin,
            env=dict(spec.env),
            unfree=spec.unfree,
        )

    def _check_licenses(self, profile: Profile, names: list[str]) -> None:
        if profile.allow_unfree:
            return
        for name in names:
            if self._registry.package(name, profile.name).unfree:
                raise UnfreeNotAllowed(profile.name, name)

    # ── Overlays ────────────────────────────────────────────────

    def overlays_by_target(self, profile: Profile) -> dict[str, list[Overlay]]:
        """Group the profile's overlays by target package.

        Raises:
            OverlayConflict: If two overlays on one target set a shared
                option to different values.
        """
        by_target: dict[str, list[Overlay]] = {}
        for name in dedupe(profile.overlays):
            overlay = self._registry.overlay(name, profile.name)
            by_target.setdefault(overlay.target, []).append(overlay)

        for target, overlays in by_target.items():
            for i, first in enumerate(overlays):
                first_opts = first.effective_options(profile.flags)
                for second in overlays[i + 1:]:
                    second_opts = second.effective_options(profile.flags)
                    for key in first_opts.keys() & second_opts.keys():
                        if first_opts[key] != second_opts[key]:
                            raise OverlayConflict(
                                profile.name, target, first.name, second.name, key
                            )
        return by_target

    def apply_overlay(
        self,
        pkg: ResolvedPackage,
        overlay: Overlay,
        flags: frozenset[str] = frozenset(),
    ) -> ResolvedPackage:
        """Apply *overlay* to *pkg*; applying it again is a no-op."""
        key = (pkg.fingerprint(), pkg.overlays, overlay.name, frozenset(flags))
        cached = self._memo.get(key)
        if cached is not None:
            self.stats["memo_hits"] += 1
            return cached

        if overlay.name in pkg.overlays:
            result = pkg
        else:
            options = {**pkg.options, **overlay.effective_options(frozenset(flags))}
            result = pkg.model_copy(
                update={"options": options, "overlays": pkg.overlays + (overlay.name,)}
            )
            logger.debug("Applied overlay %s → %s", overlay.name, pkg.name)

        self.stats["applied"] += 1
        self._memo[key] = result
        return result

    # ── Variables ───────────────────────────────────────────────

    def _variables(self, profile: Profile, packages: list[ResolvedPackage]) -> dict[str, str]:
        """Package variables (first package wins), then profile variables, then envhub's own."""
        variables: dict[str, str] = {}
        for pkg in packages:
            prefix = pkg.prefix(self._store_root)
            for key, template in pkg.env.items():
                variables.setdefault(key, Template(template).safe_substitute(prefix=prefix))

        for key, template in profile.env.items():
            variables[key] = Template(template).safe_substitute(store_root=self._store_root)

        variables["ENVHUB_PROFILE"] = profile.name
        variables["ENVHUB_SHELL"] = profile.shell_name
        variables["ENVHUB_FLAGS"] = ",".join(sorted(profile.flags))
        return variables
