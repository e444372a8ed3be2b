"""
Error taxonomy — every structural failure the pipeline can raise.

Structural errors (duplicate definitions, conflicting overlays, a bad
default) abort activation. The only recoverable condition, an override
naming an unknown profile, is a warning and never an exception.
"""

from __future__ import annotations


class EnvHubError(Exception):
    """Base class for all envhub errors."""


class ConfigError(EnvHubError):
    """Raised when configuration is invalid or missing."""


class DuplicateProfile(EnvHubError):
    """A profile name was registered twice."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Profile '{name}' is already registered")


class UnknownProfile(EnvHubError):
    """A profile name is not present in the registry."""

    def __init__(self, name: str, known: list[str] | None = None):
        self.name = name
        self.known = list(known or [])
        hint = f" (known: {', '.join(self.known)})" if self.known else ""
        super().__init__(f"Unknown profile '{name}'{hint}")


class UnknownPackage(EnvHubError):
    """A package or package group reference has no catalog entry."""

    def __init__(self, name: str, profile: str | None = None):
        self.name = name
        self.profile = profile
        where = f" referenced by profile '{profile}'" if profile else ""
        super().__init__(f"Unknown package '{name}'{where}")


class UnknownOverlay(EnvHubError):
    """An overlay reference has no catalog entry."""

    def __init__(self, name: str, profile: str | None = None):
        self.name = name
        self.profile = profile
        where = f" referenced by profile '{profile}'" if profile else ""
        super().__init__(f"Unknown overlay '{name}'{where}")


class OverlayConflict(EnvHubError):
    """Two overlays of one profile set the same option of a package differently."""

    def __init__(
        self,
        profile: str,
        target: str,
        first: str,
        second: str,
        option: str,
    ):
        self.profile = profile
        self.target = target
        self.first = first
        self.second = second
        self.option = option
        super().__init__(
            f"Profile '{profile}': overlays '{first}' and '{second}' both set "
            f"option '{option}' of package '{target}' to different values"
        )


class UnfreeNotAllowed(EnvHubError):
    """An unfree package was requested by a profile without allow_unfree."""

    def __init__(self, profile: str, package: str):
        self.profile = profile
        self.package = package
        super().__init__(
            f"Profile '{profile}' includes unfree package '{package}' "
            "but does not declare the 'allow_unfree' flag"
        )


class InvalidDefault(EnvHubError):
    """The configured default profile is not registered."""

    def __init__(self, name: str, known: list[str] | None = None):
        self.name = name
        self.known = list(known or [])
        hint = f" (known: {', '.join(self.known)})" if self.known else ""
        super().__init__(f"Default profile '{name}' is not registered{hint}")


class UnknownProfileWarning(UserWarning):
    """An override named a profile that does not exist; the default was used."""
