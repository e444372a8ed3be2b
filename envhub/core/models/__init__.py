"""
Domain models — Pydantic types for envhub.

All models are re-exported here for convenient access:

    from envhub.core.models import Profile, Overlay, ResolvedEnvironment
"""

from envhub.core.models.config import EnvHubConfig, Settings
from envhub.core.models.environment import (
    ActivationResult,
    ResolvedEnvironment,
    ResolvedPackage,
)
from envhub.core.models.profile import (
    KNOWN_FLAGS,
    DiagnosticSpec,
    Overlay,
    PackageSpec,
    Profile,
)
from envhub.core.models.selection import SelectionState, SelectionStatus

__all__ = [
    # environment.py
    "ActivationResult",
    # profile.py
    "DiagnosticSpec",
    # config.py
    "EnvHubConfig",
    "KNOWN_FLAGS",
    "Overlay",
    "PackageSpec",
    "Profile",
    "ResolvedEnvironment",
    "ResolvedPackage",
    # selection.py
    "SelectionState",
    "SelectionStatus",
    "Settings",
]
