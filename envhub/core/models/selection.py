"""
Selection state — which profile one activation is working on.

A SelectionState is built fresh for every activation and handed
through the pipeline; nothing about the "current profile" lives in
module globals.

State machine::

    unselected ──select()──▶ resolving ──ok──▶ active
                                 │
                                 └──structural error──▶ failed
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class SelectionStatus(str, Enum):
    UNSELECTED = "unselected"
    RESOLVING = "resolving"
    ACTIVE = "active"
    FAILED = "failed"


# Where the chosen profile name came from
SOURCE_FILE = "file"
SOURCE_ENV = "env"
SOURCE_DEFAULT = "default"

_TRANSITIONS: dict[SelectionStatus, set[SelectionStatus]] = {
    SelectionStatus.UNSELECTED: {SelectionStatus.RESOLVING},
    SelectionStatus.RESOLVING: {SelectionStatus.ACTIVE, SelectionStatus.FAILED},
    SelectionStatus.ACTIVE: set(),
    SelectionStatus.FAILED: set(),
}


class SelectionState(BaseModel):
    """The outcome of profile selection for one activation."""

    profile: str | None = None
    requested: str | None = None     # raw override value, if any
    source: str = SOURCE_DEFAULT
    status: SelectionStatus = SelectionStatus.UNSELECTED
    warnings: list[str] = Field(default_factory=list)
    error: str | None = None

    def _move(self, target: SelectionStatus) -> None:
        if target not in _TRANSITIONS[self.status]:
            raise RuntimeError(
                f"Illegal selection transition: {self.status.value} → {target.value}"
            )
        self.status = target

    def begin(self, profile: str, source: str, requested: str | None = None) -> None:
        """Enter ``resolving`` with the chosen profile."""
        self._move(SelectionStatus.RESOLVING)
        self.profile = profile
        self.source = source
        self.requested = requested

    def activate(self) -> None:
        self._move(SelectionStatus.ACTIVE)

    def fail(self, error: str) -> None:
        self._move(SelectionStatus.FAILED)
        self.error = error

    @property
    def fell_back(self) -> bool:
        """Whether an override was given but the default had to be used."""
        return self.requested is not None and self.profile != self.requested

    def to_dict(self) -> dict:
        return {
            "profile": self.profile,
            "requested": self.requested,
            "source": self.source,
            "status": self.status.value,
            "warnings": list(self.warnings),
            "error": self.error,
        }
