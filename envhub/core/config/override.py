"""
Override source — the project-local choice of profile.

Read order (first hit wins):
    1. ``<project root>/.envhub-profile`` — local file, kept out of git
    2. ``$ENVHUB_PROFILE``                — process environment

Absence is the normal case and is reported as ``None``. The read is
a single synchronous attempt with no retry.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from envhub.core.errors import ConfigError
from envhub.core.models.config import DEFAULT_OVERRIDE_ENV, DEFAULT_OVERRIDE_FILE
from envhub.core.models.selection import SOURCE_ENV, SOURCE_FILE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Override:
    """A profile name requested by the user, and where it came from."""

    value: str
    source: str


class OverrideSource:
    """Reads (and writes) the profile override for one project."""

    def __init__(
        self,
        project_root: Path,
        file_name: str = DEFAULT_OVERRIDE_FILE,
        env_var: str = DEFAULT_OVERRIDE_ENV,
        environ: Mapping[str, str] | None = None,
    ):
        self.project_root = project_root
        self.file_name = file_name
        self.env_var = env_var
        self._environ = os.environ if environ is None else environ

    @property
    def path(self) -> Path:
        return self.project_root / self.file_name

    def read(self) -> Override | None:
        value = self._read_file()
        if value:
            return Override(value=value, source=SOURCE_FILE)

        value = self._environ.get(self.env_var, "").strip()
        if value:
            return Override(value=value, source=SOURCE_ENV)
        return None

    def _read_file(self) -> str | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cannot read override file %s: %s", self.path, e)
            return None

        for line in raw.splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                return line
        return None

    def write(self, name: str) -> Path:
        """Persist *name* as the local override."""
        try:
            self.path.write_text(f"{name}\n", encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot write {self.path}: {e}") from e
        logger.info("Wrote profile override '%s' to %s", name, self.path)
        return self.path

    def clear(self) -> bool:
        """Remove the local override file. Returns whether one existed."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise ConfigError(f"Cannot remove {self.path}: {e}") from e
        return True


class StaticOverride:
    """An override given directly, e.g. from ``--profile``."""

    def __init__(self, value: str | None, source: str = "cli"):
        self.value = value
        self.source = source

    def read(self) -> Override | None:
        if self.value and self.value.strip():
            return Override(value=self.value.strip(), source=self.source)
        return None
