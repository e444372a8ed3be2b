"""
Shell command adapter — run a short external command and capture output.

Used for best-effort version probes. The adapter NEVER raises:
missing executables, non-zero exits and timeouts all come back as a
failed receipt.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time
from collections.abc import Mapping, Sequence
from typing import Literal

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class CommandReceipt(BaseModel):
    """Outcome of one command execution."""

    command: list[str]
    status: Literal["ok", "failed"] = "ok"
    output: str = ""
    error: str | None = None
    return_code: int | None = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class ShellCommandAdapter:
    """Execute argv-style commands with a timeout.

    Args:
        timeout: Seconds before a command is killed.
    """

    name = "shell"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        self.timeout = timeout

    def is_available(self, executable: str, path: str | None = None) -> bool:
        """Whether *executable* can be found on *path* (default: process PATH)."""
        return shutil.which(executable, path=path) is not None

    def run(
        self,
        command: Sequence[str],
        env: Mapping[str, str] | None = None,
    ) -> CommandReceipt:
        argv = list(command)
        if not argv:
            return CommandReceipt(command=argv, status="failed", error="Empty command")

        search_path = env.get("PATH") if env else None
        if not self.is_available(argv[0], search_path):
            return CommandReceipt(
                command=argv, status="failed", error=f"{argv[0]}: not found",
            )

        logger.debug("Executing: %s (timeout=%ss)", " ".join(argv), self.timeout)
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                env=dict(env) if env is not None else None,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return CommandReceipt(
                command=argv,
                status="failed",
                error=f"Command timed out after {self.timeout}s",
            )
        except OSError as e:
            return CommandReceipt(
                command=argv, status="failed", error=f"Command execution error: {e}",
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        # Some tools (older Python, nvcc wrappers) print versions on stderr
        output = (result.stdout or result.stderr).strip()

        if result.returncode == 0:
            return CommandReceipt(
                command=argv,
                output=output,
                return_code=result.returncode,
                duration_ms=elapsed_ms,
            )
        return CommandReceipt(
            command=argv,
            status="failed",
            output=output,
            error=result.stderr.strip() or f"Command exited with code {result.returncode}",
            return_code=result.returncode,
            duration_ms=elapsed_ms,
        )
