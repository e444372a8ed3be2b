"""
Mock command adapter — test double for version probes.

Returns canned output per executable name without spawning anything.
Executables with no configured response behave as "not installed".
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from envhub.adapters.shell.command import CommandReceipt, ShellCommandAdapter


class MockCommandAdapter(ShellCommandAdapter):
    """Command adapter that answers from a table.

    Args:
        outputs: Executable name → stdout to return.
        failures: Executable name → error to return (non-zero exit).
    """

    name = "mock"

    def __init__(
        self,
        outputs: Mapping[str, str] | None = None,
        failures: Mapping[str, str] | None = None,
    ):
        super().__init__(timeout=0)
        self._outputs = dict(outputs or {})
        self._failures = dict(failures or {})
        self._call_log: list[tuple[list[str], dict[str, str] | None]] = []

    @property
    def call_log(self) -> list[tuple[list[str], dict[str, str] | None]]:
        """Every (command, env) pair this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_output(self, executable: str, output: str) -> None:
        self._outputs[executable] = output
        self._failures.pop(executable, None)

    def set_failure(self, executable: str, error: str = "Mock failure") -> None:
        self._failures[executable] = error

    def is_available(self, executable: str, path: str | None = None) -> bool:
        return executable in self._outputs or executable in self._failures

    def run(
        self,
        command: Sequence[str],
        env: Mapping[str, str] | None = None,
    ) -> CommandReceipt:
        argv = list(command)
        self._call_log.append((argv, dict(env) if env is not None else None))
        executable = argv[0] if argv else ""

        if executable in self._failures:
            return CommandReceipt(
                command=argv, status="failed", error=self._failures[executable], return_code=1,
            )
        if executable in self._outputs:
            return CommandReceipt(command=argv, output=self._outputs[executable], return_code=0)
        return CommandReceipt(command=argv, status="failed", error=f"{executable}: not found")

    def reset(self) -> None:
        """Clear the call log."""
        self._call_log.clear()
