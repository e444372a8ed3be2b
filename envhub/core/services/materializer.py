"""
Environment materializer — turns a resolution into an activation descriptor.

The materializer never touches the running process: it returns the
PATH entries, variables and diagnostic lines, and the caller decides
how to apply them (print exports, spawn a shell, ...).

Diagnostics are best-effort. Each probe runs with a short timeout and
with the new PATH in front; a missing or broken tool produces the
placeholder line, never an error.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping

from envhub.adapters.shell.command import ShellCommandAdapter
from envhub.core.data.probes import PLACEHOLDER, VERSION_PROBES
from envhub.core.models.environment import ActivationResult, ResolvedEnvironment
from envhub.core.models.profile import DiagnosticSpec

logger = logging.getLogger(__name__)


class Materializer:
    """Build ActivationResults from ResolvedEnvironments.

    Args:
        runner: Command adapter used for version probes.
        base_env: Environment the probes inherit (default: a snapshot
            of ``os.environ`` taken at construction).
        probe_timeout: Per-probe timeout when no runner is given.
    """

    def __init__(
        self,
        runner: ShellCommandAdapter | None = None,
        base_env: Mapping[str, str] | None = None,
        probe_timeout: float = 5.0,
    ):
        self._runner = runner or ShellCommandAdapter(timeout=probe_timeout)
        self._base_env = dict(os.environ if base_env is None else base_env)

    def materialize(
        self,
        env: ResolvedEnvironment,
        diagnostics: bool = True,
    ) -> ActivationResult:
        path: list[str] = []
        for pkg in env.packages:
            entry = pkg.bin_dir(env.store_root)
            if entry and entry not in path:
                path.append(entry)

        variables = dict(env.variables)

        lines: list[str] = []
        if diagnostics:
            probe_env = self._probe_env(path, variables)
            lines = [self.diagnostic_line(spec, probe_env) for spec in env.diagnostics]

        logger.info(
            "Materialized profile '%s': %d PATH entries, %d variables",
            env.profile, len(path), len(variables),
        )
        return ActivationResult(
            profile=env.profile,
            shell_name=env.shell_name,
            path=tuple(path),
            variables=variables,
            diagnostics=tuple(lines),
        )

    def _probe_env(self, path: list[str], variables: dict[str, str]) -> dict[str, str]:
        probe_env = dict(self._base_env)
        probe_env.update(variables)
        inherited = self._base_env.get("PATH", "")
        probe_env["PATH"] = os.pathsep.join(path + ([inherited] if inherited else []))
        return probe_env

    def diagnostic_line(self, spec: DiagnosticSpec, env: Mapping[str, str]) -> str:
        """Render ``"<label>: <version>"``, with a placeholder on any failure."""
        return f"{spec.label}: {self.probe(spec, env) or PLACEHOLDER}"

    def probe(self, spec: DiagnosticSpec, env: Mapping[str, str]) -> str | None:
        """Ask a tool for its version. Returns None if that is not possible."""
        command: list[str] = list(spec.command)
        pattern = spec.pattern
        if not command:
            entry = VERSION_PROBES.get(spec.tool)
            if entry is None:
                logger.warning("No version probe known for tool '%s'", spec.tool)
                return None
            command, pattern = list(entry[0]), pattern or entry[1]

        receipt = self._runner.run(command, env=env)
        if not receipt.ok:
            logger.debug("Probe %s failed: %s", command[0], receipt.error)
            return None
        return extract_version(receipt.output, pattern)


def extract_version(output: str, pattern: str = "") -> str | None:
    """Pull a version out of command output.

    Without a pattern the first non-empty line is used. With one, the
    first group (or the whole match) of the first hit is returned.
    """
    if not pattern:
        for line in output.splitlines():
            if line.strip():
                return line.strip()
        return None

    try:
        match = re.search(pattern, output)
    except re.error as e:
        logger.warning("Invalid version pattern %r: %s", pattern, e)
        return None
    if not match:
        return None
    return (match.group(1) if match.groups() else match.group(0)).strip()
