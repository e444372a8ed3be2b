"""
Shell export — render an ActivationResult for ``eval`` in a shell.

Also renders the ``.envrc`` used by the directory auto-loader, so
entering the project directory evaluates ``envhub export``.
"""

from __future__ import annotations

import shlex

from envhub.core.models.environment import ActivationResult

SUPPORTED_SHELLS = ("bash", "zsh", "fish")

ENVRC_TEMPLATE = """\
# Generated by envhub. Pick a profile with `envhub use <name>`
# (stored in {override_file}, which is git-ignored).
watch_file envhub.yml {override_file}
eval "$(envhub export --shell bash)"
"""


def render_exports(result: ActivationResult, shell: str = "bash") -> str:
    """Statements that apply *result* to the current shell.

    PATH entries are prepended to the existing PATH, resolved packages
    first.
    """
    if shell not in SUPPORTED_SHELLS:
        raise ValueError(f"Unsupported shell '{shell}' (supported: {', '.join(SUPPORTED_SHELLS)})")

    lines: list[str] = []
    if shell == "fish":
        for key, value in sorted(result.variables.items()):
            lines.append(f"set -gx {key} {shlex.quote(value)}")
        if result.path:
            entries = " ".join(shlex.quote(p) for p in result.path)
            lines.append(f"set -gx PATH {entries} $PATH")
    else:
        for key, value in sorted(result.variables.items()):
            lines.append(f"export {key}={shlex.quote(value)}")
        if result.path:
            joined = shlex.quote(":".join(result.path))
            lines.append(f'export PATH={joined}"${{PATH:+:$PATH}}"')
    return "\n".join(lines) + "\n"


def render_envrc(override_file: str) -> str:
    return ENVRC_TEMPLATE.format(override_file=override_file)
