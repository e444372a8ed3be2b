"""
Version probes — how to ask a tool for its version.

Each entry is ``(command, pattern)``. The first regex group of
``pattern`` is the version; an empty pattern means "first line of
output".
"""

from __future__ import annotations

VERSION_PROBES: dict[str, tuple[list[str], str]] = {
    "python":  (["python", "--version"],       r"Python\s+(\d+\.\d+\.\d+\S*)"),
    "pip":     (["pip", "--version"],          r"pip\s+(\d+\.\d+(?:\.\d+)?)"),
    "clang":   (["clang", "--version"],        ""),
    "gcc":     (["gcc", "--version"],          ""),
    "cmake":   (["cmake", "--version"],        r"cmake version\s+(\d+\.\d+\.\d+)"),
    "lldb":    (["lldb", "--version"],         r"lldb version\s+(\d+\.\d+\.\d+)"),
    "nvcc":    (["nvcc", "--version"],         r"(release\s+\d+\.\d+\S*(?:\s+V\d+\.\d+\.\d+)?)"),
    "ruff":    (["ruff", "--version"],         r"ruff\s+(\d+\.\d+\.\d+)"),
    "black":   (["black", "--version"],        r"black.*?(\d+\.\d+\.\d+)"),
    "pyright": (["pyright", "--version"],      r"pyright\s+(\d+\.\d+\.\d+)"),
    "node":    (["node", "--version"],         r"v(\d+\.\d+\.\d+)"),
    "go":      (["go", "version"],             r"go(\d+\.\d+\.\d+)"),
    "rustc":   (["rustc", "--version"],        r"rustc\s+(\d+\.\d+\.\d+)"),
}

PLACEHOLDER = "Not found"
