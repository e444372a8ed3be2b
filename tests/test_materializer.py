"""
Tests for the environment materializer — PATH order, variables, diagnostics.
"""

import os

from envhub.adapters.mock import MockCommandAdapter
from envhub.core.data.probes import PLACEHOLDER
from envhub.core.models.profile import DiagnosticSpec, PackageSpec
from envhub.core.services.materializer import Materializer, extract_version
from envhub.core.services.registry import ProfileRegistry
from envhub.core.services.resolver import Resolver

STORE = "/store"


def _resolve(registry: ProfileRegistry, **fields):
    profile = registry.register("p", **fields)
    return Resolver(registry, STORE).resolve(profile)


class TestMaterialize:
    def test_path_follows_resolver_order(self, registry, mock_runner):
        env = _resolve(registry, packages=["ruff", "python313", "black", "ruff"])
        result = Materializer(runner=mock_runner, base_env={}).materialize(env)
        expected = [pkg.bin_dir(STORE) for pkg in env.packages]
        assert list(result.path) == expected
        assert result.path[0].endswith("-ruff/bin")
        assert len(result.path) == 3

    def test_library_packages_have_no_path_entry(self, registry, mock_runner):
        registry.add_package(PackageSpec(name="nccl", bin=""))
        env = _resolve(registry, packages=["nccl", "ruff"])
        result = Materializer(runner=mock_runner, base_env={}).materialize(env)
        assert len(result.path) == 1
        assert result.path[0].endswith("-ruff/bin")

    def test_variables_copied(self, registry, mock_runner):
        env = _resolve(registry, packages=["python313"])
        result = Materializer(runner=mock_runner, base_env={}).materialize(env)
        assert result.variables == env.variables
        assert result.variables["ENVHUB_PROFILE"] == "p"
        assert result.profile == "p"
        assert result.shell_name == "p-dev"

    def test_does_not_touch_process_environment(self, registry, mock_runner, monkeypatch):
        monkeypatch.setenv("PATH", "/usr/bin")
        env = _resolve(registry, packages=["python313"])
        Materializer(runner=mock_runner).materialize(env)
        assert os.environ["PATH"] == "/usr/bin"
        assert "ENVHUB_PROFILE" not in os.environ


class TestDiagnostics:
    def test_version_lines_in_order(self, registry, mock_runner):
        env = _resolve(
            registry,
            packages=["python313", "clang"],
            diagnostics=[
                {"label": "Python", "tool": "python"},
                {"label": "Clang", "tool": "clang"},
            ],
        )
        result = Materializer(runner=mock_runner, base_env={}).materialize(env)
        assert result.diagnostics == ("Python: 3.13.1", "Clang: clang version 19.1.0")

    def test_missing_tool_gets_placeholder(self, registry, mock_runner):
        env = _resolve(
            registry,
            packages=["clang"],
            diagnostics=[
                {"label": "Clang", "tool": "clang"},
                {"label": "NVCC", "tool": "nvcc"},
            ],
        )
        result = Materializer(runner=mock_runner, base_env={}).materialize(env)
        assert result.diagnostics == ("Clang: clang version 19.1.0", f"NVCC: {PLACEHOLDER}")

    def test_failing_tool_gets_placeholder(self, registry):
        runner = MockCommandAdapter(failures={"python": "segfault"})
        env = _resolve(registry, packages=["python313"], diagnostics=[{"label": "Python", "tool": "python"}])
        result = Materializer(runner=runner, base_env={}).materialize(env)
        assert result.diagnostics == (f"Python: {PLACEHOLDER}",)

    def test_unknown_tool_gets_placeholder(self, registry, mock_runner):
        env = _resolve(registry, packages=["ruff"], diagnostics=[{"label": "Zig", "tool": "zig"}])
        result = Materializer(runner=mock_runner, base_env={}).materialize(env)
        assert result.diagnostics == (f"Zig: {PLACEHOLDER}",)
        assert mock_runner.call_count == 0

    def test_custom_command_and_pattern(self, registry):
        runner = MockCommandAdapter(outputs={"nvcc": "Cuda compilation tools, release 12.4, V12.4.131"})
        env = _resolve(
            registry,
            packages=["clang"],
            diagnostics=[{"label": "NVCC", "command": ["nvcc", "-V"], "pattern": r"release (\S+),"}],
        )
        result = Materializer(runner=runner, base_env={}).materialize(env)
        assert result.diagnostics == ("NVCC: 12.4",)
        assert runner.call_log[0][0] == ["nvcc", "-V"]

    def test_probe_sees_new_path_first(self, registry, mock_runner):
        env = _resolve(registry, packages=["python313"], diagnostics=[{"label": "Python", "tool": "python"}])
        result = Materializer(runner=mock_runner, base_env={"PATH": "/usr/bin"}).materialize(env)
        _, probe_env = mock_runner.call_log[0]
        assert probe_env["PATH"].split(":") == [result.path[0], "/usr/bin"]
        assert probe_env["ENVHUB_PROFILE"] == "p"

    def test_diagnostics_disabled(self, registry, mock_runner):
        env = _resolve(registry, packages=["python313"], diagnostics=[{"label": "Python", "tool": "python"}])
        result = Materializer(runner=mock_runner, base_env={}).materialize(env, diagnostics=False)
        assert result.diagnostics == ()
        assert mock_runner.call_count == 0

    def test_diagnostic_line_directly(self, mock_runner):
        line = Materializer(runner=mock_runner, base_env={}).diagnostic_line(
            DiagnosticSpec(label="Python", tool="python"), {},
        )
        assert line == "Python: 3.13.1"


class TestExtractVersion:
    def test_first_line_without_pattern(self):
        assert extract_version("\n  clang version 19\nmore") == "clang version 19"

    def test_group(self):
        assert extract_version("ruff 0.5.1", r"ruff\s+(\d+\.\d+\.\d+)") == "0.5.1"

    def test_whole_match_without_group(self):
        assert extract_version("v20.1.0", r"\d+\.\d+\.\d+") == "20.1.0"

    def test_no_match(self):
        assert extract_version("garbage", r"(\d+)") is None

    def test_empty_output(self):
        assert extract_version("") is None

    def test_invalid_pattern(self):
        assert extract_version("1.0", r"(unclosed") is None
