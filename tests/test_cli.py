"""
Tests for CLI commands — list, show, activate, export, use, init, config check.
"""

import json
import textwrap
from pathlib import Path

from click.testing import CliRunner

from envhub.main import cli


def _conflicting(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        packages:
          python313: {}
        overlays:
          clang-build: {target: python313, options: {stdenv: clang}}
          gcc-build: {target: python313, options: {stdenv: gcc}}
        profiles:
          default:
            packages: [python313]
            overlays: [clang-build, gcc-build]
    """)
    path = tmp_path / "envhub.yml"
    path.write_text(content)
    return path


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "multi-profile development environments" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestListCommand:
    def test_list_builtin(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(cli, ["list"])
        assert result.exit_code == 0
        for name in ("default", "cpp", "cuda", "deep-learning", "all", "notebook"):
            assert name in result.output
        assert "built-in catalog" in result.output

    def test_list_json_marks_selected(self, config_yml: Path):
        (config_yml.parent / ".envhub-profile").write_text("cpp\n")
        result = CliRunner().invoke(cli, ["--config", str(config_yml), "list", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["default"] == "python"
        assert data["selected"] == "cpp"
        assert [p["name"] for p in data["profiles"]] == ["python", "cpp", "cuda"]


class TestShowCommand:
    def test_show(self, config_yml: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_yml), "show", "python"])
        assert result.exit_code == 0
        assert "python313-3.13  + optimized" in result.output
        assert "numpy, pandas" in result.output

    def test_show_json(self, config_yml: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_yml), "show", "cuda", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [p["name"] for p in data["packages"]] == ["clang", "cudatoolkit"]
        assert data["flags"] == ["allow_unfree", "requires_gpu"]

    def test_show_unknown(self, config_yml: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_yml), "show", "rust"])
        assert result.exit_code == 1
        assert "Unknown profile 'rust'" in result.output


class TestActivateCommand:
    def test_activate_default(self, config_yml: Path):
        result = CliRunner().invoke(
            cli, ["--config", str(config_yml), "activate", "--no-diagnostics"],
        )
        assert result.exit_code == 0
        assert "python (python-dev)" in result.output

    def test_activate_json(self, config_yml: Path):
        result = CliRunner().invoke(
            cli,
            ["--config", str(config_yml), "activate", "-p", "cpp", "--json", "--no-diagnostics"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["activation"]["profile"] == "cpp"

    def test_unknown_override_exits_zero(self, config_yml: Path):
        result = CliRunner().invoke(
            cli,
            ["--config", str(config_yml), "activate", "-p", "rust", "--no-diagnostics"],
        )
        assert result.exit_code == 0
        assert result.output.count("falling back to default 'python'") == 1

    def test_unknown_override_file_warns_once(self, config_yml: Path):
        (config_yml.parent / ".envhub-profile").write_text("rust\n")
        result = CliRunner().invoke(
            cli, ["--config", str(config_yml), "activate", "--no-diagnostics"],
        )
        assert result.exit_code == 0
        assert result.output.count("Unknown profile 'rust'") == 1
        assert "python (python-dev)" in result.output

    def test_conflict_exits_nonzero(self, tmp_path: Path):
        config = _conflicting(tmp_path)
        result = CliRunner().invoke(cli, ["--config", str(config), "activate", "--no-diagnostics"])
        assert result.exit_code == 1
        assert "clang-build" in result.output and "gcc-build" in result.output
        assert "No environment was activated" in result.output

    def test_invalid_default_exits_nonzero(self, tmp_path: Path):
        config = tmp_path / "envhub.yml"
        config.write_text("settings: {default: nope}\nprofiles: {cpp: {}}\n")
        result = CliRunner().invoke(cli, ["--config", str(config), "activate", "--no-diagnostics"])
        assert result.exit_code == 1
        assert "Default profile 'nope' is not registered" in result.output


class TestExportCommand:
    def test_bash_export(self, config_yml: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_yml), "export", "-p", "cuda"])
        assert result.exit_code == 0
        assert "export ENVHUB_PROFILE=cuda" in result.output
        assert "export CUDA_PATH=/store/" in result.output
        assert '"${PATH:+:$PATH}"' in result.output

    def test_fish_export(self, config_yml: Path):
        result = CliRunner().invoke(
            cli, ["--config", str(config_yml), "export", "--shell", "fish"],
        )
        assert result.exit_code == 0
        assert "set -gx ENVHUB_PROFILE python" in result.output
        assert "set -gx PATH " in result.output

    def test_export_unknown_override_warns_once(self, config_yml: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_yml), "export", "-p", "rust"])
        assert result.exit_code == 0
        assert "export ENVHUB_PROFILE=python" in result.output
        assert result.output.count("falling back to default 'python'") == 1

    def test_export_conflict(self, tmp_path: Path):
        config = _conflicting(tmp_path)
        result = CliRunner().invoke(cli, ["--config", str(config), "export"])
        assert result.exit_code == 1


class TestUseCommand:
    def test_use_writes_override(self, config_yml: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_yml), "use", "cuda"])
        assert result.exit_code == 0
        assert (config_yml.parent / ".envhub-profile").read_text() == "cuda\n"

    def test_use_unknown_rejected(self, config_yml: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_yml), "use", "rust"])
        assert result.exit_code == 1
        assert not (config_yml.parent / ".envhub-profile").exists()

    def test_use_clear(self, config_yml: Path):
        override = config_yml.parent / ".envhub-profile"
        override.write_text("cpp\n")
        result = CliRunner().invoke(cli, ["--config", str(config_yml), "use", "--clear"])
        assert result.exit_code == 0
        assert not override.exists()
        assert "using default 'python'" in result.output

    def test_use_without_name(self, config_yml: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_yml), "use"])
        assert result.exit_code == 2


class TestInitCommand:
    def test_init_writes_envrc_and_gitignore(self, config_yml: Path):
        root = config_yml.parent
        (root / ".gitignore").write_text("__pycache__/")
        result = CliRunner().invoke(cli, ["--config", str(config_yml), "init"])
        assert result.exit_code == 0
        assert 'eval "$(envhub export --shell bash)"' in (root / ".envrc").read_text()
        assert (root / ".gitignore").read_text() == "__pycache__/\n.envhub-profile\n"

    def test_init_is_idempotent_for_gitignore(self, config_yml: Path):
        root = config_yml.parent
        runner = CliRunner()
        runner.invoke(cli, ["--config", str(config_yml), "init"])
        result = runner.invoke(cli, ["--config", str(config_yml), "init", "--force"])
        assert result.exit_code == 0
        assert (root / ".gitignore").read_text().count(".envhub-profile") == 1

    def test_init_refuses_existing_envrc(self, config_yml: Path):
        (config_yml.parent / ".envrc").write_text("use flake\n")
        result = CliRunner().invoke(cli, ["--config", str(config_yml), "init"])
        assert result.exit_code == 1
        assert (config_yml.parent / ".envrc").read_text() == "use flake\n"


class TestConfigCheckCommand:
    def test_valid(self, config_yml: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_yml), "config", "check"])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

    def test_builtin_valid(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(cli, ["config", "check", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["builtin"] is True
        assert data["resolved_profiles"] == ["default", "cpp", "cuda", "deep-learning", "all", "notebook"]

    def test_conflict_reported(self, tmp_path: Path):
        config = _conflicting(tmp_path)
        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check"])
        assert result.exit_code == 1
        assert "Configuration errors" in result.output
        assert "gcc-build" in result.output

    def test_unused_overlay_warning(self, tmp_path: Path):
        config = tmp_path / "envhub.yml"
        config.write_text(textwrap.dedent("""\
            packages:
              python313: {}
              ruff: {}
            overlays:
              optimized: {target: python313, options: {enableLTO: true}}
            profiles:
              default:
                packages: [ruff]
                overlays: [optimized]
        """))
        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert any("optimized" in w for w in data["warnings"])

    def test_overlay_unknown_target(self, tmp_path: Path):
        config = tmp_path / "envhub.yml"
        config.write_text(textwrap.dedent("""\
            overlays:
              optimized: {target: python312}
            profiles:
              default: {}
        """))
        result = CliRunner().invoke(cli, ["--config", str(config), "config", "check", "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert any("python312" in e for e in data["errors"])
