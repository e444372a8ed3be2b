"""
Tests for the command adapters — real shell execution and the mock.
"""

import os

from envhub.adapters import CommandReceipt, MockCommandAdapter, ShellCommandAdapter

# ── Shell Adapter Tests ──────────────────────────────────────────────


class TestShellCommandAdapter:
    def test_echo(self):
        receipt = ShellCommandAdapter().run(["sh", "-c", "echo hello"])
        assert receipt.ok
        assert receipt.output == "hello"
        assert receipt.return_code == 0

    def test_stderr_used_when_stdout_empty(self):
        receipt = ShellCommandAdapter().run(["sh", "-c", "echo 'Python 2.7.18' >&2"])
        assert receipt.ok
        assert receipt.output == "Python 2.7.18"

    def test_non_zero_exit(self):
        receipt = ShellCommandAdapter().run(["sh", "-c", "echo broken >&2; exit 3"])
        assert not receipt.ok
        assert receipt.return_code == 3
        assert receipt.error == "broken"

    def test_missing_executable(self):
        receipt = ShellCommandAdapter().run(["envhub-definitely-not-installed", "--version"])
        assert not receipt.ok
        assert "not found" in receipt.error

    def test_empty_command(self):
        receipt = ShellCommandAdapter().run([])
        assert not receipt.ok
        assert receipt.error == "Empty command"

    def test_timeout(self):
        receipt = ShellCommandAdapter(timeout=0.2).run(["sleep", "5"])
        assert not receipt.ok
        assert "timed out" in receipt.error

    def test_env_is_passed(self):
        env = {"PATH": os.environ.get("PATH", "/usr/bin:/bin"), "ENVHUB_PROFILE": "cuda"}
        receipt = ShellCommandAdapter().run(["sh", "-c", "echo $ENVHUB_PROFILE"], env=env)
        assert receipt.output == "cuda"

    def test_lookup_uses_env_path(self, tmp_path):
        receipt = ShellCommandAdapter().run(["sh", "-c", "true"], env={"PATH": str(tmp_path)})
        assert not receipt.ok
        assert receipt.error == "sh: not found"

    def test_is_available(self):
        adapter = ShellCommandAdapter()
        assert adapter.is_available("sh")
        assert not adapter.is_available("envhub-definitely-not-installed")


# ── Mock Adapter Tests ───────────────────────────────────────────────


class TestMockCommandAdapter:
    def test_configured_output(self):
        mock = MockCommandAdapter(outputs={"python": "Python 3.13.1"})
        receipt = mock.run(["python", "--version"])
        assert receipt.ok
        assert receipt.output == "Python 3.13.1"
        assert mock.call_count == 1

    def test_unconfigured_is_not_found(self):
        mock = MockCommandAdapter()
        receipt = mock.run(["nvcc", "--version"])
        assert not receipt.ok
        assert not mock.is_available("nvcc")

    def test_set_failure(self):
        mock = MockCommandAdapter(outputs={"gcc": "gcc 14"})
        mock.set_failure("gcc", "Intentional failure")
        receipt = mock.run(["gcc", "--version"])
        assert not receipt.ok
        assert receipt.error == "Intentional failure"
        assert receipt.return_code == 1

    def test_set_output_clears_failure(self):
        mock = MockCommandAdapter(failures={"gcc": "boom"})
        mock.set_output("gcc", "gcc 14")
        assert mock.run(["gcc"]).output == "gcc 14"

    def test_call_log_records_env(self):
        mock = MockCommandAdapter(outputs={"clang": "clang 19"})
        mock.run(["clang", "--version"], env={"PATH": "/store/x/bin"})
        argv, env = mock.call_log[0]
        assert argv == ["clang", "--version"]
        assert env == {"PATH": "/store/x/bin"}

    def test_reset(self):
        mock = MockCommandAdapter(outputs={"clang": "clang 19"})
        mock.run(["clang"])
        mock.reset()
        assert mock.call_count == 0


class TestCommandReceipt:
    def test_defaults(self):
        receipt = CommandReceipt(command=["true"])
        assert receipt.ok
        assert receipt.output == ""
        assert receipt.error is None
