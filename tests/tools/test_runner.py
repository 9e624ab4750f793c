"""Tests for external command execution."""

import subprocess
import sys

from plan_wolf.tools import CommandRunner, run_command


class TestRunCommand:
    def test_empty_command_is_skipped(self, tmp_path):
        result = run_command("   ", tmp_path)
        assert result.skipped and not result.ok
        assert result.failure_reason == "not configured"

    def test_success_captures_output(self, tmp_path):
        result = run_command(f'{sys.executable} -c "print(42)"', tmp_path)
        assert result.ok
        assert result.returncode == 0
        assert result.output.strip() == "42"

    def test_non_zero_exit(self, tmp_path):
        code = "import sys; sys.stderr.write('boom'); sys.exit(3)"
        result = run_command(f'{sys.executable} -c "{code}"', tmp_path)
        assert not result.ok
        assert result.returncode == 3
        assert "boom" in result.output
        assert result.failure_reason == "exit code 3"

    def test_missing_binary(self, tmp_path):
        result = run_command("definitely-not-a-real-tool-xyz --version", tmp_path)
        assert result.missing
        assert result.failure_reason == "tool not installed"

    def test_unbalanced_quotes(self, tmp_path):
        assert run_command("echo 'oops", tmp_path).missing

    def test_timeout(self, tmp_path, monkeypatch):
        def fake_run(*args, **kwargs):
            raise subprocess.TimeoutExpired(cmd=args[0], timeout=kwargs["timeout"])

        monkeypatch.setattr(subprocess, "run", fake_run)
        result = run_command("npx vitest run", tmp_path, timeout=1)
        assert result.timed_out
        assert result.failure_reason == "timed out"

    def test_no_shell(self, tmp_path, monkeypatch):
        seen = {}

        def fake_run(argv, **kwargs):
            seen["argv"] = argv
            seen["kwargs"] = kwargs
            return subprocess.CompletedProcess(argv, 0, stdout="", stderr="")

        monkeypatch.setattr(subprocess, "run", fake_run)
        CommandRunner(tmp_path).run("npx eslint 'src dir/' --max-warnings=0", timeout=5)
        assert seen["argv"] == ["npx", "eslint", "src dir/", "--max-warnings=0"]
        assert "shell" not in seen["kwargs"]
        assert seen["kwargs"]["cwd"] == str(tmp_path)
        assert seen["kwargs"]["timeout"] == 5
