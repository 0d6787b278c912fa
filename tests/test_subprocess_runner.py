"""
Tests for the subprocess runner — real short-lived processes, no mocks.
"""

import os

import pytest

from swarmprep.core.services.provision.execution import subprocess_runner
from swarmprep.core.services.provision.execution.subprocess_runner import (
    run_command,
    sudo_prefix,
)


class TestRunCommand:
    def test_success_captures_stdout(self):
        result = run_command(["sh", "-c", "echo hello"])
        assert result["ok"] is True
        assert result["stdout"] == "hello\n"
        assert result["elapsed_ms"] >= 0

    def test_nonzero_exit(self):
        result = run_command(["sh", "-c", "echo oops >&2; exit 3"])
        assert result["ok"] is False
        assert result["returncode"] == 3
        assert result["stderr"].strip() == "oops"
        assert "exit 3" in result["error"]

    def test_command_not_found(self):
        result = run_command(["definitely-not-a-real-binary-xyz"])
        assert result["ok"] is False
        assert "Command not found" in result["error"]

    def test_stdin(self):
        result = run_command(["cat"], input_text="piped script\n")
        assert result["stdout"] == "piped script\n"

    def test_env_overrides(self):
        result = run_command(
            ["sh", "-c", "echo $VIRTUAL_ENV"],
            env_overrides={"VIRTUAL_ENV": "/tmp/venv"},
        )
        assert result["stdout"].strip() == "/tmp/venv"

    def test_cwd(self, tmp_path):
        result = run_command(["pwd"], cwd=str(tmp_path))
        assert os.path.realpath(result["stdout"].strip()) == os.path.realpath(tmp_path)

    def test_timeout(self):
        result = run_command(["sleep", "5"], timeout=1)
        assert result["ok"] is False
        assert "timed out" in result["error"]

    def test_dry_run_does_not_execute(self, tmp_path):
        marker = tmp_path / "touched"
        result = run_command(["touch", str(marker)], dry_run=True)
        assert result["ok"] is True
        assert result["dry_run"] is True
        assert not marker.exists()


class TestSudo:
    def test_root_needs_no_prefix(self, monkeypatch):
        monkeypatch.setattr(subprocess_runner.os, "geteuid", lambda: 0)
        assert sudo_prefix() == []
        assert sudo_prefix(preserve_env=True) == []

    @pytest.mark.parametrize("preserve, expected", [
        (False, ["sudo"]),
        (True, ["sudo", "-E"]),
    ])
    def test_non_root(self, monkeypatch, preserve, expected):
        monkeypatch.setattr(subprocess_runner.os, "geteuid", lambda: 1000)
        assert sudo_prefix(preserve_env=preserve) == expected

    def test_prefix_applied(self, monkeypatch):
        monkeypatch.setattr(subprocess_runner.os, "geteuid", lambda: 1000)
        result = run_command(["apt-get", "update"], needs_sudo=True, dry_run=True)
        assert result["ok"] is True
