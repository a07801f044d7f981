import subprocess

import pytest

from repo_status.errors import CommandError
from repo_status.executor import CommandResult, ElevatedExecutor, SubprocessExecutor


def test_subprocess_executor_splits_stdout_and_keeps_return_code(monkeypatch, tmp_path):
    seen = {}

    def fake_run(cmd, **kwargs):
        seen["cmd"] = cmd
        seen["cwd"] = kwargs["cwd"]
        return subprocess.CompletedProcess(
            args=cmd,
            returncode=1,
            stdout=" M foo.py\n?? tmp.txt\n",
            stderr="warning: something",
        )

    monkeypatch.setattr("repo_status.executor.subprocess.run", fake_run)

    result = SubprocessExecutor(cwd=tmp_path).execute("git", ["status", "--porcelain"])

    assert seen == {"cmd": ["git", "status", "--porcelain"], "cwd": str(tmp_path)}
    assert result.returncode == 1
    assert result.failed
    assert result.output == [" M foo.py", "?? tmp.txt"]
    assert result.stderr == "warning: something"


def test_subprocess_executor_wraps_launch_failures(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", cmd[0])

    monkeypatch.setattr("repo_status.executor.subprocess.run", fake_run)

    with pytest.raises(CommandError, match="failed to execute /nope/git"):
        SubprocessExecutor().execute("/nope/git", ["status"])


def test_elevated_executor_prefixes_sudo():
    calls = []

    class Recorder:
        def execute(self, command, args):
            calls.append([command, *args])
            return CommandResult(returncode=0)

    ElevatedExecutor(Recorder(), "alice").execute("git", ["fetch", "origin"])

    assert calls == [["sudo", "-u", "alice", "-H", "git", "fetch", "origin"]]


def test_command_result_describe_includes_output_and_stderr():
    result = CommandResult(returncode=255, output=["a", "b"], stderr="fatal: nope\n")
    text = result.describe()
    assert "return code is 255" in text
    assert "a\nb" in text
    assert "fatal: nope" in text


def test_subprocess_executor_replaces_undecodable_output(monkeypatch):
    seen = {}

    def fake_run(cmd, **kwargs):
        seen.update(kwargs)
        return subprocess.CompletedProcess(args=cmd, returncode=0, stdout="", stderr="")

    monkeypatch.setattr("repo_status.executor.subprocess.run", fake_run)

    SubprocessExecutor().execute("git", ["log", "..origin/main"])

    assert seen["encoding"] == "utf-8"
    assert seen["errors"] == "replace"
