import os
import subprocess
import tempfile
import unittest
from types import SimpleNamespace
from unittest.mock import patch

from gitmap.vcs.git_client import (
    LOG_FORMAT,
    GitClient,
    GitCommandError,
    GitError,
    GitNotFoundError,
    subprocess_runner,
)


class DummyProc(SimpleNamespace):
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""


class RecordingRunner:
    """Fake runner that records every call and replays a fixed result."""

    def __init__(self, result=None, exc=None):
        self.calls = []
        self.result = result if result is not None else DummyProc(returncode=0, stdout="", stderr="")
        self.exc = exc

    def __call__(self, args):
        self.calls.append(list(args))
        if self.exc is not None:
            raise self.exc
        return self.result


class TestGitClient(unittest.TestCase):
    def test_log_args_for_current_branch(self) -> None:
        client = GitClient("/repo")
        self.assertEqual(
            client.log_args(""),
            [
                "-c", "diff.renames=0",
                "-c", "log.showSignature=0",
                "-C", "/repo",
                "log",
                "--name-only",
                "--no-merges",
                f"--format={LOG_FORMAT}",
            ],
        )

    def test_log_format_uses_control_separators(self) -> None:
        self.assertTrue(LOG_FORMAT.startswith("format:%x1e%H%x1f%h"))
        self.assertTrue(LOG_FORMAT.endswith("%ci%x1f%b%x1d"))
        self.assertEqual(LOG_FORMAT.count("%x1f"), 7)

    def test_log_args_pass_revision_through(self) -> None:
        client = GitClient("/repo")
        self.assertEqual(client.log_args("HEAD")[-1], "HEAD")
        self.assertEqual(client.log_args("v1.0..main")[-1], "v1.0..main")
        self.assertEqual(client.log_args("main ^v1.0")[-2:], ["main", "^v1.0"])

    def test_log_runs_git_and_returns_stdout(self) -> None:
        runner = RecordingRunner(DummyProc(returncode=0, stdout="\x1eraw", stderr=""))
        client = GitClient("/repo", runner=runner)

        out = client.log("HEAD")

        self.assertEqual(out, "\x1eraw")
        self.assertEqual(len(runner.calls), 1)
        self.assertEqual(runner.calls[0][0], "git")
        self.assertEqual(runner.calls[0][1:], client.log_args("HEAD"))

    def test_configured_executable_is_used(self) -> None:
        runner = RecordingRunner()
        client = GitClient("/repo", git_executable="/opt/git/bin/git", runner=runner)
        client.log()
        self.assertEqual(runner.calls[0][0], "/opt/git/bin/git")

    def test_missing_executable_raises_not_found(self) -> None:
        runner = RecordingRunner(exc=FileNotFoundError(2, "No such file or directory"))
        client = GitClient("/repo", git_executable="no-such-git", runner=runner)

        with self.assertRaises(GitNotFoundError) as ctx:
            client.log()

        self.assertIsInstance(ctx.exception, GitError)
        self.assertEqual(ctx.exception.executable, "no-such-git")
        self.assertIn("not found", str(ctx.exception))

    def test_non_zero_exit_raises_command_error_with_stderr(self) -> None:
        runner = RecordingRunner(
            DummyProc(returncode=128, stdout="", stderr="fatal: not a git repository\n")
        )
        client = GitClient("/repo", runner=runner)

        with self.assertRaises(GitCommandError) as ctx:
            client.log()

        self.assertNotIsInstance(ctx.exception, GitNotFoundError)
        self.assertEqual(str(ctx.exception), "fatal: not a git repository")
        self.assertEqual(ctx.exception.returncode, 128)

    def test_non_zero_exit_falls_back_to_stdout(self) -> None:
        runner = RecordingRunner(DummyProc(returncode=1, stdout=" oops \n", stderr=""))
        client = GitClient("/repo", runner=runner)

        with self.assertRaises(GitCommandError) as ctx:
            client.log()

        self.assertEqual(str(ctx.exception), "oops")

    def test_top_level_path_from_subdirectory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            sub = os.path.join(tmp, "content", "posts")
            os.makedirs(sub)
            runner = RecordingRunner(DummyProc(returncode=0, stdout="../../\n", stderr=""))
            client = GitClient(sub, runner=runner)

            top_level = client.top_level_path()

            self.assertEqual(top_level, os.path.abspath(tmp).replace(os.sep, "/"))
            self.assertEqual(runner.calls[0], ["git", "-C", sub, "rev-parse", "--show-cdup"])

    def test_top_level_path_at_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            runner = RecordingRunner(DummyProc(returncode=0, stdout="\n", stderr=""))
            client = GitClient(tmp, runner=runner)
            self.assertEqual(client.top_level_path(), os.path.abspath(tmp).replace(os.sep, "/"))

    def test_top_level_path_error_propagates(self) -> None:
        runner = RecordingRunner(DummyProc(returncode=128, stdout="", stderr="fatal: no repo"))
        client = GitClient("/repo", runner=runner)
        with self.assertRaises(GitCommandError):
            client.top_level_path()


class TestSubprocessRunner(unittest.TestCase):
    @patch("subprocess.run")
    def test_captures_both_streams_as_text(self, mock_run) -> None:
        mock_run.return_value = DummyProc(returncode=0, stdout="out", stderr="")

        result = subprocess_runner(["git", "status"])

        self.assertEqual(result.stdout, "out")
        args, kwargs = mock_run.call_args
        self.assertEqual(args[0], ["git", "status"])
        self.assertEqual(kwargs["stdout"], subprocess.PIPE)
        self.assertEqual(kwargs["stderr"], subprocess.PIPE)
        self.assertTrue(kwargs["text"])
        self.assertEqual(kwargs["errors"], "replace")

    @patch("subprocess.run", side_effect=FileNotFoundError("git"))
    def test_default_runner_missing_git(self, mock_run) -> None:
        client = GitClient("/repo")
        with self.assertRaises(GitNotFoundError):
            client.log()


if __name__ == "__main__":
    unittest.main()
