"""Unit tests for the git-backed repository sync."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from .sync import CloneError, GitRepositorySync


def _completed(returncode=0, stderr=""):
    return subprocess.CompletedProcess(args=["git"], returncode=returncode, stdout="", stderr=stderr)


def describe_GitRepositorySync():
    @pytest.fixture
    def mock_run():
        with patch("github_lockfile_scanner.sync.subprocess.run") as run:
            run.return_value = _completed()
            yield run

    def describe_clone_url():
        def it_uses_https_by_default(tmp_path: Path):
            assert GitRepositorySync("acme", tmp_path).clone_url("api") == "https://github.com/acme/api.git"

        def it_uses_ssh_when_requested(tmp_path: Path):
            sync = GitRepositorySync("acme", tmp_path, use_ssh=True)
            assert sync.clone_url("api") == "git@github.com:acme/api.git"

    def describe_sync():
        def it_clones_when_no_local_copy_exists(tmp_path: Path, mock_run):
            sync = GitRepositorySync("acme", tmp_path / "acme_repos")

            path = sync.sync("api")

            assert path == tmp_path / "acme_repos" / "api"
            cmd = mock_run.call_args.args[0]
            assert cmd == ["git", "clone", "--quiet", "https://github.com/acme/api.git", str(path)]
            assert mock_run.call_args.kwargs["env"]["GIT_TERMINAL_PROMPT"] == "0"

        def it_pulls_when_a_local_copy_exists(tmp_path: Path, mock_run):
            (tmp_path / "api" / ".git").mkdir(parents=True)
            sync = GitRepositorySync("acme", tmp_path)

            path = sync.sync("api")

            assert path == tmp_path / "api"
            cmd = mock_run.call_args.args[0]
            assert cmd == ["git", "-C", str(tmp_path / "api"), "pull", "--ff-only", "--quiet"]

        def it_keeps_the_local_copy_when_pull_fails(tmp_path: Path, mock_run, capsys):
            (tmp_path / "api" / ".git").mkdir(parents=True)
            mock_run.return_value = _completed(returncode=1, stderr="diverged")

            assert GitRepositorySync("acme", tmp_path).sync("api") == tmp_path / "api"
            assert "(pull failed)" in capsys.readouterr().out

        def it_raises_when_clone_fails(tmp_path: Path, mock_run):
            mock_run.return_value = _completed(returncode=128, stderr="fatal: repository not found")

            with pytest.raises(CloneError, match="repository not found"):
                GitRepositorySync("acme", tmp_path).sync("gone")

        def it_raises_when_git_is_missing(tmp_path: Path, mock_run):
            mock_run.side_effect = FileNotFoundError("git")

            with pytest.raises(CloneError, match="Could not run git"):
                GitRepositorySync("acme", tmp_path).sync("api")
