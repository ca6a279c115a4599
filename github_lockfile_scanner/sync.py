"""Keep a local clone of each repository up to date using the git CLI."""

import os
import subprocess
from pathlib import Path

from . import console


class CloneError(RuntimeError):
    pass


def _git(*args: str) -> subprocess.CompletedProcess:
    # Never block on a credential prompt for private repos
    env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}
    return subprocess.run(["git", *args], capture_output=True, text=True, env=env, check=False)


class GitRepositorySync:
    """Clone into ``{root}/{repo}`` when absent, else fast-forward pull."""

    def __init__(self, org: str, root: Path, use_ssh: bool = False):
        self.org = org
        self.root = Path(root)
        self.use_ssh = use_ssh

    def clone_url(self, repo: str) -> str:
        if self.use_ssh:
            return f"git@github.com:{self.org}/{repo}.git"
        return f"https://github.com/{self.org}/{repo}.git"

    def local_path(self, repo: str) -> Path:
        return self.root / repo

    def sync(self, repo: str) -> Path:
        """Bring the local copy up to date and return its path.

        A failed pull is reported and the existing checkout is used as is.

        Raises:
            CloneError: the repository had no local copy and cloning failed.
        """
        path = self.local_path(repo)

        if (path / ".git").is_dir():
            console.info("Pulling latest changes...")
            try:
                result = _git("-C", str(path), "pull", "--ff-only", "--quiet")
            except OSError as e:
                console.warning(f"(pull failed: {e})")
                return path
            if result.returncode != 0:
                console.warning("(pull failed)")
            return path

        console.info("Cloning repository...")
        self.root.mkdir(parents=True, exist_ok=True)
        try:
            result = _git("clone", "--quiet", self.clone_url(repo), str(path))
        except OSError as e:
            raise CloneError(f"Could not run git: {e}") from e
        if result.returncode != 0:
            raise CloneError(result.stderr.strip() or f"git clone exited {result.returncode}")
        return path
