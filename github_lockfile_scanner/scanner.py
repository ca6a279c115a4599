"""Scan one repository's lockfiles for vulnerable package versions."""

import os
from pathlib import Path

from . import console
from .matchers import DEFAULT_MATCHERS, LockfileMatcher, match_rules
from .models import (
    LOCKFILE_NAMES,
    STATUS_CLEAN,
    STATUS_CLONE_FAILED,
    STATUS_MATCHED,
    STATUS_NO_LOCKFILES,
    ScanResult,
    VulnerabilityRule,
)
from .sync import CloneError, GitRepositorySync

CONTROL_DIRS = {".git"}


def find_lockfiles(root: Path) -> list[Path]:
    """Walk a checkout and return known lockfiles, sorted, skipping .git."""
    found = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in CONTROL_DIRS]
        for name in filenames:
            if name in LOCKFILE_NAMES:
                found.append(Path(dirpath) / name)
    return sorted(found)


class RepositoryScanner:
    def __init__(
        self,
        sync: GitRepositorySync,
        rules: list[VulnerabilityRule],
        matchers: tuple[LockfileMatcher, ...] = DEFAULT_MATCHERS,
    ):
        self.sync = sync
        self.rules = rules
        self.matchers = matchers

    def scan(self, repo: str) -> ScanResult:
        """Sync, find lockfiles, match rules, and report for one repository.

        Never raises for a missing clone or an empty repository; those come
        back as STATUS_CLONE_FAILED and STATUS_NO_LOCKFILES results.
        """
        console.plain("")
        console.plain(f">> Processing repo: {repo}")

        try:
            path = self.sync.sync(repo)
        except CloneError as e:
            console.error(f"(clone failed) {repo}: {e}")
            return ScanResult(repo=repo, status=STATUS_CLONE_FAILED)

        console.step("Searching for vulnerable versions...")
        lockfiles = find_lockfiles(path)
        if not lockfiles:
            console.warning(f"No lockfiles found in {repo}.")
            console.plain(f"<< Done with repo: {repo}")
            return ScanResult(repo=repo, status=STATUS_NO_LOCKFILES)

        matches = match_rules(self.rules, lockfiles, self.matchers)
        for m in matches:
            rel = m.path.relative_to(path)
            console.found(f"Found {m.rule} in {repo} ({rel}:{m.line_number}, {m.strategy})")

        if not matches:
            console.success(f"No matches found in {repo}.")
        console.plain(f"<< Done with repo: {repo}")

        return ScanResult(
            repo=repo,
            status=STATUS_MATCHED if matches else STATUS_CLEAN,
            lockfiles=lockfiles,
            matches=matches,
        )
