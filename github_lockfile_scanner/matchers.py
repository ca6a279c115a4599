"""Lockfile matching strategies.

Matching is literal and never matches a range: a rule for ``9.0.36`` does
not match ``^9.0.36``. The structured strategy needs the exact quoted
version; the inline strategy checks that the version appears in the
``name@...`` token and is not directly preceded by a range operator.
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from .models import LOCKFILE_NAMES, Match, VulnerabilityRule

# Same heuristic grep -I uses to decide a file is binary
BINARY_SNIFF_BYTES = 8192


class LockfileMatcher(Protocol):
    """A strategy that finds a rule inside the lines of one lockfile."""

    name: str
    filenames: frozenset[str]

    def find(self, rule: VulnerabilityRule, lines: list[str]) -> list[int]:
        """Return 1-based line numbers where the rule matches."""
        ...


@lru_cache(maxsize=4096)
def _inline_pattern(package: str, version: str) -> re.Pattern:
    # A range operator right before the version is a specifier, not a pin
    return re.compile(rf"{re.escape(package)}@\S*(?<![\^~<>=]){re.escape(version)}")


@lru_cache(maxsize=4096)
def _structured_patterns(package: str, version: str) -> tuple[re.Pattern, re.Pattern]:
    name = re.compile(rf'"(?:[^"]*node_modules/)?{re.escape(package)}"')
    ver = re.compile(rf'"version":\s*"{re.escape(version)}"')
    return name, ver


class InlineMatcher:
    """``name@version`` on a single line, as in yarn.lock and pnpm-lock.yaml."""

    name = "inline"
    filenames = LOCKFILE_NAMES

    def find(self, rule, lines):
        pattern = _inline_pattern(rule.package, rule.version)
        return [i for i, line in enumerate(lines, start=1) if pattern.search(line)]


class StructuredMatcher:
    """Quoted package key with a ``"version"`` field on an adjacent line.

    Covers package-lock.json, both the v1 ``"pkg": {`` form and the v2/v3
    ``"node_modules/pkg": {`` form.
    """

    name = "structured"
    filenames = LOCKFILE_NAMES

    def find(self, rule, lines):
        name_re, version_re = _structured_patterns(rule.package, rule.version)
        hits = []
        for i, line in enumerate(lines):
            if not name_re.search(line):
                continue
            window = lines[max(i - 1, 0) : i + 2]
            if any(version_re.search(w) for w in window):
                hits.append(i + 1)
        return hits


DEFAULT_MATCHERS: tuple[LockfileMatcher, ...] = (InlineMatcher(), StructuredMatcher())


def read_lockfile(path: Path) -> list[str] | None:
    """Read a lockfile as text lines, or None if it is binary or unreadable."""
    try:
        data = path.read_bytes()
    except OSError:
        return None
    if b"\0" in data[:BINARY_SNIFF_BYTES]:
        return None
    return data.decode("utf-8", errors="replace").splitlines()


def match_rules(
    rules: list[VulnerabilityRule],
    files: list[Path],
    matchers: tuple[LockfileMatcher, ...] = DEFAULT_MATCHERS,
) -> list[Match]:
    """Apply every matcher to every file for every rule.

    Results are ordered by rule, then file, then matcher.
    """
    contents = {}
    for path in files:
        lines = read_lockfile(path)
        if lines is not None:
            contents[path] = lines

    matches = []
    for rule in rules:
        for path, lines in contents.items():
            for matcher in matchers:
                if path.name not in matcher.filenames:
                    continue
                for lineno in matcher.find(rule, lines):
                    matches.append(Match(rule=rule, path=path, line_number=lineno, strategy=matcher.name))
    return matches
