"""Data models and constants for lockfile scanning."""

from dataclasses import dataclass, field
from pathlib import Path

import httpx

PER_PAGE = 100  # GitHub REST maximum page size

LOCKFILE_NAMES = frozenset({"package-lock.json", "yarn.lock", "pnpm-lock.yaml", "bun.lockb"})

# Scan outcomes for a single repository
STATUS_MATCHED = "matched"
STATUS_CLEAN = "clean"
STATUS_NO_LOCKFILES = "no_lockfiles"
STATUS_CLONE_FAILED = "clone_failed"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class RateLimitState:
    """Rate limit fields from a single response."""

    remaining: int
    reset: int  # epoch seconds

    @classmethod
    def from_headers(cls, headers) -> "RateLimitState | None":
        """Parse X-RateLimit-* headers, returning None if either is missing or malformed."""
        try:
            remaining = int(headers["x-ratelimit-remaining"].strip())
            reset = int(headers["x-ratelimit-reset"].strip())
        except (KeyError, AttributeError, ValueError):
            return None
        return cls(remaining=remaining, reset=reset)


@dataclass
class ApiResponse:
    """Response from the GitHub REST API client."""

    status: int
    body: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    links: dict = field(default_factory=dict)

    @property
    def next_link(self) -> str | None:
        """URL of the rel="next" page, or None on the last page."""
        return self.links.get("next", {}).get("url")

    @property
    def rate_limit(self) -> RateLimitState | None:
        return RateLimitState.from_headers(self.headers)


@dataclass(frozen=True)
class VulnerabilityRule:
    """A package name and exact version to search for."""

    package: str
    version: str

    def __str__(self) -> str:
        return f"{self.package}@{self.version}"


@dataclass(frozen=True)
class Match:
    rule: VulnerabilityRule
    path: Path
    line_number: int
    strategy: str


@dataclass
class ScanResult:
    """Outcome of scanning one repository."""

    repo: str
    status: str
    lockfiles: list[Path] = field(default_factory=list)
    matches: list[Match] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return bool(self.matches)

    @property
    def matched_rules(self) -> list[VulnerabilityRule]:
        """Distinct rules that matched, in first-seen order."""
        seen = []
        for m in self.matches:
            if m.rule not in seen:
                seen.append(m.rule)
        return seen


@dataclass
class ScanSummary:
    """Aggregate of a full organization scan."""

    org: str
    results: list[ScanResult] = field(default_factory=list)

    def _with_status(self, status: str) -> list[str]:
        return [r.repo for r in self.results if r.status == status]

    @property
    def matched_repos(self) -> list[str]:
        return self._with_status(STATUS_MATCHED)

    @property
    def no_lockfile_repos(self) -> list[str]:
        return self._with_status(STATUS_NO_LOCKFILES)

    @property
    def clone_failures(self) -> list[str]:
        return self._with_status(STATUS_CLONE_FAILED)

    @property
    def errored_repos(self) -> list[str]:
        return self._with_status(STATUS_ERROR)
