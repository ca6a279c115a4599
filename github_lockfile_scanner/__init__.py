"""Scan every repository in a GitHub organization for vulnerable lockfile entries.

Lists the org's repositories through the REST API, clones or pulls each one,
and searches package-lock.json, yarn.lock, pnpm-lock.yaml and bun.lockb for
exact package@version pairs from a keywords file.
"""

from .cli import main
from .client import GitHubClient
from .models import ApiResponse, ScanResult, VulnerabilityRule

__all__ = ["main", "GitHubClient", "ApiResponse", "ScanResult", "VulnerabilityRule"]
