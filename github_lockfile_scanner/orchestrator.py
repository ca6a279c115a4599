"""Drive a full organization scan: authenticate, load rules, list, scan."""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from . import console
from .client import GitHubClient, MissingCredentialError
from .models import STATUS_ERROR, ScanResult, ScanSummary
from .repos import list_org_repos
from .rules import load_rules
from .scanner import RepositoryScanner
from .settings import get_settings
from .sync import GitRepositorySync

STATE_INIT = "init"
STATE_AUTHENTICATED = "authenticated"
STATE_RULES_LOADED = "rules_loaded"
STATE_LISTING = "listing"
STATE_SCANNING = "scanning"
STATE_DONE = "done"


class Orchestrator:
    """Runs the scan stages in order; any stage before scanning is fatal on error.

    Once scanning starts, each repository is independent: an unexpected error in
    one is recorded as STATUS_ERROR and the rest still run.
    """

    def __init__(
        self,
        org: str,
        rules_path: Path,
        use_ssh: bool = False,
        workdir: Path = Path("."),
        workers: int = 1,
        token: str | None = None,
    ):
        self.org = org
        self.rules_path = Path(rules_path)
        self.use_ssh = use_ssh
        self.workdir = Path(workdir)
        self.workers = max(1, workers)
        self.token = token
        self.state = STATE_INIT
        self.rules = []
        self.repos: list[str] = []

    @property
    def repos_root(self) -> Path:
        return self.workdir / f"{self.org}_repos"

    def authenticate(self) -> str:
        token = self.token or get_settings().github_token
        if not token:
            raise MissingCredentialError("GITHUB_TOKEN environment variable not set.")
        self.token = token
        self.state = STATE_AUTHENTICATED
        return token

    def load_rules(self):
        self.rules = load_rules(self.rules_path)
        console.info(f"Loaded {len(self.rules)} rules from {self.rules_path}")
        self.state = STATE_RULES_LOADED
        return self.rules

    def list_repos(self) -> list[str]:
        self.state = STATE_LISTING
        with GitHubClient(token=self.token) as client:
            self.repos = list_org_repos(client, self.org)
        console.success(f"Fetched {len(self.repos)} repositories.")
        return self.repos

    def scan_repos(self) -> ScanSummary:
        self.state = STATE_SCANNING
        self.repos_root.mkdir(parents=True, exist_ok=True)
        sync = GitRepositorySync(self.org, self.repos_root, use_ssh=self.use_ssh)
        scanner = RepositoryScanner(sync, self.rules)

        def scan_one(repo: str) -> ScanResult:
            try:
                return scanner.scan(repo)
            except Exception as e:
                console.error(f"Error scanning {repo}: {e}")
                return ScanResult(repo=repo, status=STATUS_ERROR)

        if self.workers == 1:
            results = [scan_one(repo) for repo in self.repos]
        else:
            # map() yields in submission order, so results follow listing order
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                results = list(pool.map(scan_one, self.repos))

        self.state = STATE_DONE
        return ScanSummary(org=self.org, results=results)

    def run(self) -> ScanSummary:
        self.authenticate()
        self.load_rules()
        self.list_repos()
        return self.scan_repos()


def print_summary(summary: ScanSummary):
    console.plain("")
    console.plain(f"Scanned {len(summary.results)} repositories in {summary.org}.")
    if summary.no_lockfile_repos:
        console.warning(f"{len(summary.no_lockfile_repos)} without lockfiles.")
    if summary.clone_failures:
        console.error(f"{len(summary.clone_failures)} failed to clone: {', '.join(summary.clone_failures)}")
    if summary.errored_repos:
        console.error(f"{len(summary.errored_repos)} errored: {', '.join(summary.errored_repos)}")
    if summary.matched_repos:
        console.found(f"Vulnerable versions found in {len(summary.matched_repos)} repositories:")
        for result in summary.results:
            if result.matched:
                rules = ", ".join(str(r) for r in result.matched_rules)
                console.found(f"  {result.repo}: {rules}")
    else:
        console.success("No vulnerable versions found.")
