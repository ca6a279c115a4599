"""Command line entry point for scanning an organization's lockfiles."""

import argparse
import sys
from pathlib import Path

import httpx

from . import console
from .client import GitHubApiError, MissingCredentialError
from .orchestrator import Orchestrator, print_summary
from .rules import RulesFileError


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors exit 1 rather than argparse's default of 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        console.error(f"Error: {message}")
        sys.exit(1)


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="github-lockfile-scan",
        description="Scan every repository in a GitHub org for vulnerable lockfile entries",
        epilog=(
            "Keywords file format: one package per line, e.g.\n"
            "  @ctrl/tinycolor@4.1.1,4.1.2\n"
            "  debug@4.4.2\n\n"
            "Requires GITHUB_TOKEN in the environment or a .env file."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("org", help="GitHub organization name")
    parser.add_argument("keywords_file", type=Path, help="File of pkg@v1,v2,... entries")
    parser.add_argument(
        "--ssh",
        action="store_true",
        help="Clone with git@github.com: URLs instead of HTTPS",
    )
    parser.add_argument(
        "--workdir",
        type=Path,
        default=Path("."),
        help="Directory in which {org}_repos is created (default: current directory)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Repositories to scan in parallel (default: 1)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    if args.workers < 1:
        console.error("Error: --workers must be at least 1")
        sys.exit(1)

    orchestrator = Orchestrator(
        args.org,
        args.keywords_file,
        use_ssh=args.ssh,
        workdir=args.workdir,
        workers=args.workers,
    )
    try:
        summary = orchestrator.run()
    except (MissingCredentialError, RulesFileError) as e:
        console.error(f"Error: {e}")
        sys.exit(1)
    except GitHubApiError as e:
        console.error(str(e))
        sys.exit(1)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        console.error(f"GitHub API request failed: {type(e).__name__}: {e}")
        sys.exit(1)
    except OSError as e:
        console.error(f"Error: {e}")
        sys.exit(1)

    print_summary(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
