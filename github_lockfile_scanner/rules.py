"""Parse the keywords file into vulnerability rules.

Each non-blank line is ``pkg@v1,v2,...``. The package name is everything
before the *last* ``@`` so scoped names like ``@ctrl/tinycolor@4.1.1`` keep
their leading ``@``.
"""

from collections.abc import Iterable
from pathlib import Path

from . import console
from .models import VulnerabilityRule


class RulesFileError(ValueError):
    pass


def parse_line(line: str) -> list[VulnerabilityRule]:
    """Expand one raw line into a rule per version. Blank tokens are dropped."""
    raw = line.strip()
    if not raw:
        return []
    package, sep, versions = raw.rpartition("@")
    package = package.strip()
    if not sep or not package:
        return []
    return [
        VulnerabilityRule(package=package, version=v.strip())
        for v in versions.split(",")
        if v.strip()
    ]


def parse_rules(lines: Iterable[str]) -> list[VulnerabilityRule]:
    rules = []
    for lineno, line in enumerate(lines, start=1):
        expanded = parse_line(line)
        if not expanded and line.strip():
            console.warning(f"Ignoring malformed rule on line {lineno}: {line.strip()}")
        rules.extend(expanded)
    return rules


def load_rules(path: Path) -> list[VulnerabilityRule]:
    """Read and expand a rules file.

    Raises:
        RulesFileError: the file is missing, unreadable, or yields no rules.
    """
    path = Path(path)
    if not path.is_file():
        raise RulesFileError(f"Keywords file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise RulesFileError(f"Could not read keywords file {path}: {e}") from e

    rules = parse_rules(text.splitlines())
    if not rules:
        raise RulesFileError(f"Keywords file has no rules: {path}")
    return rules
