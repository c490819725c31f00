"""``modresolve check-version`` — Classify a version match string.

Shows the canonical range of a version match string and whether it is
treated as fuzzy (an unreliable label whose md5 pairing gets relaxed).

Usage::

    modresolve check-version "1.2.3"
    modresolve check-version "^1.2"
    modresolve check-version "latest"

Exit Codes:
    0 — Strict range.
    1 — Fuzzy label.
"""

from __future__ import annotations

import sys

import click

from modresolve.core.dependency import is_fuzzy_version, valid_range


@click.command("check-version")
@click.argument("version_match")
def check_version_command(version_match: str) -> None:
    """Report whether VERSION_MATCH is a strict range or a fuzzy label."""
    from modresolve.cli.output import print_version_check

    fuzzy = is_fuzzy_version(version_match)
    print_version_check(version_match, valid_range(version_match), fuzzy)
    sys.exit(1 if fuzzy else 0)
