"""modresolve CLI — Dependency gathering for installable mods.

Entry point for the ``modresolve`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve        — Gather the dependencies required by a rule list.
    check-version  — Classify a version match string as strict or fuzzy.

Usage::

    modresolve resolve rules.yaml --state state.yaml --catalog catalog.yaml
    modresolve -v resolve rules.yaml --lookup-url https://meta.example.com/api
    modresolve check-version "^1.2"
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from modresolve import __version__
from modresolve.cli.check_version_cmd import check_version_command
from modresolve.cli.resolve_cmd import resolve_command


def _configure_logging(verbose: bool) -> None:
    """Route the package's log records to stderr through Rich."""
    package_logger = logging.getLogger("modresolve")
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """modresolve: Gather the dependencies a mod needs before install.

    Follows requirement rules transitively, prefers installed mods and
    cached downloads over remote lookups, and collapses requirements
    satisfied by the same file.
    """
    _configure_logging(verbose)


# Register all subcommands
cli.add_command(resolve_command)
cli.add_command(check_version_command)
