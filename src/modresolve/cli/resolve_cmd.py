"""``modresolve resolve`` — Gather the dependencies required by a rule list.

Loads requirement rules, an optional state snapshot and a lookup backend
(an offline catalog or the remote metadata service), then prints the
deduplicated installation plan.

Usage::

    modresolve resolve rules.yaml --state state.yaml --catalog catalog.yaml
    modresolve resolve rules.json --lookup-url https://meta.example.com/api
    modresolve resolve rules.yaml --catalog catalog.yaml --format json

Exit Codes:
    0 — Plan produced (possibly empty).
    2 — Rules, state, catalog or configuration could not be loaded.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from modresolve.config import ResolverSettings, load_settings
from modresolve.core.dependency import StateSnapshot, StaticContext, gather_dependencies
from modresolve.exceptions import ConfigError, ModResolveError
from modresolve.lookup import CatalogLookup, HttpLookup, ReferenceLookup
from modresolve.state import load_rules, load_state


def _build_lookup(catalog: str | None, settings: ResolverSettings) -> ReferenceLookup:
    """Pick the lookup backend: a catalog file wins over the service URL.

    Raises:
        ConfigError: If neither a catalog nor a lookup URL is configured.
    """
    if catalog is not None:
        return CatalogLookup.from_file(Path(catalog))
    if settings.lookup_url:
        return HttpLookup(settings.lookup_url, timeout=settings.lookup_timeout)
    raise ConfigError(
        "No lookup backend: pass --catalog or --lookup-url "
        "(or set lookup_url in .modresolve.yaml)"
    )


@click.command("resolve")
@click.argument("rules_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--state", "state_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="State snapshot with installed mods and downloads.",
)
@click.option(
    "--catalog",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Offline catalog of lookup results.",
)
@click.option("--lookup-url", default=None, help="Base URL of the metadata service.")
@click.option(
    "--config", "config_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Config file (default: nearest .modresolve.yaml).",
)
@click.option("--max-depth", type=click.IntRange(min=0), default=None,
              help="Deepest level of transitive requirements to resolve.")
@click.option("--max-lookups", type=click.IntRange(min=0), default=None,
              help="Maximum number of remote lookups.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def resolve_command(
    rules_file: str,
    state_file: str | None,
    catalog: str | None,
    lookup_url: str | None,
    config_file: str | None,
    max_depth: int | None,
    max_lookups: int | None,
    output_format: str,
) -> None:
    """Resolve the dependencies required by the rules in RULES_FILE.

    Requirements already satisfied by installed mods are skipped, cached
    downloads are reused where possible, and redundant entries are
    collapsed.
    """
    try:
        settings = load_settings(Path(config_file) if config_file else None)
        settings = settings.merged({
            "max_depth": max_depth,
            "max_lookups": max_lookups,
            "lookup_url": lookup_url,
        })
        rules = load_rules(Path(rules_file))
        state = load_state(Path(state_file)) if state_file else StateSnapshot()
        lookup = _build_lookup(catalog, settings)
    except ModResolveError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    context = StaticContext(state, lookup)
    plan = asyncio.run(gather_dependencies(rules, context, settings))

    if output_format == "json":
        from modresolve.cli.output import print_json
        print_json([dep.to_dict() for dep in plan])
    else:
        from modresolve.cli.output import print_dependency_plan
        print_dependency_plan(plan)
    sys.exit(0)
