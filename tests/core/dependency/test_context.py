"""Tests for StaticContext wired to real lookup backends."""

from __future__ import annotations

import asyncio

from modresolve.core.dependency import (
    Reference,
    StateSnapshot,
    StaticContext,
    gather_dependencies,
)
from modresolve.lookup import CatalogLookup


class TestStaticContext:
    def test_returns_given_state(self) -> None:
        state = StateSnapshot(active_game_id="skyrimse")
        assert StaticContext(state, CatalogLookup([])).get_state() is state

    def test_delegates_lookup(self, candidate) -> None:
        entry = candidate("A", "1.0.0")
        context = StaticContext(StateSnapshot(), CatalogLookup([entry]))
        results = asyncio.run(context.lookup_reference(Reference(logical_file_name="A")))
        assert list(results) == [entry]

    def test_gather_over_catalog(self, candidate, requirement, installed_state) -> None:
        """Catalog-backed resolution follows candidate rules and skips installed mods."""
        catalog = CatalogLookup([
            candidate("Plugin", "3.1.0", rules=[
                requirement(logical_file_name="Core Lib", version_match="^1.0.0"),
                requirement(logical_file_name="UI Pack", version_match=">=1.0.0"),
            ]),
            candidate("UI Pack", "2.0.0"),
            candidate("UI Pack", "1.0.0"),
        ])
        context = StaticContext(installed_state, catalog)

        plan = asyncio.run(gather_dependencies([requirement(logical_file_name="Plugin")], context))

        assert [dep.reference.logical_file_name for dep in plan] == ["UI Pack", "Plugin"]
        ui_pack = plan[0]
        assert ui_pack.download == "dl-new"
        assert [r.value.file_version for r in ui_pack.lookup_results] == ["2.0.0", "1.0.0"]
