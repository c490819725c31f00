"""Shared fixtures for modresolve tests."""

from __future__ import annotations

from typing import Any, Callable, Sequence

import pytest

from modresolve.core.dependency import (
    CachedDownload,
    InstalledMod,
    LookupResult,
    LookupValue,
    Reference,
    Rule,
    StateSnapshot,
)


class RecordingContext:
    """Resolution context over a fixed snapshot and a reference->results map.

    Records every lookup; references mapped to an exception raise it.
    """

    def __init__(
        self,
        state: StateSnapshot | None = None,
        responses: dict[Reference, Any] | None = None,
    ) -> None:
        self.state = state or StateSnapshot(active_game_id="game")
        self.responses = responses or {}
        self.lookups: list[Reference] = []

    def get_state(self) -> StateSnapshot:
        return self.state

    async def lookup_reference(self, reference: Reference) -> Sequence[LookupResult]:
        self.lookups.append(reference)
        response = self.responses.get(reference, [])
        if isinstance(response, Exception):
            raise response
        return response


def make_candidate(
    logical_file_name: str,
    version: str = "1.0.0",
    rules: Sequence[Rule] = (),
    **kwargs: Any,
) -> LookupResult:
    """Build a lookup result whose value describes one file."""
    file_name = kwargs.pop("file_name", f"{logical_file_name}-{version}.7z")
    value = LookupValue(
        logical_file_name=logical_file_name,
        file_version=version,
        file_name=file_name,
        rules=tuple(rules),
        **kwargs,
    )
    return LookupResult(key=f"{logical_file_name}@{version}", value=value)


def requires(**reference: Any) -> Rule:
    """Build a ``requires`` rule from snake_case reference fields."""
    return Rule(type="requires", reference=Reference(**reference))


@pytest.fixture
def context_factory() -> Callable[..., RecordingContext]:
    """Factory for recording resolution contexts."""
    return RecordingContext


@pytest.fixture
def candidate() -> Callable[..., LookupResult]:
    return make_candidate


@pytest.fixture
def requirement() -> Callable[..., Rule]:
    return requires


@pytest.fixture
def installed_state() -> StateSnapshot:
    """Snapshot with one installed mod ("Core Lib" 1.5.0) and two downloads."""
    return StateSnapshot(
        active_game_id="skyrimse",
        mods={
            "skyrimse": {
                "core-lib": InstalledMod(
                    id="core-lib",
                    attributes={
                        "logicalFileName": "Core Lib",
                        "version": "1.5.0",
                        "fileMD5": "md5-core",
                        "fileName": "Core Lib-1.5.0.7z",
                    },
                ),
            },
            "fallout4": {
                "f4se": InstalledMod(id="f4se", attributes={"logicalFileName": "F4SE"}),
            },
        },
        downloads={
            "dl-old": CachedDownload(
                id="dl-old",
                local_path="UI Pack-1.0.0.7z",
                file_time=100.0,
                mod_info={"name": "UI Pack", "version": "1.0.0"},
            ),
            "dl-new": CachedDownload(
                id="dl-new",
                local_path="UI Pack-2.0.0.7z",
                file_time=50.0,
                mod_info={"name": "UI Pack", "version": "2.0.0"},
            ),
        },
    )
