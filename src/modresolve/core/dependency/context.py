"""What the gatherer needs from its surroundings.

A resolution context hands out one state snapshot per resolution and
performs remote reference lookups. ``StaticContext`` pairs a fixed
snapshot with any ``ReferenceLookup`` backend.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence

from modresolve.core.dependency.models import LookupResult, Reference, StateSnapshot

if TYPE_CHECKING:
    from modresolve.lookup.base import ReferenceLookup


class ResolutionContext(Protocol):
    """Collaborator interface consumed by ``DependencyGatherer``."""

    def get_state(self) -> StateSnapshot:
        """Snapshot of installed mods and cached downloads."""
        ...

    async def lookup_reference(self, reference: Reference) -> Sequence[LookupResult]:
        """Query the metadata service for candidates matching *reference*."""
        ...


class StaticContext:
    """Context over a fixed state snapshot and a lookup backend."""

    def __init__(self, state: StateSnapshot, lookup: ReferenceLookup) -> None:
        self._state = state
        self._lookup = lookup

    def get_state(self) -> StateSnapshot:
        return self._state

    async def lookup_reference(self, reference: Reference) -> Sequence[LookupResult]:
        return await self._lookup.lookup_reference(reference)
