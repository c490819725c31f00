"""Offline lookup backend over a fixed catalog of lookup results.

Useful for resolving against a mirror of the metadata service, and for
tests. A version label that is not a valid range cannot be range-checked,
so it does not filter candidates; exact label matches are ranked first
instead.

Usage::

    lookup = CatalogLookup.from_file(Path("catalog.yaml"))
    candidates = await lookup.lookup_reference(reference)
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Iterable

from modresolve.core.dependency.constraints import SemVer, coerce_version, valid_range
from modresolve.core.dependency.matching import lookup_fulfills
from modresolve.core.dependency.models import LookupResult, Reference
from modresolve.lookup.base import ReferenceLookup
from modresolve.state import load_catalog

_NO_VERSION = SemVer(-1, 0, 0)


class CatalogLookup(ReferenceLookup):
    """Answer lookups from an in-memory list of candidates."""

    def __init__(self, entries: Iterable[LookupResult]) -> None:
        self._entries = [entry for entry in entries if entry.value is not None]

    @classmethod
    def from_file(cls, path: Path) -> CatalogLookup:
        return cls(load_catalog(path))

    @property
    def name(self) -> str:
        return "catalog"

    def __len__(self) -> int:
        return len(self._entries)

    async def lookup_reference(self, reference: Reference) -> list[LookupResult]:
        """Return matching entries, newest version first."""
        label = reference.version_match
        query = reference
        if label is not None and valid_range(label) is None:
            query = replace(reference, version_match=None)

        matches = [entry for entry in self._entries if lookup_fulfills(entry, query)]

        def rank(entry: LookupResult) -> tuple[bool, SemVer]:
            exact = label is not None and entry.value.file_version == label
            version = coerce_version(entry.value.file_version) or _NO_VERSION
            return (exact, version)

        return sorted(matches, key=rank, reverse=True)
