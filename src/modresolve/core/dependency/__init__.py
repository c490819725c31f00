"""Dependency gathering for mods described by requirement rules.

Public names are re-exported here, so ``from modresolve.core.dependency
import X`` works for every building block:

- **Models**: ``Reference``, ``Rule``, ``LookupResult``, ``Dependency``,
  ``StateSnapshot`` and friends.
- **Versions**: ``is_fuzzy_version``, ``relax_reference``, ``valid_range``,
  ``satisfies``, ``coerce_version``.
- **Matching**: ``matches_reference``, ``lookup_fulfills``.
- **Local state**: ``find_installed_mod``, ``find_cached_download``.
- **Deduplication**: ``remove_duplicates``.
- **Gathering**: ``DependencyGatherer``, ``gather_dependencies``.
"""

from modresolve.core.dependency.constraints import (
    Comparator,
    SemVer,
    coerce_version,
    compare_versions,
    is_fuzzy_version,
    parse_range,
    parse_version,
    relax_reference,
    satisfies,
    valid_range,
)
from modresolve.core.dependency.context import ResolutionContext, StaticContext
from modresolve.core.dependency.dedupe import collateral_sets, remove_duplicates
from modresolve.core.dependency.gatherer import (
    DependencyGatherer,
    LookupOutcome,
    OutcomeStatus,
    gather_dependencies,
)
from modresolve.core.dependency.local_state import (
    find_cached_download,
    find_installed_mod,
    newer_sort,
)
from modresolve.core.dependency.matching import lookup_fulfills, matches_reference
from modresolve.core.dependency.models import (
    REQUIRES,
    CachedDownload,
    Dependency,
    InstalledMod,
    LookupResult,
    LookupValue,
    ModLookupInfo,
    Reference,
    Rule,
    StateSnapshot,
    rules_from_list,
)

__all__ = [
    "REQUIRES",
    "CachedDownload",
    "Comparator",
    "Dependency",
    "DependencyGatherer",
    "InstalledMod",
    "LookupOutcome",
    "LookupResult",
    "LookupValue",
    "ModLookupInfo",
    "OutcomeStatus",
    "Reference",
    "ResolutionContext",
    "Rule",
    "SemVer",
    "StateSnapshot",
    "StaticContext",
    "coerce_version",
    "collateral_sets",
    "compare_versions",
    "find_cached_download",
    "find_installed_mod",
    "gather_dependencies",
    "is_fuzzy_version",
    "lookup_fulfills",
    "matches_reference",
    "newer_sort",
    "parse_range",
    "parse_version",
    "relax_reference",
    "remove_duplicates",
    "rules_from_list",
    "satisfies",
    "valid_range",
]
