"""Find content that is already present locally for a reference.

Both resolvers relax the reference first (see ``relax_reference``) and
then project their entities into ``ModLookupInfo`` so a single match
predicate serves installed mods and cached downloads alike.
"""

from __future__ import annotations

from functools import cmp_to_key

from modresolve.core.dependency.constraints import (
    coerce_version,
    compare_versions,
    relax_reference,
)
from modresolve.core.dependency.matching import matches_reference
from modresolve.core.dependency.models import (
    CachedDownload,
    InstalledMod,
    Reference,
    StateSnapshot,
)


def find_installed_mod(reference: Reference, state: StateSnapshot) -> InstalledMod | None:
    """Return the first installed mod of the active game matching *reference*.

    There is no tie-break between several matches: the first one in the
    snapshot's order wins.
    """
    relaxed = relax_reference(reference)
    game_id = state.active_game_id
    for mod in state.installed_mods():
        if matches_reference(mod.to_lookup_info(game_id), relaxed):
            return mod
    return None


def newer_sort(lhs: CachedDownload, rhs: CachedDownload) -> int:
    """Comparator ordering downloads newest first.

    Versions decide when both coerce to a semantic version, otherwise the
    completion time does.
    """
    lhs_version = coerce_version(lhs.version)
    rhs_version = coerce_version(rhs.version)
    if lhs_version is not None and rhs_version is not None:
        return compare_versions(rhs_version, lhs_version)
    if rhs.file_time > lhs.file_time:
        return 1
    if rhs.file_time < lhs.file_time:
        return -1
    return 0


def find_cached_download(reference: Reference, state: StateSnapshot) -> str | None:
    """Return the id of the newest cached download matching *reference*."""
    relaxed = relax_reference(reference)
    candidates = [
        download
        for download in state.downloads.values()
        if matches_reference(download.to_lookup_info(), relaxed)
    ]
    if not candidates:
        return None
    candidates.sort(key=cmp_to_key(newer_sort))
    return candidates[0].id
