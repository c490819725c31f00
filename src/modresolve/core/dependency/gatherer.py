"""Recursive gathering of the dependencies a mod needs before install.

For every ``requires`` rule, in order:

1. If an installed mod already satisfies the reference, skip the rule.
2. Otherwise look the reference up remotely. On success, gather the
   dependencies of the first candidate's own rules (depth first), then
   add a ``Dependency`` for the rule itself, reusing the newest matching
   cached download if there is one.
3. A lookup that finds nothing or fails is logged and the rule
   contributes nothing; resolution carries on with the next rule.

Each level's result is passed through ``remove_duplicates``.

Requirements are processed strictly one after the other so log output is
deterministic and identical sibling references are never in flight at
the same time. The only suspension point is the lookup call.

Rule graphs come from the lookup service and may contain cycles, which
are not detected. ``ResolverSettings.max_depth`` and ``max_lookups`` bound
the traversal. ``max_depth`` defaults to ``DEFAULT_MAX_DEPTH`` so a cycle
ends in a logged warning; ``max_lookups`` defaults to unbounded.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterable

from modresolve.config import ResolverSettings
from modresolve.core.dependency.context import ResolutionContext
from modresolve.core.dependency.dedupe import remove_duplicates
from modresolve.core.dependency.local_state import find_cached_download, find_installed_mod
from modresolve.core.dependency.models import (
    Dependency,
    LookupResult,
    Reference,
    Rule,
    StateSnapshot,
)
from modresolve.exceptions import ReferenceNotFoundError

logger = logging.getLogger(__name__)


class OutcomeStatus(enum.Enum):
    """How a single remote lookup turned out."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    LOOKUP_ERROR = "lookup_error"


@dataclass(frozen=True)
class LookupOutcome:
    """Tagged result of one lookup.

    Attributes:
        status: Which of the three outcomes occurred.
        results: Candidates returned by the lookup (FOUND, possibly NOT_FOUND).
        error: What went wrong, for NOT_FOUND and LOOKUP_ERROR.
    """

    status: OutcomeStatus
    results: tuple[LookupResult, ...] = ()
    error: Exception | None = None

    @property
    def found(self) -> bool:
        return self.status is OutcomeStatus.FOUND


class DependencyGatherer:
    """Resolve requirement rules into an installation plan.

    Args:
        context: Supplies the state snapshot and remote lookups.
        settings: Traversal bounds. Defaults to ``ResolverSettings()``.

    Example::

        gatherer = DependencyGatherer(StaticContext(state, CatalogLookup(entries)))
        plan = asyncio.run(gatherer.gather(rules))
    """

    def __init__(
        self,
        context: ResolutionContext,
        settings: ResolverSettings | None = None,
    ) -> None:
        self._context = context
        self._settings = settings or ResolverSettings()
        self._lookup_count = 0

    @property
    def lookup_count(self) -> int:
        """Remote lookups issued by the most recent ``gather`` call."""
        return self._lookup_count

    async def gather(self, rules: Iterable[Rule] | None) -> list[Dependency]:
        """Gather the dependencies for *rules*.

        Never raises for lookup failures; the result is a best-effort and
        possibly empty list.
        """
        self._lookup_count = 0
        state = self._context.get_state()
        return await self._gather(rules, state, depth=0)

    async def _gather(
        self,
        rules: Iterable[Rule] | None,
        state: StateSnapshot,
        depth: int,
    ) -> list[Dependency]:
        requirements = [rule for rule in (rules or ()) if rule.is_requirement]

        total: list[Dependency] = []
        for rule in requirements:
            total.extend(await self._resolve_requirement(rule.reference, state, depth))
        return remove_duplicates(total)

    async def _resolve_requirement(
        self,
        reference: Reference,
        state: StateSnapshot,
        depth: int,
    ) -> list[Dependency]:
        if find_installed_mod(reference, state) is not None:
            logger.debug("Requirement %s is already installed", reference)
            return []

        if not self._within_limits(reference, depth):
            return []

        outcome = await self._lookup(reference)
        if not outcome.found:
            logger.error("Failed to look up %s: %s", reference, outcome.error)
            return []

        primary = outcome.results[0].value
        nested = await self._gather(primary.rules, state, depth + 1)
        logger.debug("Resolved %s (%d nested dependencies)", reference, len(nested))
        return nested + [
            Dependency(
                reference=reference,
                lookup_results=outcome.results,
                download=find_cached_download(reference, state),
            )
        ]

    def _within_limits(self, reference: Reference, depth: int) -> bool:
        max_depth = self._settings.max_depth
        if max_depth is not None and depth > max_depth:
            logger.warning(
                "Not resolving %s: depth %d exceeds max_depth %d",
                reference, depth, max_depth,
            )
            return False
        max_lookups = self._settings.max_lookups
        if max_lookups is not None and self._lookup_count >= max_lookups:
            logger.warning(
                "Not resolving %s: lookup limit of %d reached", reference, max_lookups
            )
            return False
        return True

    async def _lookup(self, reference: Reference) -> LookupOutcome:
        self._lookup_count += 1
        try:
            results = tuple(await self._context.lookup_reference(reference))
        except Exception as exc:
            return LookupOutcome(OutcomeStatus.LOOKUP_ERROR, error=exc)

        if not results or results[0].value is None:
            return LookupOutcome(
                OutcomeStatus.NOT_FOUND, results, error=ReferenceNotFoundError(reference)
            )
        return LookupOutcome(OutcomeStatus.FOUND, results)


async def gather_dependencies(
    rules: Iterable[Rule] | None,
    context: ResolutionContext,
    settings: ResolverSettings | None = None,
) -> list[Dependency]:
    """Convenience wrapper around ``DependencyGatherer.gather``."""
    return await DependencyGatherer(context, settings).gather(rules)
