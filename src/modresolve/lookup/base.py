"""Abstract base class for reference lookup backends.

A backend answers "which files match this reference?" with an ordered list
of ``LookupResult`` candidates, best candidate first. Backends raise
``LookupServiceError`` when the lookup itself fails; an empty list means
nothing matched.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from modresolve.core.dependency.models import LookupResult, Reference
from modresolve.exceptions import LookupServiceError


class ReferenceLookup(ABC):
    """Source of lookup candidates for references."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable backend name (e.g. 'catalog')."""

    @abstractmethod
    async def lookup_reference(self, reference: Reference) -> list[LookupResult]:
        """Return the candidates for *reference*, best first.

        Raises:
            LookupServiceError: If the backend cannot answer.
        """


def results_from_payload(payload: Any) -> list[LookupResult]:
    """Parse a decoded lookup response into ``LookupResult`` objects.

    Accepts either a bare JSON list or a mapping with a ``results`` list.

    Raises:
        LookupServiceError: If the payload does not have that shape.
    """
    if isinstance(payload, dict):
        payload = payload.get("results", [])
    if not isinstance(payload, list):
        raise LookupServiceError(
            f"Unexpected lookup payload of type {type(payload).__name__}"
        )
    try:
        return [LookupResult.from_dict(item) for item in payload]
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise LookupServiceError(f"Malformed lookup result: {exc}") from exc
