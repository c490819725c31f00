"""Reference lookup backends.

Public API::

    from modresolve.lookup import ReferenceLookup, CatalogLookup, HttpLookup
"""

from __future__ import annotations

from modresolve.lookup.base import ReferenceLookup, results_from_payload
from modresolve.lookup.catalog import CatalogLookup
from modresolve.lookup.http_lookup import HttpLookup

__all__ = [
    "CatalogLookup",
    "HttpLookup",
    "ReferenceLookup",
    "results_from_payload",
]
