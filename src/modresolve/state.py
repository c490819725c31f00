"""Loading state snapshots, rule lists and lookup catalogs from disk.

All three documents may be written as YAML or JSON; PyYAML reads both.

State file layout::

    activeGameId: skyrimse
    mods:
      skyrimse:
        skyui:
          state: installed
          attributes: {logicalFileName: SkyUI, version: 5.2.0}
    downloads:
      dl-1:
        localPath: SkyUI_5_2_SE.7z
        size: 2456123
        fileTime: 1700000000000
        modInfo: {name: SkyUI, version: 5.2.0}

Rules file: a list of rules, or a mapping with a ``rules`` list.
Catalog file: a list of lookup results, or a mapping with ``results``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from modresolve.core.dependency.models import LookupResult, Rule, StateSnapshot, rules_from_list
from modresolve.exceptions import StateError

logger = logging.getLogger(__name__)


def _read_document(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise StateError(f"Cannot read {path}: {exc}") from exc
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise StateError(f"Cannot parse {path}: {exc}") from exc


def _list_or_key(document: Any, key: str, path: Path) -> list[Any]:
    if document is None:
        return []
    if isinstance(document, dict):
        document = document.get(key) or []
    if not isinstance(document, list):
        raise StateError(f"{path}: expected a list or a mapping with {key!r}")
    return document


def load_state(path: Path) -> StateSnapshot:
    """Read a state snapshot file.

    Raises:
        StateError: If the file is unreadable or malformed.
    """
    document = _read_document(path)
    if document is None:
        return StateSnapshot()
    if not isinstance(document, dict):
        raise StateError(f"{path}: state must be a mapping")
    try:
        state = StateSnapshot.from_dict(document)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise StateError(f"{path}: invalid state document: {exc}") from exc
    logger.debug(
        "Loaded state from %s: %d installed mods, %d downloads",
        path, len(state.installed_mods()), len(state.downloads),
    )
    return state


def load_rules(path: Path) -> list[Rule]:
    """Read a rules file.

    Raises:
        StateError: If the file is unreadable or malformed.
    """
    items = _list_or_key(_read_document(path), "rules", path)
    try:
        return list(rules_from_list(items))
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise StateError(f"{path}: invalid rule: {exc}") from exc


def load_catalog(path: Path) -> list[LookupResult]:
    """Read a catalog of lookup results for offline resolution.

    Raises:
        StateError: If the file is unreadable or malformed.
    """
    items = _list_or_key(_read_document(path), "results", path)
    try:
        return [LookupResult.from_dict(item) for item in items]
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise StateError(f"{path}: invalid catalog entry: {exc}") from exc
