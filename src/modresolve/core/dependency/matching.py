"""Reference matching against local content and remote lookup candidates.

Two predicates live here:

- ``matches_reference`` tests a ``ModLookupInfo`` (the normalised identity
  of an installed mod or a cached download) against a reference.
- ``lookup_fulfills`` tests a remote ``LookupResult`` against a raw
  reference. It never relaxes the reference and is only used to find
  redundancy between pending dependencies.

File expressions are globs matched against a file name, never a path.
"""

from __future__ import annotations

import fnmatch
import posixpath

from modresolve.core.dependency.constraints import coerce_version, satisfies, valid_range
from modresolve.core.dependency.models import LookupResult, ModLookupInfo, Reference


def _base_name(file_name: str) -> str:
    return posixpath.basename(file_name.replace("\\", "/"))


def glob_matches(file_name: str | None, expression: str) -> bool:
    """Case-sensitive glob match of *expression* against a file name."""
    if file_name is None:
        return False
    return fnmatch.fnmatchcase(file_name, expression)


def _expression_matches(file_name: str | None, expression: str) -> bool:
    if file_name is None:
        return False
    base = _base_name(file_name)
    stem = posixpath.splitext(base)[0]
    return glob_matches(base, expression) or glob_matches(stem, expression)


def _version_matches(version: str | None, version_match: str) -> bool:
    if version is None:
        return False
    if valid_range(version_match) is None:
        # free-form label, nothing to range-check against
        return version == version_match
    if satisfies(version, version_match):
        return True
    coerced = coerce_version(version)
    return coerced is not None and satisfies(str(coerced), version_match)


def matches_reference(info: ModLookupInfo, reference: Reference) -> bool:
    """Generic match predicate for installed mods and cached downloads.

    All present reference fields must match. The game id is only checked
    when the identity carries one, since downloads are not tied to a game.
    """
    if (
        reference.game_id is not None
        and info.game_id is not None
        and reference.game_id != info.game_id
    ):
        return False
    if reference.file_md5 is not None and reference.file_md5 != info.file_md5:
        return False
    if reference.file_size is not None and reference.file_size != info.file_size_bytes:
        return False
    if (
        reference.logical_file_name is not None
        and reference.logical_file_name != info.logical_file_name
    ):
        return False
    if reference.file_expression is not None and not _expression_matches(
        info.file_name, reference.file_expression
    ):
        return False
    if reference.version_match is not None and not _version_matches(
        info.version, reference.version_match
    ):
        return False
    return True


def lookup_fulfills(lookup: LookupResult, reference: Reference) -> bool:
    """Check whether a lookup candidate satisfies every field of a reference.

    A reference with no fields is fulfilled by any candidate that has a
    value. The candidate's ``file_name`` is taken to be a bare file name,
    so the glob is applied to it as is.
    """
    value = lookup.value
    if value is None:
        return False
    return (
        (reference.game_id is None or reference.game_id == value.game_id)
        and (reference.file_md5 is None or reference.file_md5 == value.file_md5)
        and (reference.file_size is None or reference.file_size == value.file_size_bytes)
        and (
            reference.logical_file_name is None
            or reference.logical_file_name == value.logical_file_name
        )
        and (
            reference.file_expression is None
            or glob_matches(value.file_name, reference.file_expression)
        )
        and (
            reference.version_match is None
            or satisfies(value.file_version, reference.version_match)
        )
    )
