"""Semantic versions, version ranges, and fuzzy version classification.

Mod metadata expresses version requirements as npm-style ranges:
primitive comparators (``>=1.2.3``), caret (``^1.2``), tilde (``~1.2.3``),
x-ranges (``1.x``, ``*``), hyphen ranges (``1.0.0 - 2.0.0``) and unions
joined by ``||``. Ranges are desugared into sets of primitive comparators;
the canonical string form of those sets is what ``valid_range`` returns.

Many version fields in the wild are free text ("v1.2", "latest", a
description) rather than ranges. ``is_fuzzy_version`` separates those from
trustworthy ranges, and ``relax_reference`` drops a hash constraint that is
paired with such an untrustworthy label.

References
----------
.. [SemVer] Preston-Werner, T. (2013). "Semantic Versioning 2.0.0."
   https://semver.org/
.. [npm-semver] npm. "node-semver range grammar."
   https://github.com/npm/node-semver#ranges
"""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from functools import total_ordering

from modresolve.core.dependency.models import Reference


# ---------------------------------------------------------------------------
# SemVer: a parsed version
# ---------------------------------------------------------------------------

_IDENT = r"[0-9A-Za-z\-]+(?:\.[0-9A-Za-z\-]+)*"

_SEMVER_RE = re.compile(
    r"^v?(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    rf"(?:-(?P<pre>{_IDENT}))?"
    rf"(?:\+(?P<build>{_IDENT}))?$"
)

_COERCE_RE = re.compile(r"(?:^|[^\d])(\d{1,16})(?:\.(\d{1,16}))?(?:\.(\d{1,16}))?(?:$|[^\d])")


def _identifier_key(ident: str) -> tuple[int, int, str]:
    # numeric identifiers sort before alphanumeric ones
    if ident.isdigit():
        return (0, int(ident), "")
    return (1, 0, ident)


@total_ordering
@dataclass(frozen=True)
class SemVer:
    """A semantic version; build metadata is not retained.

    Ordering follows SemVer 2.0.0 precedence (section 11): a pre-release
    version has lower precedence than the associated normal version.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()

    @property
    def release(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def _key(self) -> tuple:
        if not self.prerelease:
            return (self.release, 1, ())
        return (self.release, 0, tuple(_identifier_key(p) for p in self.prerelease))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemVer):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        return text


def parse_version(version: str) -> SemVer:
    """Parse a strict semantic version string.

    A leading ``v`` is tolerated and build metadata is discarded.

    Raises:
        ValueError: If the string is not a semantic version.
    """
    m = _SEMVER_RE.match(version.strip())
    if not m:
        raise ValueError(f"Invalid semantic version: {version!r}")
    pre = m.group("pre")
    return SemVer(
        int(m.group("major")),
        int(m.group("minor")),
        int(m.group("patch")),
        tuple(pre.split(".")) if pre else (),
    )


def coerce_version(text: str | None) -> SemVer | None:
    """Extract the first ``major[.minor[.patch]]`` run from free text.

    ``"v2"`` becomes ``2.0.0`` and ``"Release 1.4 final"`` becomes
    ``1.4.0``. Returns None when the text contains no digits at all.
    """
    if text is None:
        return None
    m = _COERCE_RE.search(str(text))
    if m is None:
        return None
    return SemVer(int(m.group(1)), int(m.group(2) or 0), int(m.group(3) or 0))


def compare_versions(lhs: SemVer, rhs: SemVer) -> int:
    """Three-way comparison: negative, zero or positive."""
    if lhs < rhs:
        return -1
    if rhs < lhs:
        return 1
    return 0


# ---------------------------------------------------------------------------
# Comparators and ranges
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Comparator:
    """A primitive comparator such as ``>=1.2.3``; ``""`` means equality."""

    op: str
    version: SemVer

    def test(self, version: SemVer) -> bool:
        if self.op == "":
            return version == self.version
        if self.op == ">=":
            return version >= self.version
        if self.op == "<=":
            return version <= self.version
        if self.op == ">":
            return version > self.version
        if self.op == "<":
            return version < self.version
        raise ValueError(f"Unknown operator: {self.op!r}")  # pragma: no cover

    def __str__(self) -> str:
        return f"{self.op}{self.version}"


_ZERO = SemVer(0, 0, 0)
# matches no version at all
_NULL_COMPARATOR = Comparator("<", SemVer(0, 0, 0, ("0",)))

_XID = r"0|[1-9]\d*|[xX*]"
_PARTIAL = (
    rf"v?(?P<major>{_XID})"
    rf"(?:\.(?P<minor>{_XID})"
    rf"(?:\.(?P<patch>{_XID})"
    rf"(?:-(?P<pre>{_IDENT}))?"
    rf"(?:\+{_IDENT})?)?)?"
)
_COMPARATOR_RE = re.compile(rf"^(?P<op>>=|<=|>|<|=|~>|~|\^)?{_PARTIAL}$")
_PARTIAL_RE = re.compile(rf"^=?{_PARTIAL}$")
_HYPHEN_RE = re.compile(r"^(?P<lo>\S+)\s+-\s+(?P<hi>\S+)$")
_OP_GAP_RE = re.compile(r"(>=|<=|~>|>|<|=|~|\^)\s+")


@dataclass(frozen=True)
class _Partial:
    """A possibly incomplete version; None components are wildcards."""

    major: int | None
    minor: int | None
    patch: int | None
    prerelease: tuple[str, ...] = ()

    @classmethod
    def from_match(cls, m: re.Match[str]) -> _Partial:
        def num(name: str) -> int | None:
            raw = m.group(name)
            if raw is None or raw in ("x", "X", "*"):
                return None
            return int(raw)

        major = num("major")
        minor = num("minor") if major is not None else None
        patch = num("patch") if minor is not None else None
        pre = m.group("pre") if patch is not None else None
        return cls(major, minor, patch, tuple(pre.split(".")) if pre else ())

    def full(self) -> SemVer:
        return SemVer(self.major or 0, self.minor or 0, self.patch or 0, self.prerelease)


def _upper(major: int, minor: int = 0, patch: int = 0) -> Comparator:
    # exclusive upper bound that also excludes prereleases of the bound
    return Comparator("<", SemVer(major, minor, patch, ("0",)))


def _caret(p: _Partial) -> list[Comparator]:
    if p.major is None:
        return []
    if p.minor is None:
        return [Comparator(">=", SemVer(p.major, 0, 0)), _upper(p.major + 1)]
    if p.patch is None:
        lower = Comparator(">=", SemVer(p.major, p.minor, 0))
        if p.major == 0:
            return [lower, _upper(0, p.minor + 1)]
        return [lower, _upper(p.major + 1)]
    lower = Comparator(">=", p.full())
    if p.major == 0:
        if p.minor == 0:
            return [lower, _upper(0, 0, p.patch + 1)]
        return [lower, _upper(0, p.minor + 1)]
    return [lower, _upper(p.major + 1)]


def _tilde(p: _Partial) -> list[Comparator]:
    if p.major is None:
        return []
    if p.minor is None:
        return [Comparator(">=", SemVer(p.major, 0, 0)), _upper(p.major + 1)]
    if p.patch is None:
        return [Comparator(">=", SemVer(p.major, p.minor, 0)), _upper(p.major, p.minor + 1)]
    return [Comparator(">=", p.full()), _upper(p.major, p.minor + 1)]


def _xrange(op: str, p: _Partial) -> list[Comparator]:
    if op == "=":
        op = ""
    if p.major is None:
        return [_NULL_COMPARATOR] if op in (">", "<") else []
    if p.patch is not None:
        return [Comparator(op, p.full())]
    if op:
        major, minor = p.major, p.minor or 0
        if op == ">":
            op = ">="
            if p.minor is None:
                major, minor = major + 1, 0
            else:
                minor += 1
        elif op == "<=":
            op = "<"
            if p.minor is None:
                major += 1
            else:
                minor += 1
        if op == "<":
            return [Comparator("<", SemVer(major, minor, 0, ("0",)))]
        return [Comparator(op, SemVer(major, minor, 0))]
    if p.minor is None:
        return [Comparator(">=", SemVer(p.major, 0, 0)), _upper(p.major + 1)]
    return [Comparator(">=", SemVer(p.major, p.minor, 0)), _upper(p.major, p.minor + 1)]


def _hyphen(lo: _Partial, hi: _Partial) -> list[Comparator]:
    comparators: list[Comparator] = []
    if lo.major is not None:
        comparators.append(Comparator(">=", lo.full()))
    if hi.major is None:
        pass
    elif hi.minor is None:
        comparators.append(_upper(hi.major + 1))
    elif hi.patch is None:
        comparators.append(_upper(hi.major, hi.minor + 1))
    else:
        comparators.append(Comparator("<=", hi.full()))
    return comparators


def _parse_partial(text: str) -> _Partial:
    m = _PARTIAL_RE.match(text)
    if not m:
        raise ValueError(f"Invalid version in range: {text!r}")
    return _Partial.from_match(m)


def _parse_comparator(token: str) -> list[Comparator]:
    m = _COMPARATOR_RE.match(token)
    if not m:
        raise ValueError(f"Invalid comparator: {token!r}")
    op = m.group("op") or ""
    partial = _Partial.from_match(m)
    if op == "^":
        return _caret(partial)
    if op in ("~", "~>"):
        return _tilde(partial)
    return _xrange(op, partial)


def _parse_set(text: str) -> list[Comparator]:
    text = text.strip()
    hyphen = _HYPHEN_RE.match(text)
    if hyphen:
        comparators = _hyphen(
            _parse_partial(hyphen.group("lo")), _parse_partial(hyphen.group("hi"))
        )
    else:
        comparators = []
        for token in _OP_GAP_RE.sub(r"\1", text).split():
            comparators.extend(_parse_comparator(token))

    result: list[Comparator] = []
    for comp in comparators:
        if comp == _NULL_COMPARATOR:
            return [comp]
        # >=0.0.0 admits every release, same as no comparator at all
        if comp.op == ">=" and comp.version == _ZERO:
            continue
        if comp not in result:
            result.append(comp)
    return result


def parse_range(text: str) -> list[list[Comparator]]:
    """Desugar a range into a union of comparator sets.

    An empty inner list admits every release version.

    Raises:
        ValueError: If the range is malformed.
    """
    sets = [_parse_set(part) for part in text.split("||")]
    if len(sets) > 1:
        non_null = [s for s in sets if s != [_NULL_COMPARATOR]]
        sets = non_null or sets[:1]
    if any(not s for s in sets):
        return [[]]
    return sets


def valid_range(text: str | None) -> str | None:
    """Return the canonical form of a range, or None if it is invalid.

    Examples::

        valid_range("1.2.3")    == "1.2.3"
        valid_range("^1.2.3")   == ">=1.2.3 <2.0.0-0"
        valid_range("1.x")      == ">=1.0.0 <2.0.0-0"
        valid_range("")         == "*"
        valid_range("latest")   is None
    """
    if text is None:
        return None
    try:
        sets = parse_range(text)
    except ValueError:
        return None
    canonical = "||".join(" ".join(str(c) for c in comps) for comps in sets)
    return canonical or "*"


def _test_set(comparators: list[Comparator], version: SemVer) -> bool:
    if not all(comp.test(version) for comp in comparators):
        return False
    if version.prerelease:
        # a prerelease only matches when some comparator opts into
        # prereleases of the very same release tuple
        return any(
            comp.version.prerelease and comp.version.release == version.release
            for comp in comparators
        )
    return True


def satisfies(version: str | None, range_text: str) -> bool:
    """Strict range satisfaction; invalid versions or ranges never match."""
    if version is None:
        return False
    try:
        parsed = parse_version(version)
        sets = parse_range(range_text)
    except ValueError:
        return False
    return any(_test_set(comps, parsed) for comps in sets)


# ---------------------------------------------------------------------------
# Fuzzy versions & reference relaxation
# ---------------------------------------------------------------------------


def is_fuzzy_version(version_match: str | None) -> bool:
    """Decide whether a version match string is an unreliable label.

    Empty values are not fuzzy. Anything that does not start with a hex
    digit, or that does not survive range canonicalisation unchanged, is.
    """
    if not version_match:
        return False
    if version_match[0] not in string.hexdigits:
        return True
    return valid_range(version_match) != version_match


def relax_reference(reference: Reference) -> Reference:
    """Drop the md5 from a reference whose version label is fuzzy.

    A precise hash next to an untrustworthy version is usually bad
    metadata; without the hash, name/expression plus version matching
    decides instead. Only applies when the reference still has a logical
    file name or a file expression to match on.
    """
    if (
        is_fuzzy_version(reference.version_match)
        and reference.file_md5 is not None
        and (reference.logical_file_name is not None or reference.file_expression is not None)
    ):
        return reference.without_md5()
    return reference
