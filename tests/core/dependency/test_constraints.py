"""Tests for version parsing, range canonicalisation and satisfaction,
fuzzy version classification, and reference relaxation.
"""

from __future__ import annotations

import pytest

from modresolve.core.dependency import (
    Reference,
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


class TestParseVersion:
    """Tests for strict semantic version parsing."""

    def test_parse_release(self) -> None:
        assert parse_version("1.2.3") == SemVer(1, 2, 3)

    def test_parse_prerelease(self) -> None:
        assert parse_version("1.2.3-beta.1") == SemVer(1, 2, 3, ("beta", "1"))

    def test_leading_v_and_build_metadata(self) -> None:
        """A leading 'v' is accepted and build metadata is dropped."""
        assert parse_version("v1.2.3+build.5") == SemVer(1, 2, 3)

    @pytest.mark.parametrize("bad", ["1.2", "latest", "01.2.3", "1.2.3.4", ""])
    def test_invalid(self, bad: str) -> None:
        with pytest.raises(ValueError):
            parse_version(bad)

    def test_str_round_trip(self) -> None:
        assert str(parse_version("2.0.0-rc.1")) == "2.0.0-rc.1"


class TestOrdering:
    """SemVer 2.0.0 precedence rules."""

    def test_prerelease_precedence_chain(self) -> None:
        chain = [
            "1.0.0-alpha", "1.0.0-alpha.1", "1.0.0-alpha.beta",
            "1.0.0-beta", "1.0.0-beta.2", "1.0.0-beta.11", "1.0.0-rc.1", "1.0.0",
        ]
        parsed = [parse_version(v) for v in chain]
        assert parsed == sorted(parsed)

    def test_compare_versions(self) -> None:
        assert compare_versions(SemVer(1, 0, 0), SemVer(2, 0, 0)) < 0
        assert compare_versions(SemVer(2, 0, 0), SemVer(1, 9, 9)) > 0
        assert compare_versions(SemVer(1, 0, 0), SemVer(1, 0, 0)) == 0


class TestCoerceVersion:
    """Tests for extracting versions from free text."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("v2", SemVer(2, 0, 0)),
            ("Release 1.4 final", SemVer(1, 4, 0)),
            ("1.2.3", SemVer(1, 2, 3)),
            ("1.2.3.4", SemVer(1, 2, 3)),
            ("version 10.0.1-beta", SemVer(10, 0, 1)),
        ],
    )
    def test_coerce(self, text: str, expected: SemVer) -> None:
        assert coerce_version(text) == expected

    def test_no_digits(self) -> None:
        assert coerce_version("latest") is None

    def test_none(self) -> None:
        assert coerce_version(None) is None


class TestValidRange:
    """Canonical forms follow npm's range desugaring."""

    @pytest.mark.parametrize(
        ("text", "canonical"),
        [
            ("1.2.3", "1.2.3"),
            ("=1.2.3", "1.2.3"),
            ("v1.2.3", "1.2.3"),
            (">=1.0.0", ">=1.0.0"),
            (">= 1.0.0", ">=1.0.0"),
            (">=1.0.0 <2.0.0", ">=1.0.0 <2.0.0"),
            ("^1.2.3", ">=1.2.3 <2.0.0-0"),
            ("^0.2.3", ">=0.2.3 <0.3.0-0"),
            ("^0.0.3", ">=0.0.3 <0.0.4-0"),
            ("~1.2.3", ">=1.2.3 <1.3.0-0"),
            ("~1.2", ">=1.2.0 <1.3.0-0"),
            ("1.x", ">=1.0.0 <2.0.0-0"),
            ("1.2", ">=1.2.0 <1.3.0-0"),
            (">1.2", ">=1.3.0"),
            ("<=1.2", "<1.3.0-0"),
            ("<1", "<1.0.0-0"),
            ("1.0.0 - 2.0.0", ">=1.0.0 <=2.0.0"),
            ("1.0.0 - 2", ">=1.0.0 <3.0.0-0"),
            ("1.2.3 || 2.0.0", "1.2.3||2.0.0"),
            ("*", "*"),
            ("", "*"),
            (">=0.0.0", "*"),
        ],
    )
    def test_canonical(self, text: str, canonical: str) -> None:
        assert valid_range(text) == canonical

    @pytest.mark.parametrize("bad", ["latest", "a.b", "1.2.3.4", "~>>1", "v1.2 beta"])
    def test_invalid(self, bad: str) -> None:
        assert valid_range(bad) is None

    def test_none(self) -> None:
        assert valid_range(None) is None

    def test_parse_range_any(self) -> None:
        assert parse_range("*") == [[]]


class TestSatisfies:
    """Strict range satisfaction."""

    @pytest.mark.parametrize(
        ("version", "range_text", "expected"),
        [
            ("1.2.0", ">=1.0.0", True),
            ("0.9.0", ">=1.0.0", False),
            ("1.5.0", "^1.2.3", True),
            ("2.0.0", "^1.2.3", False),
            ("1.2.9", "~1.2.3", True),
            ("1.3.0", "~1.2.3", False),
            ("1.2.3", "1.2.3 || 2.0.0", True),
            ("2.0.0", "1.2.3 || 2.0.0", True),
            ("1.5.0", "1.2.3 || 2.0.0", False),
            ("5.0.0", "*", True),
            ("1.5.0", "1.0.0 - 2.0.0", True),
            ("2.0.1", "1.0.0 - 2.0.0", False),
        ],
    )
    def test_satisfies(self, version: str, range_text: str, expected: bool) -> None:
        assert satisfies(version, range_text) is expected

    def test_prerelease_excluded_by_default(self) -> None:
        """A prerelease only matches a comparator on the same release tuple."""
        assert not satisfies("1.2.4-beta", ">=1.2.3")
        assert satisfies("1.2.3-beta.2", ">=1.2.3-beta.1")
        assert not satisfies("1.0.0-beta", "*")

    def test_invalid_version_never_matches(self) -> None:
        assert not satisfies("v1", ">=0.0.1")
        assert not satisfies(None, "*")

    def test_invalid_range_never_matches(self) -> None:
        assert not satisfies("1.0.0", "latest")


class TestIsFuzzyVersion:
    """Fuzzy classification of version match strings."""

    @pytest.mark.parametrize("value", [None, "", "1.2.3", "1.2.3-beta.1", "0.1.0"])
    def test_not_fuzzy(self, value: str | None) -> None:
        assert is_fuzzy_version(value) is False

    @pytest.mark.parametrize(
        "value",
        ["latest", ">=1.0.0", "^1.2.3", "v1.2", "1.x", "1.2", "a.b", "1.2.3 || 2.0.0"],
    )
    def test_fuzzy(self, value: str) -> None:
        assert is_fuzzy_version(value) is True


class TestRelaxReference:
    """MD5 is dropped only for fuzzy versions with a name or expression."""

    def test_fuzzy_with_logical_name_drops_md5(self) -> None:
        ref = Reference(
            game_id="skyrimse", file_md5="abc", file_size=10,
            logical_file_name="Foo", version_match="latest",
        )
        relaxed = relax_reference(ref)
        assert relaxed.file_md5 is None
        assert relaxed.game_id == "skyrimse"
        assert relaxed.file_size == 10
        assert relaxed.logical_file_name == "Foo"
        assert relaxed.version_match == "latest"

    def test_fuzzy_with_expression_drops_md5(self) -> None:
        ref = Reference(file_md5="abc", file_expression="Foo-*", version_match="v2")
        assert relax_reference(ref).file_md5 is None

    def test_strict_version_unchanged(self) -> None:
        ref = Reference(file_md5="abc", logical_file_name="Foo", version_match="1.2.3")
        assert relax_reference(ref) == ref

    def test_fuzzy_without_name_or_expression_unchanged(self) -> None:
        ref = Reference(file_md5="abc", version_match="latest")
        assert relax_reference(ref) == ref

    def test_no_md5_unchanged(self) -> None:
        ref = Reference(logical_file_name="Foo", version_match="latest")
        assert relax_reference(ref) == ref

    def test_input_not_mutated(self) -> None:
        ref = Reference(file_md5="abc", logical_file_name="Foo", version_match="latest")
        relax_reference(ref)
        assert ref.file_md5 == "abc"
