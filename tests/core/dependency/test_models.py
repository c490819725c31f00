"""Tests for the dependency data model and its wire-format helpers."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from modresolve.core.dependency import (
    CachedDownload,
    Dependency,
    InstalledMod,
    LookupResult,
    Reference,
    Rule,
    StateSnapshot,
    rules_from_list,
)


class TestReference:
    """Tests for Reference construction and serialization."""

    def test_from_dict_reads_camel_case(self) -> None:
        ref = Reference.from_dict({
            "gameId": "skyrimse",
            "fileMD5": "abc",
            "fileSize": "1024",
            "logicalFileName": "SkyUI",
            "fileExpression": "SkyUI_*",
            "versionMatch": ">=5.0.0",
        })
        assert ref == Reference(
            game_id="skyrimse", file_md5="abc", file_size=1024,
            logical_file_name="SkyUI", file_expression="SkyUI_*",
            version_match=">=5.0.0",
        )

    def test_to_dict_omits_absent_fields(self) -> None:
        ref = Reference(logical_file_name="SkyUI", version_match="^5.0.0")
        assert ref.to_dict() == {"logicalFileName": "SkyUI", "versionMatch": "^5.0.0"}

    def test_empty_reference(self) -> None:
        assert Reference.from_dict({}) == Reference()
        assert Reference().to_dict() == {}

    def test_rejects_non_mapping(self) -> None:
        with pytest.raises(TypeError):
            Reference.from_dict(["not", "a", "mapping"])  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        ref = Reference(file_md5="abc")
        with pytest.raises(FrozenInstanceError):
            ref.file_md5 = "def"  # type: ignore[misc]

    def test_hashable(self) -> None:
        """References are usable as dictionary keys."""
        assert {Reference(file_md5="a"): 1}[Reference(file_md5="a")] == 1

    def test_describe(self) -> None:
        assert Reference(logical_file_name="SkyUI", version_match="5.2.0").describe() == "SkyUI (5.2.0)"
        assert Reference(file_expression="SkyUI_*").describe() == "SkyUI_*"
        assert Reference().describe() == "<any>"
        assert str(Reference(file_md5="abc")) == "abc"


class TestRule:
    """Tests for Rule parsing."""

    def test_requirement(self) -> None:
        rule = Rule.from_dict({"type": "requires", "reference": {"logicalFileName": "A"}})
        assert rule.is_requirement
        assert rule.reference.logical_file_name == "A"

    def test_other_types_are_not_requirements(self) -> None:
        assert not Rule(type="recommends", reference=Reference()).is_requirement

    def test_missing_type_raises(self) -> None:
        with pytest.raises(KeyError):
            Rule.from_dict({"reference": {}})

    def test_rules_from_none(self) -> None:
        assert rules_from_list(None) == ()

    def test_round_trip_document(self) -> None:
        doc = {"type": "requires", "reference": {"fileMD5": "abc"}}
        assert Rule.from_dict(doc).to_dict() == doc


class TestLookupResult:
    """Tests for lookup result parsing."""

    def test_nested_rules(self) -> None:
        result = LookupResult.from_dict({
            "key": "k1",
            "value": {
                "logicalFileName": "SkyUI",
                "fileVersion": "5.2.0",
                "fileSizeBytes": 2048,
                "rules": [{"type": "requires", "reference": {"logicalFileName": "SKSE"}}],
            },
        })
        assert result.key == "k1"
        assert result.value is not None
        assert result.value.file_size_bytes == 2048
        assert result.value.rules[0].reference.logical_file_name == "SKSE"

    def test_missing_value(self) -> None:
        assert LookupResult.from_dict({"key": "k"}).value is None


class TestLocalEntities:
    """Projection of installed mods and downloads into ModLookupInfo."""

    def test_installed_mod_projection(self) -> None:
        mod = InstalledMod(id="m", attributes={
            "fileMD5": "abc", "fileName": "A.7z", "fileSizeBytes": "12",
            "version": "1.0.0", "logicalFileName": "A",
        })
        info = mod.to_lookup_info("skyrimse")
        assert info.file_md5 == "abc"
        assert info.file_size_bytes == 12
        assert info.logical_file_name == "A"
        assert info.game_id == "skyrimse"

    def test_download_projection(self) -> None:
        download = CachedDownload(
            id="d", local_path="A-1.0.0.7z", size=12, file_md5="abc",
            mod_info={"name": "A", "version": "1.0.0"}, game="skyrimse",
        )
        info = download.to_lookup_info()
        assert info.file_name == "A-1.0.0.7z"
        assert info.file_size_bytes == 12
        assert info.version == "1.0.0"
        assert info.logical_file_name == "A"
        assert info.game_id is None


class TestStateSnapshot:
    """Tests for state snapshot parsing and access."""

    def test_from_dict(self) -> None:
        state = StateSnapshot.from_dict({
            "activeGameId": "skyrimse",
            "mods": {"skyrimse": {"a": {"attributes": {"logicalFileName": "A"}}}},
            "downloads": {"d1": {"localPath": "A.7z", "fileTime": 5}},
        })
        assert [mod.id for mod in state.installed_mods()] == ["a"]
        assert state.downloads["d1"].file_time == 5.0

    def test_no_active_game(self) -> None:
        state = StateSnapshot(mods={"x": {"a": InstalledMod(id="a")}})
        assert state.installed_mods() == []

    def test_unknown_active_game(self) -> None:
        assert StateSnapshot(active_game_id="nope").installed_mods() == []


class TestDependency:
    """Tests for the gatherer's output record."""

    def test_to_dict(self) -> None:
        dep = Dependency(
            reference=Reference(logical_file_name="A"),
            lookup_results=(LookupResult.from_dict({"key": "k", "value": {"fileVersion": "1.0.0"}}),),
        )
        doc = dep.to_dict()
        assert doc["download"] is None
        assert doc["reference"] == {"logicalFileName": "A"}
        assert doc["lookupResults"][0]["value"]["fileVersion"] == "1.0.0"

    def test_primary(self) -> None:
        assert Dependency(reference=Reference(), lookup_results=()).primary is None
