"""Data model for dependency gathering: references, rules, lookups, state.

Every entity here is an immutable snapshot. References and rules arrive
from mod metadata or from the lookup service, installed mods and cached
downloads come from a ``StateSnapshot`` captured once per resolution, and
``Dependency`` records are the gatherer's output.

Wire format
-----------
Mod metadata uses camelCase keys (``fileMD5``, ``logicalFileName``, ...).
The ``from_dict`` / ``to_dict`` helpers translate between those documents
and the snake_case attributes used in Python.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping

REQUIRES = "requires"

# attribute name -> wire key
_REFERENCE_KEYS: dict[str, str] = {
    "game_id": "gameId",
    "file_md5": "fileMD5",
    "file_size": "fileSize",
    "logical_file_name": "logicalFileName",
    "file_expression": "fileExpression",
    "version_match": "versionMatch",
}


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    return int(value)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


# ---------------------------------------------------------------------------
# Reference & Rule
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Reference:
    """A match query identifying a desired mod.

    A reference is not an identity: every field is optional and the fields
    that are present are ANDed together. An absent field imposes no
    constraint.

    Attributes:
        game_id: Game the mod belongs to.
        file_md5: Content hash of the archive.
        file_size: Archive size in bytes.
        logical_file_name: Exact logical name of the file.
        file_expression: Glob matched against a file name (never a path).
        version_match: Semantic version range, or a free-form label.
    """

    game_id: str | None = None
    file_md5: str | None = None
    file_size: int | None = None
    logical_file_name: str | None = None
    file_expression: str | None = None
    version_match: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Reference:
        """Build a reference from a camelCase wire document."""
        if not isinstance(data, Mapping):
            raise TypeError(f"reference must be a mapping, got {type(data).__name__}")
        return cls(
            game_id=_optional_str(data.get("gameId")),
            file_md5=_optional_str(data.get("fileMD5")),
            file_size=_optional_int(data.get("fileSize")),
            logical_file_name=_optional_str(data.get("logicalFileName")),
            file_expression=_optional_str(data.get("fileExpression")),
            version_match=_optional_str(data.get("versionMatch")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a camelCase document, omitting absent fields."""
        return {
            wire: getattr(self, attr)
            for attr, wire in _REFERENCE_KEYS.items()
            if getattr(self, attr) is not None
        }

    def without_md5(self) -> Reference:
        return replace(self, file_md5=None)

    def describe(self) -> str:
        """Short human-readable label, used in log messages."""
        name = self.logical_file_name or self.file_expression or self.file_md5
        if name is None:
            return "<any>"
        if self.version_match:
            return f"{name} ({self.version_match})"
        return name

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class Rule:
    """A typed edge between mods; only ``requires`` rules are resolved."""

    type: str
    reference: Reference

    @property
    def is_requirement(self) -> bool:
        return self.type == REQUIRES

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Rule:
        return cls(
            type=str(data["type"]),
            reference=Reference.from_dict(data.get("reference") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "reference": self.reference.to_dict()}


def rules_from_list(items: Any) -> tuple[Rule, ...]:
    """Parse a list of rule documents; ``None`` yields no rules."""
    if items is None:
        return ()
    return tuple(Rule.from_dict(item) for item in items)


# ---------------------------------------------------------------------------
# Remote lookup results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LookupValue:
    """Metadata the lookup service reports for one candidate file."""

    game_id: str | None = None
    file_md5: str | None = None
    file_size_bytes: int | None = None
    logical_file_name: str | None = None
    file_name: str | None = None
    file_version: str | None = None
    source_uri: str | None = None
    rules: tuple[Rule, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LookupValue:
        return cls(
            game_id=_optional_str(data.get("gameId")),
            file_md5=_optional_str(data.get("fileMD5")),
            file_size_bytes=_optional_int(data.get("fileSizeBytes")),
            logical_file_name=_optional_str(data.get("logicalFileName")),
            file_name=_optional_str(data.get("fileName")),
            file_version=_optional_str(data.get("fileVersion")),
            source_uri=_optional_str(data.get("sourceURI")),
            rules=rules_from_list(data.get("rules")),
        )

    def to_dict(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "gameId": self.game_id,
            "fileMD5": self.file_md5,
            "fileSizeBytes": self.file_size_bytes,
            "logicalFileName": self.logical_file_name,
            "fileName": self.file_name,
            "fileVersion": self.file_version,
            "sourceURI": self.source_uri,
        }
        doc = {key: value for key, value in doc.items() if value is not None}
        doc["rules"] = [rule.to_dict() for rule in self.rules]
        return doc


@dataclass(frozen=True)
class LookupResult:
    """One candidate row returned by the metadata lookup service."""

    key: str = ""
    value: LookupValue | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LookupResult:
        raw_value = data.get("value")
        return cls(
            key=str(data.get("key", "")),
            value=LookupValue.from_dict(raw_value) if raw_value is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "value": self.value.to_dict() if self.value is not None else None,
        }


# ---------------------------------------------------------------------------
# Local state: installed mods & cached downloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ModLookupInfo:
    """Normalised identity that installed mods and downloads project into.

    The match predicate only ever sees this shape, so a single matching
    algorithm serves both kinds of local content.
    """

    file_md5: str | None = None
    file_name: str | None = None
    file_size_bytes: int | None = None
    version: str | None = None
    logical_file_name: str | None = None
    game_id: str | None = None


@dataclass(frozen=True)
class InstalledMod:
    """A mod currently installed for a game.

    Attributes:
        id: Mod identifier, unique per game.
        state: Installation state as reported by the store.
        installation_path: Folder name the mod was deployed into.
        attributes: Free-form metadata (``fileMD5``, ``fileName``,
            ``fileSizeBytes``, ``version``, ``logicalFileName``, ...).
    """

    id: str
    state: str = "installed"
    installation_path: str = ""
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, mod_id: str, data: Mapping[str, Any]) -> InstalledMod:
        return cls(
            id=str(data.get("id", mod_id)),
            state=str(data.get("state", "installed")),
            installation_path=str(data.get("installationPath", "")),
            attributes=dict(data.get("attributes") or {}),
        )

    def to_lookup_info(self, game_id: str | None = None) -> ModLookupInfo:
        attrs = self.attributes
        return ModLookupInfo(
            file_md5=_optional_str(attrs.get("fileMD5")),
            file_name=_optional_str(attrs.get("fileName")),
            file_size_bytes=_optional_int(attrs.get("fileSizeBytes")),
            version=_optional_str(attrs.get("version")),
            logical_file_name=_optional_str(attrs.get("logicalFileName")),
            game_id=game_id,
        )


@dataclass(frozen=True)
class CachedDownload:
    """An archive that was downloaded earlier and is still on disk.

    Attributes:
        id: Download identifier.
        local_path: File name of the archive inside the download folder.
        size: Archive size in bytes.
        file_md5: Content hash, if computed.
        file_time: Completion timestamp (higher is newer).
        mod_info: Metadata attached to the download (``version``, ``name``).
        game: Game the download was made for.
    """

    id: str
    local_path: str | None = None
    size: int | None = None
    file_md5: str | None = None
    file_time: float = 0.0
    mod_info: Mapping[str, Any] = field(default_factory=dict)
    game: str | None = None

    @classmethod
    def from_dict(cls, download_id: str, data: Mapping[str, Any]) -> CachedDownload:
        return cls(
            id=download_id,
            local_path=_optional_str(data.get("localPath")),
            size=_optional_int(data.get("size")),
            file_md5=_optional_str(data.get("fileMD5")),
            file_time=float(data.get("fileTime") or 0.0),
            mod_info=dict(data.get("modInfo") or {}),
            game=_optional_str(data.get("game")),
        )

    @property
    def version(self) -> str | None:
        return _optional_str(self.mod_info.get("version"))

    def to_lookup_info(self) -> ModLookupInfo:
        # the game is deliberately not part of a download's identity
        return ModLookupInfo(
            file_md5=self.file_md5,
            file_name=self.local_path,
            file_size_bytes=self.size,
            version=self.version,
            logical_file_name=_optional_str(self.mod_info.get("name")),
        )


@dataclass(frozen=True)
class StateSnapshot:
    """Read-only view of application state used for one resolution.

    Attributes:
        active_game_id: Game whose installed mods are considered.
        mods: Installed mods keyed by game id, then mod id.
        downloads: Cached downloads keyed by download id.
    """

    active_game_id: str | None = None
    mods: Mapping[str, Mapping[str, InstalledMod]] = field(default_factory=dict)
    downloads: Mapping[str, CachedDownload] = field(default_factory=dict)

    def installed_mods(self) -> list[InstalledMod]:
        """Installed mods of the active game, in insertion order."""
        if self.active_game_id is None:
            return []
        return list(self.mods.get(self.active_game_id, {}).values())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StateSnapshot:
        mods = {
            str(game): {
                str(mod_id): InstalledMod.from_dict(str(mod_id), mod)
                for mod_id, mod in (game_mods or {}).items()
            }
            for game, game_mods in (data.get("mods") or {}).items()
        }
        downloads = {
            str(dl_id): CachedDownload.from_dict(str(dl_id), download)
            for dl_id, download in (data.get("downloads") or {}).items()
        }
        return cls(
            active_game_id=_optional_str(data.get("activeGameId")),
            mods=mods,
            downloads=downloads,
        )


# ---------------------------------------------------------------------------
# Dependency: the gatherer's output unit
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Dependency:
    """A resolved unit of work for the installer.

    If ``download`` is set the installer reuses that local archive,
    otherwise it downloads ``lookup_results[0]``. ``lookup_results`` is
    never empty when ``download`` is unset.
    """

    reference: Reference
    lookup_results: tuple[LookupResult, ...]
    download: str | None = None

    @property
    def primary(self) -> LookupResult | None:
        return self.lookup_results[0] if self.lookup_results else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "download": self.download,
            "reference": self.reference.to_dict(),
            "lookupResults": [result.to_dict() for result in self.lookup_results],
        }
