"""Resolver configuration.

Settings are read, lowest priority first, from built-in defaults, a YAML
file and ``MODRESOLVE_*`` environment variables. Without an explicit path
the YAML file is found by walking up from the working directory looking
for ``.modresolve.yaml``.

Example ``.modresolve.yaml``::

    max_depth: 16
    max_lookups: 500
    lookup_url: https://meta.example.com/api
    lookup_timeout: 10
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from modresolve.exceptions import ConfigError

CONFIG_FILENAME = ".modresolve.yaml"
ENV_PREFIX = "MODRESOLVE_"

DEFAULT_LOOKUP_TIMEOUT: float = 30.0
# must stay well below sys.getrecursionlimit()
DEFAULT_MAX_DEPTH: int = 64


@dataclass(frozen=True)
class ResolverSettings:
    """Tunables for dependency gathering and remote lookups.

    Attributes:
        max_depth: Deepest level of transitive requirements that is still
            resolved; the rules passed in are level 0. None is unbounded,
            which a cyclic rule graph turns into a RecursionError.
        max_lookups: Upper bound on remote lookups per resolution.
            None is unbounded.
        lookup_url: Base URL of the metadata lookup service.
        lookup_timeout: Request timeout in seconds for remote lookups.
    """

    max_depth: int | None = DEFAULT_MAX_DEPTH
    max_lookups: int | None = None
    lookup_url: str | None = None
    lookup_timeout: float = DEFAULT_LOOKUP_TIMEOUT

    def __post_init__(self) -> None:
        for name in ("max_depth", "max_lookups"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ConfigError(f"{name} must not be negative, got {value}")
        if self.lookup_timeout <= 0:
            raise ConfigError(f"lookup_timeout must be positive, got {self.lookup_timeout}")

    def merged(self, overrides: Mapping[str, Any]) -> ResolverSettings:
        """Return a copy with every non-None override applied."""
        return replace(self, **_coerce(overrides))


def _coerce(raw: Mapping[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(ResolverSettings)}
    values: dict[str, Any] = {}
    for key, value in raw.items():
        if key not in known:
            raise ConfigError(f"Unknown setting: {key!r}")
        if value is None:
            continue
        try:
            if key in ("max_depth", "max_lookups"):
                values[key] = int(value)
            elif key == "lookup_timeout":
                values[key] = float(value)
            else:
                values[key] = str(value)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid value for {key}: {value!r}") from exc
    return values


def find_config_file(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for ``.modresolve.yaml``."""
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        candidate = parent / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _read_file(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def _read_env(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for f in fields(ResolverSettings):
        raw = environ.get(ENV_PREFIX + f.name.upper())
        if raw:
            values[f.name] = raw
    return values


def load_settings(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    discover: bool = True,
) -> ResolverSettings:
    """Build settings from defaults, a config file and the environment.

    Args:
        path: Explicit config file. Must exist when given.
        environ: Environment mapping (default: ``os.environ``).
        discover: Search for ``.modresolve.yaml`` when *path* is None.

    Raises:
        ConfigError: On unreadable files or invalid values.
    """
    settings = ResolverSettings()
    if path is None and discover:
        path = find_config_file()
    if path is not None:
        settings = settings.merged(_read_file(path))
    return settings.merged(_read_env(os.environ if environ is None else environ))
