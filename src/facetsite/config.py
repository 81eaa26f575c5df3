"""facetsite configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (FACETSITE_PATH_PREFIX, FACETSITE_OUTPUT_DIR)
  3. Per-project site.yaml
  4. Hardcoded defaults

All YAML reads use yaml.safe_load() — never yaml.load().
Content group globs must stay inside the content directory: absolute
patterns and '..' segments are rejected.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_PROJECT_CONFIG_NAME: str = "site.yaml"

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["site", "content", "output", "search"])

# Fields lunr indexes by default; "section" is a filter key, not text.
_DEFAULT_SEARCH_FIELDS: tuple[str, ...] = ("title", "content", "tags", "category", "audience")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class SiteCfg:
    """Site-level metadata (site.yaml: site:).

    Attributes:
        name: Human-readable site name.
        path_prefix: URL prefix the site is served under (e.g. "/handbook" on
            GitHub Pages). Joined onto every index record URL.
    """

    name: str = ""
    path_prefix: str = ""


@dataclass
class GroupCfg:
    """A single content group (site.yaml: content.groups[]).

    Attributes:
        id: Group identifier; becomes the ``section`` of each index record.
        glob: Pattern relative to the content directory. Defaults to
            ``<id>/**/*.md``.
    """

    id: str
    glob: str = ""

    def __post_init__(self) -> None:
        if not self.glob:
            self.glob = f"{self.id}/**/*.md"


@dataclass
class ContentCfg:
    """Content sources (site.yaml: content:)."""

    dir: str = "content"
    groups: list[GroupCfg] = field(default_factory=lambda: [GroupCfg(id="example")])


@dataclass
class OutputCfg:
    """Build output location (site.yaml: output:)."""

    dir: str = "_site"
    index: str = "search-index.json"


@dataclass
class SearchCfg:
    """Search index options (site.yaml: search:).

    Attributes:
        prebuild: Also write a serialized lunr index next to the records.
        prebuilt_index: File name of the serialized lunr index.
        fields: Record fields handed to lunr for full-text matching.
        title_boost: Boost applied to the ``title`` field.
    """

    prebuild: bool = False
    prebuilt_index: str = "search-index.lunr.json"
    fields: list[str] = field(default_factory=lambda: list(_DEFAULT_SEARCH_FIELDS))
    title_boost: int = 10


@dataclass
class FacetsiteConfig:
    """Root configuration object, built by load_config() from site.yaml."""

    site: SiteCfg = field(default_factory=SiteCfg)
    content: ContentCfg = field(default_factory=ContentCfg)
    output: OutputCfg = field(default_factory=OutputCfg)
    search: SearchCfg = field(default_factory=SearchCfg)

    def content_dir(self, project_dir: Path) -> Path:
        return project_dir / self.content.dir

    def index_path(self, project_dir: Path) -> Path:
        return project_dir / self.output.dir / self.output.index

    def prebuilt_index_path(self, project_dir: Path) -> Path:
        return project_dir / self.output.dir / self.search.prebuilt_index


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _section(data: dict[str, Any], name: str, source: Path) -> dict[str, Any]:
    raw = data.get(name)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(
            f"'{name}' in '{source}' must be a mapping, got {type(raw).__name__}.\n"
            f"  Example:\n    {name}:\n      key: value"
        )
    return raw


def _validate_glob(pattern: str, group_id: str) -> None:
    """Raise ConfigError if *pattern* could reach outside the content directory."""
    posix = PurePosixPath(pattern)
    if posix.is_absolute() or Path(pattern).is_absolute() or ".." in posix.parts:
        raise ConfigError(
            f"Content group '{group_id}' has glob '{pattern}' outside the content directory.\n"
            "  Use a relative pattern, e.g.  glob: \"guides/**/*.md\""
        )


def _parse_groups(raw_groups: Any, source: Path) -> list[GroupCfg]:
    if not isinstance(raw_groups, list):
        raise ConfigError(f"content.groups in '{source}' must be a list.")

    groups: list[GroupCfg] = []
    seen: set[str] = set()
    for entry in raw_groups:
        # Shorthand: a bare string is a group id with the default glob.
        if isinstance(entry, str):
            entry = {"id": entry}
        if not isinstance(entry, dict):
            raise ConfigError(f"content.groups entries in '{source}' must be mappings or strings.")
        group_id = str(entry.get("id") or "").strip()
        if not group_id:
            raise ConfigError(f"content.groups entry without an id in '{source}'.")
        if group_id in seen:
            raise ConfigError(f"Duplicate content group id '{group_id}' in '{source}'.")
        seen.add(group_id)
        group = GroupCfg(id=group_id, glob=str(entry.get("glob") or ""))
        _validate_glob(group.glob, group_id)
        groups.append(group)
    return groups


def _normalize_prefix(prefix: str) -> str:
    """'handbook/' → '/handbook'; '' and '/' → ''."""
    prefix = prefix.strip().strip("/")
    return f"/{prefix}" if prefix else ""


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------


def _cfg_from_dict(data: dict[str, Any], source: Path) -> FacetsiteConfig:
    """Build a *FacetsiteConfig* from a raw YAML dict."""
    cfg = FacetsiteConfig()

    if "site" in data:
        s = _section(data, "site", source)
        cfg.site = SiteCfg(
            name=str(s.get("name", cfg.site.name)),
            path_prefix=_normalize_prefix(str(s.get("path_prefix") or "")),
        )

    if "content" in data:
        c = _section(data, "content", source)
        cfg.content = ContentCfg(
            dir=str(c.get("dir", cfg.content.dir)),
            groups=_parse_groups(c["groups"], source) if "groups" in c else cfg.content.groups,
        )

    if "output" in data:
        o = _section(data, "output", source)
        cfg.output = OutputCfg(
            dir=str(o.get("dir", cfg.output.dir)),
            index=str(o.get("index", cfg.output.index)),
        )

    if "search" in data:
        se = _section(data, "search", source)
        fields = se.get("fields", cfg.search.fields)
        if not isinstance(fields, list) or not fields:
            raise ConfigError(f"search.fields in '{source}' must be a non-empty list.")
        prebuild = se.get("prebuild", cfg.search.prebuild)
        if not isinstance(prebuild, bool):
            raise ConfigError(
                f"search.prebuild in '{source}' must be true or false, got {prebuild!r}.\n"
                "  Write it unquoted:  prebuild: false"
            )
        title_boost = se.get("title_boost", cfg.search.title_boost)
        try:
            title_boost = int(title_boost)
        except (TypeError, ValueError):
            raise ConfigError(
                f"search.title_boost in '{source}' must be a whole number, got {title_boost!r}."
            ) from None
        cfg.search = SearchCfg(
            prebuild=prebuild,
            prebuilt_index=str(se.get("prebuilt_index", cfg.search.prebuilt_index)),
            fields=[str(f) for f in fields],
            title_boost=title_boost,
        )

    return cfg


def _apply_env_overrides(cfg: FacetsiteConfig) -> FacetsiteConfig:
    """Apply FACETSITE_* environment variable overrides."""
    if (prefix := os.environ.get("FACETSITE_PATH_PREFIX")) is not None:
        cfg.site.path_prefix = _normalize_prefix(prefix)
    if out_dir := os.environ.get("FACETSITE_OUTPUT_DIR"):
        cfg.output.dir = out_dir
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(project_dir: Path | None = None) -> FacetsiteConfig:
    """Load and return a merged *FacetsiteConfig*.

    Applies layers in order: defaults → site.yaml → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *site.yaml*. Defaults to CWD.

    Returns:
        *FacetsiteConfig* with env var overrides applied. A missing site.yaml
        is not an error: the defaults describe a single ``example`` group.

    Raises:
        ConfigError: If site.yaml is not valid YAML, a section has the
            wrong shape, a group id is missing
            or duplicated, or a group glob escapes the content directory.
    """
    search_dir = project_dir if project_dir is not None else Path.cwd()
    cfg_path = search_dir / _PROJECT_CONFIG_NAME

    raw: dict[str, Any] = {}
    if cfg_path.exists():
        try:
            loaded = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"'{cfg_path}' is not valid YAML: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigError(f"'{cfg_path}' must contain a mapping at the top level.")
        _warn_unknown_keys(loaded, cfg_path)
        raw = loaded

    cfg = _cfg_from_dict(raw, cfg_path)
    return _apply_env_overrides(cfg)
