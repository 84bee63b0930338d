"""chmdocset configuration loader.

Priority (high → low):
  1. CLI flags           (handled at the call site, not here)
  2. Per-project chmdocset.yaml  (working directory, or --config PATH)
  3. Global ~/.chmdocset/config.yaml
  4. Hardcoded defaults

There is no environment-variable layer; the only environment input is
PATH, used to locate the extraction program.
All YAML reads use yaml.safe_load(), never yaml.load().
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from chmdocset.ingest.encoding import SNIFF_LIMIT

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".chmdocset"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "chmdocset.yaml"

# Known top-level sections; unknown keys produce a warning
_KNOWN_SECTIONS: frozenset[str] = frozenset(["bundle", "index", "extractor"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class BundleCfg:
    """Docset identity defaults (chmdocset.yaml: bundle:).

    Attributes:
        namespace: Reverse-DNS prefix of CFBundleIdentifier.
        platform: DocSetPlatformFamily used when --platform is not given.
        index_page: Landing page, relative to the Documents directory.
    """

    namespace: str = "io.ngs.documentation."
    platform: str = "unknown"
    index_page: str = "Welcome.htm"


@dataclass
class IndexCfg:
    """Indexer settings (chmdocset.yaml: index:)."""

    entry_type: str = "Guide"
    extensions: list[str] = field(default_factory=lambda: [".htm", ".html"])
    header_bytes: int = 64 * 1024


@dataclass
class ExtractorCfg:
    """External extraction program (chmdocset.yaml: extractor:).

    ``program`` overrides the platform default (extract_chmLib / hh.exe).
    """

    program: str | None = None


@dataclass
class ChmDocsetConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    bundle: BundleCfg = field(default_factory=BundleCfg)
    index: IndexCfg = field(default_factory=IndexCfg)
    extractor: ExtractorCfg = field(default_factory=ExtractorCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}'; ignored.",
                UserWarning,
                stacklevel=4,
            )


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config file '{path}' is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping at the top level.")
    return data


def _normalize_extensions(raw: Any) -> list[str]:
    if isinstance(raw, str) or not isinstance(raw, list) or not raw:
        raise ConfigError("index.extensions must be a non-empty list, e.g. ['.htm', '.html']")
    result: list[str] = []
    for ext in raw:
        ext = str(ext).strip().lower()
        if not ext:
            continue
        result.append(ext if ext.startswith(".") else f".{ext}")
    if not result:
        raise ConfigError("index.extensions must contain at least one suffix.")
    return result


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> ChmDocsetConfig:
    """Build a *ChmDocsetConfig* from a merged raw YAML dict."""
    cfg = ChmDocsetConfig()

    if "bundle" in data:
        b = data["bundle"] or {}
        cfg.bundle = BundleCfg(
            namespace=str(b.get("namespace", cfg.bundle.namespace)),
            platform=str(b.get("platform", cfg.bundle.platform)),
            index_page=str(b.get("index_page", cfg.bundle.index_page)),
        )

    if "index" in data:
        i = data["index"] or {}
        try:
            header_bytes = int(i.get("header_bytes", cfg.index.header_bytes))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"index.header_bytes must be an integer: {exc}") from exc
        if header_bytes < SNIFF_LIMIT:
            raise ConfigError(f"index.header_bytes must be at least {SNIFF_LIMIT}.")
        cfg.index = IndexCfg(
            entry_type=str(i.get("entry_type", cfg.index.entry_type)),
            extensions=(
                _normalize_extensions(i["extensions"])
                if "extensions" in i
                else cfg.index.extensions
            ),
            header_bytes=header_bytes,
        )

    if "extractor" in data:
        e = data["extractor"] or {}
        program = e.get("program")
        cfg.extractor = ExtractorCfg(program=str(program) if program else None)

    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    config_path: Path | None = None,
    global_config_path: Path | None = None,
) -> ChmDocsetConfig:
    """Load and return a merged *ChmDocsetConfig*.

    Applies layers in order: global → per-project.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *chmdocset.yaml*. Defaults to CWD.
        config_path: Explicit per-project config file (must exist).
        global_config_path: Override the global config path (for testing).

    Raises:
        ConfigError: If a config file is malformed or holds invalid values.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    # Layer 1: global config
    if global_path.exists():
        raw_global = _read_yaml(global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    # Layer 2: per-project config
    if config_path is not None:
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: '{config_path}'")
        project_cfg_path = config_path
    else:
        project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = _read_yaml(project_cfg_path)
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    return _cfg_from_dict(merged)
