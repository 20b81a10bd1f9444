"""Configuration loading for provlint (.provlint.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".provlint.yml"

DEFAULT_DOC_EXTENSIONS = (".md", ".markdown", ".html.md", ".html.markdown")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ConventionConfig:
    """Names of the declarations provlint looks for in provider source."""

    registration_file: str = "provider.go"
    registration_function: str = "Provider"
    resources_field: str = "ResourcesMap"
    datasources_field: str = "DataSourcesMap"
    schema_field: str = "Schema"
    resource_package: str = "schema"
    resource_type: str = "Resource"
    description_field: str = "Description"
    conflicts_field: str = "ConflictsWith"
    elem_field: str = "Elem"
    source_suffix: str = ".go"
    test_suffix: str = "_test.go"


@dataclass
class DocsConfig:
    """Documentation corpus settings."""

    marker: str = "sidebar_current"
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_DOC_EXTENSIONS))
    markup: str = "`{name}`"


@dataclass
class RulesConfig:
    """Rule enablement and parameters."""

    enabled: List[str] = field(default_factory=list)
    reserved_names: List[str] = field(default_factory=lambda: ["id"])


@dataclass
class AuditConfig:
    """Settings for one audit run."""

    provider_name: str
    provider_path: Path
    docs_path: Optional[Path] = None
    verbose: bool = False
    strict_catalog: bool = False
    exclude_paths: List[str] = field(default_factory=list)
    conventions: ConventionConfig = field(default_factory=ConventionConfig)
    docs: DocsConfig = field(default_factory=DocsConfig)
    rules: RulesConfig = field(default_factory=RulesConfig)

    @property
    def docs_root(self) -> Path:
        if self.docs_path is not None:
            return self.docs_path
        return (self.provider_path / ".." / "website").resolve()

    @property
    def registration_path(self) -> Path:
        return self.provider_path / self.conventions.registration_file


def load_config(
    provider_name: str,
    provider_path: Path,
    *,
    config_path: Optional[Path] = None,
    verbose: bool = False,
) -> AuditConfig:
    """Build the run configuration, reading ``.provlint.yml`` when present."""
    provider_path = provider_path.expanduser().resolve()
    config_file = (config_path or provider_path / CONFIG_FILENAME).expanduser()
    config = AuditConfig(
        provider_name=provider_name, provider_path=provider_path, verbose=verbose
    )

    if config_path is not None and not config_file.exists():
        raise ConfigError(f"Configuration file not found: {config_file}")
    if not config_file.exists():
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    docs_path = _as_str(data.get("docs_path"))
    if docs_path:
        config.docs_path = (config_file.parent / docs_path).resolve()
    config.strict_catalog = _as_bool(data.get("strict_catalog")) or False
    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    conventions = _as_dict(data.get("conventions"))
    for name in ConventionConfig.__dataclass_fields__:
        value = _as_str(conventions.get(name))
        if value:
            setattr(config.conventions, name, value)

    docs_data = _as_dict(data.get("docs"))
    if docs_data:
        marker = _as_str(docs_data.get("marker"))
        if marker:
            config.docs.marker = marker
        extensions = _as_str_list(docs_data.get("extensions"))
        if extensions:
            config.docs.extensions = extensions
        markup = _as_str(docs_data.get("markup"))
        if markup:
            if "{name}" not in markup:
                raise ConfigError("docs.markup must contain a {name} placeholder")
            config.docs.markup = markup

    rules_data = _as_dict(data.get("rules"))
    if rules_data:
        config.rules.enabled = _as_str_list(rules_data.get("enabled"))
        if "reserved_names" in rules_data:
            config.rules.reserved_names = _as_str_list(rules_data.get("reserved_names"))

    return config


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "AuditConfig",
    "ConfigError",
    "ConventionConfig",
    "DocsConfig",
    "RulesConfig",
    "load_config",
]
