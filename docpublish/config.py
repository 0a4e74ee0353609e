"""Configuration loading for docpublish (host conf.json / conf.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

DEFAULT_TEMPLATE_DIR = Path(__file__).with_name("template")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class StaticFilesConfig:
    """User-specified static files copied next to the generated pages."""

    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    include_pattern: Optional[str] = None
    exclude_pattern: Optional[str] = None


@dataclass
class TemplateConfig:
    """Settings read from ``templates.default`` in the host configuration."""

    layout_file: Optional[str] = None
    output_source_files: bool = True
    use_longname_in_nav: bool = True
    hide_return_values: bool = False
    static_files: Optional[StaticFilesConfig] = None


@dataclass
class PublishOptions:
    """Command-line options the host passes through to the publisher."""

    destination: str = "./out/"
    encoding: str = "utf-8"
    template: Path = DEFAULT_TEMPLATE_DIR
    readme: Optional[str] = None
    mainpagetitle: Optional[str] = None
    include_private: bool = False
    verbose: bool = False
    log_file: Optional[Path] = None


@dataclass
class DocPublishConfig:
    """Represents the host configuration relevant to publishing."""

    root: Path
    options: PublishOptions = field(default_factory=PublishOptions)
    template: TemplateConfig = field(default_factory=TemplateConfig)


def load_config(config_path: Path) -> DocPublishConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_path = Path(config_path).expanduser()
    root = config_path.parent.resolve()

    if not config_path.exists():
        return DocPublishConfig(root=root)

    data = _read_config(config_path)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path.name} must contain a mapping at the root")

    templates_data = _as_dict(data.get("templates"))
    template = parse_template_config(_as_dict(templates_data.get("default")))

    opts_data = _as_dict(data.get("opts"))
    options = PublishOptions()
    if opts_data:
        destination = _as_str(opts_data.get("destination"))
        if destination:
            options.destination = destination
        encoding = _as_str(opts_data.get("encoding"))
        if encoding:
            options.encoding = encoding
        template_dir = _as_str(opts_data.get("template"))
        if template_dir:
            options.template = root / template_dir
        options.readme = _as_str(opts_data.get("readme"))
        options.mainpagetitle = _as_str(opts_data.get("mainpagetitle"))
        options.include_private = _access_includes_private(opts_data.get("access"))
        options.verbose = _as_bool(opts_data.get("verbose")) is True
        log_file = _as_str(_pick(opts_data, "logFile", "log_file"))
        if log_file:
            options.log_file = root / log_file

    return DocPublishConfig(root=root, options=options, template=template)


def parse_template_config(data: Dict[str, Any]) -> TemplateConfig:
    """Build a :class:`TemplateConfig` from a ``templates.default`` mapping."""
    config = TemplateConfig()
    if not data:
        return config

    config.layout_file = _as_str(_pick(data, "layoutFile", "layout_file"))

    # Unset keys keep their defaults; only explicit values flip them.
    output_source_files = _as_bool(_pick(data, "outputSourceFiles", "output_source_files"))
    if output_source_files is not None:
        config.output_source_files = output_source_files
    use_longname = _as_bool(_pick(data, "useLongnameInNav", "use_longname_in_nav"))
    if use_longname is not None:
        config.use_longname_in_nav = use_longname
    hide_returns = _as_bool(_pick(data, "hideReturnValues", "hide_return_values"))
    if hide_returns is not None:
        config.hide_return_values = hide_returns

    static_data = _pick(data, "staticFiles", "static_files")
    if static_data is not None:
        if not isinstance(static_data, dict):
            raise ConfigError("staticFiles must be a mapping")
        config.static_files = StaticFilesConfig(
            include=_as_str_list(static_data.get("include")),
            exclude=_as_str_list(static_data.get("exclude")),
            include_pattern=_as_str(_pick(static_data, "includePattern", "include_pattern")),
            exclude_pattern=_as_str(_pick(static_data, "excludePattern", "exclude_pattern")),
        )
    return config


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _access_includes_private(value: Any) -> bool:
    values = _as_str_list(value)
    return "private" in values or "all" in values


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
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
