"""Load merge settings from a YAML file."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .exceptions import ConfigError
from .models import BrandImage, DocSource, SearchConfig, SearchSetting
from .search import get_engine

DEFAULT_CONFIG_FILE = "multidoc.yaml"


@dataclass
class BuildConfig:
    output: Path
    docs: list[DocSource]
    assets_dir: Optional[Path] = None
    brand_image: Optional[BrandImage] = None
    stylesheets: list[str] = field(default_factory=list)
    scripts: list[str] = field(default_factory=list)
    search: SearchSetting = False
    pretty_urls: bool = True


def load_config(config_path: Path) -> dict[str, Any]:
    """
    Read the raw YAML mapping from a config file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the file is not valid YAML or not a mapping
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"{config_path} must contain a mapping")

    return config.get("multidoc", config)


def _resolve(base_dir: Path, value) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else base_dir / path


def _string_list(config: dict, key: str) -> list[str]:
    value = config.get(key) or []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list")
    return [str(v) for v in value]


def parse_search(value) -> SearchSetting:
    """
    Interpret the 'search' section.

    Accepts False/None (disabled), an engine name, or a mapping with
    'engine', 'index_versions' and engine options.
    """
    if value is None or value is False:
        return False
    if value is True:
        return SearchConfig()
    if isinstance(value, str):
        return SearchConfig(engine=get_engine(value))
    if not isinstance(value, dict):
        raise ConfigError("'search' must be false, an engine name or a mapping")

    options = dict(value)
    engine_name = options.pop("engine", "flexsearch")
    if engine_name is False:
        return False
    versions = options.pop("index_versions", ["stable"])
    return SearchConfig(index_versions=versions, engine=get_engine(str(engine_name), **options))


def parse_docs(entries, base_dir: Path) -> list[DocSource]:
    if not entries or not isinstance(entries, list):
        raise ConfigError("'docs' must be a non-empty list")

    docs = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigError(f"docs[{index}] must be a mapping")
        missing = [key for key in ("upstream", "path", "name") if not entry.get(key)]
        if missing:
            raise ConfigError(f"docs[{index}] is missing {', '.join(missing)}")
        docs.append(DocSource(
            upstream=_resolve(base_dir, entry["upstream"]),
            path=str(entry["path"]),
            name=str(entry["name"]),
        ))
    return docs


def parse_config(config: dict[str, Any], base_dir: Path) -> BuildConfig:
    """
    Turn a raw config mapping into a BuildConfig.

    Relative paths resolve against base_dir (the config file's directory).
    """
    base_dir = Path(base_dir)

    brand_image = None
    brand = config.get("brand_image")
    if brand:
        if not isinstance(brand, dict) or not brand.get("path") or not brand.get("imagepath"):
            raise ConfigError("'brand_image' needs 'path' and 'imagepath'")
        brand_image = BrandImage(path=str(brand["path"]), imagepath=str(brand["imagepath"]))

    try:
        search = parse_search(config.get("search", True))
    except TypeError as e:
        raise ConfigError(f"Invalid search options: {e}") from e

    assets_dir = config.get("assets_dir")

    return BuildConfig(
        output=_resolve(base_dir, config.get("output", "site")),
        docs=parse_docs(config.get("docs"), base_dir),
        assets_dir=_resolve(base_dir, assets_dir) if assets_dir else None,
        brand_image=brand_image,
        stylesheets=_string_list(config, "stylesheets"),
        scripts=_string_list(config, "scripts"),
        search=search,
        pretty_urls=bool(config.get("pretty_urls", True)),
    )


def read_build_config(config_path: Path) -> BuildConfig:
    """Load and parse a config file in one step."""
    config_path = Path(config_path)
    return parse_config(load_config(config_path), config_path.resolve().parent)
