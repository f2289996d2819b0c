"""Pluggable search back ends."""

from ..exceptions import ConfigError
from .base import SearchEngine
from .flexsearch import FlexSearch
from .stork import Stork

_ENGINES: dict[str, type[SearchEngine]] = {}


def register_engine(engine_cls: type[SearchEngine]) -> type[SearchEngine]:
    """Make a search back end available by name (usable as a class decorator)."""
    if not engine_cls.name:
        raise ValueError(f"{engine_cls.__name__} has no name")
    _ENGINES[engine_cls.name.lower()] = engine_cls
    return engine_cls


def get_engine(name: str, **options) -> SearchEngine:
    """
    Instantiate a registered search back end.

    Raises:
        ConfigError: If no back end is registered under name
    """
    try:
        engine_cls = _ENGINES[name.lower()]
    except KeyError:
        available = ", ".join(sorted(_ENGINES))
        raise ConfigError(f"Unknown search engine {name!r} (available: {available})") from None
    return engine_cls(**options)


register_engine(FlexSearch)
register_engine(Stork)

__all__ = [
    "SearchEngine",
    "FlexSearch",
    "Stork",
    "register_engine",
    "get_engine",
]
