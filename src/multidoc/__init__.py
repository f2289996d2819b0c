# multidoc

from .builder import make
from .exceptions import (
    ConfigError,
    MultidocError,
    NavigationMarkerMissing,
    ParseError,
    SearchIndexBuildError,
    StagingError,
)
from .models import BrandImage, DocSource, InjectionSettings, MergeResult, SearchConfig
from .search import FlexSearch, SearchEngine, Stork, get_engine, register_engine

__all__ = [
    "make",
    "DocSource",
    "BrandImage",
    "SearchConfig",
    "InjectionSettings",
    "MergeResult",
    "SearchEngine",
    "FlexSearch",
    "Stork",
    "get_engine",
    "register_engine",
    "MultidocError",
    "ConfigError",
    "StagingError",
    "ParseError",
    "NavigationMarkerMissing",
    "SearchIndexBuildError",
]
