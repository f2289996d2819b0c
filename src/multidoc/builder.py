"""Merge documentation sites into one output directory."""

import logging
import tempfile
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from .injection import inject_styles_and_global_navigation
from .models import (
    DEFAULT_SETTINGS,
    BrandImage,
    DocSource,
    InjectionSettings,
    MergeResult,
    SearchSetting,
    resolve_search,
    search_enabled,
)
from .staging import install_assets, make_output_structure, publish_tree

logger = logging.getLogger(__name__)


def make(
    outdir: Path,
    docs: Sequence[DocSource],
    *,
    assets_dir: Optional[Path] = None,
    brand_image: Optional[BrandImage] = None,
    custom_stylesheets: Sequence[str] = (),
    custom_scripts: Sequence[str] = (),
    search_engine: Optional[SearchSetting] = True,
    prettyurls: bool = True,
    settings: InjectionSettings = DEFAULT_SETTINGS,
    on_page: Optional[Callable[[Path], None]] = None,
    on_warning: Optional[Callable[[Path, str], None]] = None,
) -> MergeResult:
    """
    Aggregate several pre-built documentation sites into outdir.

    Args:
        outdir: Output directory; replaced once the merged tree is complete
        docs: Sites to merge, in navigation order. The root index.html
            redirects to the first one.
        assets_dir: Directory copied to outdir/assets
        brand_image: Logo rendered as the leftmost navigation item
        custom_stylesheets: Stylesheets injected into every page
        custom_scripts: Scripts injected into every page
        search_engine: SearchConfig; True (the default) for SearchConfig()
            with FlexSearch indexing "stable" pages; False or None to disable
            search.
        prettyurls: Drop "index.html" suffixes from navigation links
        settings: Injection names
        on_page: Callback(relative path) after each injected page
        on_warning: Callback(relative path, message) for each page warning

    Returns:
        MergeResult describing the run

    Raises:
        StagingError: If a source cannot be staged or outdir cannot be
            replaced; outdir is left untouched
        SearchIndexBuildError: If the search index cannot be built; outdir is
            left untouched
    """
    outdir = Path(outdir)
    docs = list(docs)
    search_engine = resolve_search(search_engine)

    start_time = time.time()

    with tempfile.TemporaryDirectory(prefix="multidoc-") as tmp:
        staging_dir = Path(tmp) / "site"
        staging_dir.mkdir()

        make_output_structure(docs, staging_dir, prettyurls)
        install_assets(staging_dir, assets_dir)
        logger.info("Staged %d sites in %.2fs", len(docs), time.time() - start_time)

        inject_start = time.time()
        pages, warnings = inject_styles_and_global_navigation(
            staging_dir,
            docs,
            brand_image,
            list(custom_stylesheets),
            list(custom_scripts),
            search_engine,
            prettyurls,
            settings,
            on_page=on_page,
            on_warning=on_warning,
        )
        logger.info("Injected %d pages in %.2fs", pages, time.time() - inject_start)

        search_index = []
        if search_enabled(search_engine):
            index_start = time.time()
            search_index = search_engine.engine.build_search_index(staging_dir, docs, search_engine)
            logger.info(
                "Built %s search index in %.2fs",
                search_engine.engine.name,
                time.time() - index_start,
            )

        publish_tree(staging_dir, outdir)

    logger.info("Merged site written to %s in %.2fs", outdir, time.time() - start_time)

    return MergeResult(
        outdir=outdir,
        pages=pages,
        warnings=warnings,
        search_index=search_index,
    )
