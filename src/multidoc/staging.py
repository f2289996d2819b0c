"""Assemble the merged tree from the individual documentation sites."""

import logging
import os
import shutil
import tempfile
from pathlib import Path, PurePosixPath

from jinja2 import Environment, FileSystemLoader

from .exceptions import StagingError
from .models import ASSETS_DIR, TEMPLATES_DIR, DocSource

logger = logging.getLogger(__name__)

VCS_DIRS = (".git",)


def get_templates_env() -> Environment:
    """Get Jinja2 environment for the bundled templates."""
    return Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=True,
        keep_trailing_newline=True,
    )


def index_suffix(pretty_urls: bool) -> str:
    """Suffix appended to a directory link."""
    return "/" if pretty_urls else "/index.html"


def validate_mount_paths(docs: list[DocSource]) -> None:
    """
    Check that every mount path is usable and owns its own subtree.

    Raises:
        StagingError: If a mount path is empty, escapes the tree, or two
            sources would copy into the same or nested locations.
    """
    if not docs:
        raise StagingError("At least one documentation source is required")

    mounts = []
    for doc in docs:
        mount = PurePosixPath(doc.path)
        if not doc.path or mount.is_absolute() or ".." in mount.parts:
            raise StagingError(f"Invalid mount path {doc.path!r} for {doc.name}")
        mounts.append(mount)

    for i, mount in enumerate(mounts):
        for other in mounts[i + 1:]:
            if mount == other:
                raise StagingError(f"Duplicate mount path {str(mount)!r}")
            if mount in other.parents or other in mount.parents:
                raise StagingError(
                    f"Mount paths {str(mount)!r} and {str(other)!r} overlap"
                )


def write_redirect_page(staging_dir: Path, first: DocSource, pretty_urls: bool) -> Path:
    """Write the root index.html that redirects to the first documentation site."""
    template = get_templates_env().get_template("redirect.html")
    html = template.render(target=first.path + index_suffix(pretty_urls))
    redirect_path = staging_dir / "index.html"
    redirect_path.write_text(html, encoding="utf-8")
    return redirect_path


def make_output_structure(docs: list[DocSource], staging_dir: Path, pretty_urls: bool) -> Path:
    """
    Copy every documentation site into the staging directory.

    Args:
        docs: Sources to merge, in navigation order
        staging_dir: Fresh, empty directory that becomes the merged tree
        pretty_urls: Redirect to "<path>/" instead of "<path>/index.html"

    Returns:
        The staging directory

    Raises:
        StagingError: If a source is missing or cannot be copied
    """
    staging_dir = Path(staging_dir)
    validate_mount_paths(docs)

    for doc in docs:
        if not doc.upstream.is_dir():
            raise StagingError(f"Documentation source not found: {doc.upstream}")

        outpath = staging_dir / doc.path
        try:
            shutil.copytree(doc.upstream, outpath, symlinks=True)
            for vcs in VCS_DIRS:
                vcs_path = outpath / vcs
                if vcs_path.is_dir():
                    shutil.rmtree(vcs_path)
        except OSError as e:
            raise StagingError(f"Failed to copy {doc.upstream} to {outpath}: {e}") from e

        logger.info("Staged %s at %s", doc.name, doc.path)

    write_redirect_page(staging_dir, docs[0], pretty_urls)
    return staging_dir


def install_assets(staging_dir: Path, assets_dir: Path | None = None) -> Path:
    """
    Populate <staging>/assets with user assets and the bundled defaults.

    Returns:
        Path to the assets directory inside the staging tree
    """
    out_assets = Path(staging_dir) / "assets"
    try:
        if assets_dir is not None and Path(assets_dir).is_dir():
            shutil.copytree(assets_dir, out_assets)
        out_assets.mkdir(parents=True, exist_ok=True)
        shutil.copytree(ASSETS_DIR / "__default", out_assets / "__default")
    except OSError as e:
        raise StagingError(f"Failed to install assets: {e}") from e
    return out_assets


def publish_tree(staging_dir: Path, outdir: Path) -> Path:
    """
    Replace outdir with a copy of the finished staging tree.

    The copy is written to a sibling directory first and then renamed into
    place, so outdir holds either the previous tree or the complete new one.

    Raises:
        StagingError: If the copy or the rename fails; outdir is left as it was
    """
    outdir = Path(outdir)
    outdir.parent.mkdir(parents=True, exist_ok=True)
    workdir = Path(tempfile.mkdtemp(prefix=f".{outdir.name}-", dir=outdir.parent))
    incoming = workdir / "new"
    previous = workdir / "previous"

    try:
        shutil.copytree(staging_dir, incoming, symlinks=True)
        if outdir.exists():
            os.replace(outdir, previous)
        try:
            os.replace(incoming, outdir)
        except OSError:
            if previous.exists():
                os.replace(previous, outdir)
            raise
    except OSError as e:
        raise StagingError(f"Failed to write {outdir}: {e}") from e
    finally:
        shutil.rmtree(workdir, ignore_errors=True)

    return outdir
