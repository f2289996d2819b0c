# Tests for assembling the merged tree

import pytest

from multidoc.exceptions import StagingError
from multidoc.models import DocSource
from multidoc.staging import (
    install_assets,
    make_output_structure,
    validate_mount_paths,
)

from conftest import write_site


class TestMakeOutputStructure:
    """Test copying the upstream sites into the staging directory."""

    def test_copies_each_site_to_its_mount_path(self, tmp_path, two_sites):
        """Every source file should appear exactly once under its mount path."""
        staging = tmp_path / "staging"
        staging.mkdir()

        make_output_structure(two_sites, staging, pretty_urls=True)

        assert (staging / "a" / "index.html").exists()
        assert (staging / "a" / "guide" / "usage.html").exists()
        assert (staging / "b" / "api" / "reference.html").exists()
        assert not (staging / "a" / "api").exists()
        assert sorted(p.name for p in staging.iterdir()) == ["a", "b", "index.html"]

    def test_removes_git_directory(self, tmp_path, two_sites):
        """Version control metadata should not be copied into the merged tree."""
        staging = tmp_path / "staging"
        staging.mkdir()

        make_output_structure(two_sites, staging, pretty_urls=True)

        assert (two_sites[0].upstream / ".git").exists()
        assert not (staging / "a" / ".git").exists()

    def test_redirect_with_pretty_urls(self, tmp_path, two_sites):
        """Root index.html should redirect to the first mount path."""
        staging = tmp_path / "staging"
        staging.mkdir()

        make_output_structure(two_sites, staging, pretty_urls=True)

        redirect = (staging / "index.html").read_text()
        assert '<meta http-equiv="refresh" content="0; url=./a/"/>' in redirect

    def test_redirect_without_pretty_urls(self, tmp_path, two_sites):
        """Without pretty URLs the redirect should name index.html explicitly."""
        staging = tmp_path / "staging"
        staging.mkdir()

        make_output_structure(two_sites, staging, pretty_urls=False)

        redirect = (staging / "index.html").read_text()
        assert "url=./a/index.html" in redirect

    def test_nested_mount_path(self, tmp_path):
        """Mount paths may be nested directories."""
        site = write_site(tmp_path / "upstream", "Pkg")
        staging = tmp_path / "staging"
        staging.mkdir()

        make_output_structure([DocSource(site, "pkg/dev", "Pkg")], staging, pretty_urls=True)

        assert (staging / "pkg" / "dev" / "index.html").exists()
        assert "url=./pkg/dev/" in (staging / "index.html").read_text()

    def test_missing_upstream_raises(self, tmp_path):
        """A missing source directory is fatal."""
        staging = tmp_path / "staging"
        staging.mkdir()
        docs = [DocSource(tmp_path / "does-not-exist", "a", "A")]

        with pytest.raises(StagingError, match="not found"):
            make_output_structure(docs, staging, pretty_urls=True)


class TestValidateMountPaths:
    """Test the mount path invariants."""

    def test_duplicate_mount_paths(self, tmp_path):
        """Two sources must not copy to the same destination."""
        docs = [DocSource(tmp_path, "a", "A"), DocSource(tmp_path, "a", "Again")]
        with pytest.raises(StagingError, match="Duplicate"):
            validate_mount_paths(docs)

    def test_overlapping_mount_paths(self, tmp_path):
        """A mount path must not live inside another source's subtree."""
        docs = [DocSource(tmp_path, "a", "A"), DocSource(tmp_path, "a/b", "B")]
        with pytest.raises(StagingError, match="overlap"):
            validate_mount_paths(docs)

    def test_sibling_prefixes_are_allowed(self, tmp_path):
        """Mount paths a and ab share a prefix but not a subtree."""
        docs = [DocSource(tmp_path, "a", "A"), DocSource(tmp_path, "ab", "AB")]
        validate_mount_paths(docs)

    @pytest.mark.parametrize("path", ["", "../outside", "/abs/../x"])
    def test_invalid_mount_path(self, tmp_path, path):
        """Empty or escaping mount paths are rejected."""
        with pytest.raises(StagingError):
            validate_mount_paths([DocSource(tmp_path, path, "X")])

    def test_no_sources(self):
        """There must be a first source to redirect to."""
        with pytest.raises(StagingError):
            validate_mount_paths([])


class TestInstallAssets:
    """Test user and default asset installation."""

    def test_default_assets_installed(self, tmp_path):
        """The bundled stylesheet and injector land in assets/__default."""
        install_assets(tmp_path)

        default = tmp_path / "assets" / "__default"
        assert (default / "multidoc.css").exists()
        assert (default / "multidoc_injector.js").exists()
        assert (default / "flexsearch_integration.js").exists()

    def test_user_assets_copied(self, tmp_path):
        """A user assets directory is copied verbatim next to the defaults."""
        user_assets = tmp_path / "my-assets"
        user_assets.mkdir()
        (user_assets / "logo.png").write_bytes(b"\x89PNG")
        staging = tmp_path / "staging"
        staging.mkdir()

        install_assets(staging, user_assets)

        assert (staging / "assets" / "logo.png").read_bytes() == b"\x89PNG"
        assert (staging / "assets" / "__default" / "multidoc.css").exists()

    def test_missing_user_assets_ignored(self, tmp_path):
        """A non-existent assets directory is skipped."""
        install_assets(tmp_path, tmp_path / "nope")
        assert (tmp_path / "assets" / "__default").is_dir()
