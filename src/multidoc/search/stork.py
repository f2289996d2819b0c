"""Search backed by a Stork index built with the external `stork` binary."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING

from bs4.element import Tag

from ..dom import new_tag
from ..exceptions import SearchIndexBuildError
from ..staging import get_templates_env
from .base import SearchEngine, iter_version_pages, page_title, parse_page

if TYPE_CHECKING:
    from ..models import DocSource, SearchConfig

logger = logging.getLogger(__name__)

STORK_SCRIPT = "https://files.stork-search.net/releases/v1.6.0/stork.js"
STORK_STYLESHEET = "https://files.stork-search.net/releases/v1.6.0/basic.css"
INTEGRATION_SCRIPT = "assets/__default/stork_integration.js"
INDEX_NAME = "multidoc"
INDEX_FILE = "stork.st"
CONFIG_FILE = "stork.config.toml"
HTML_SELECTOR = "article"


class Stork(SearchEngine):
    """
    Stork search back end.

    Args:
        executable: Name or path of the stork binary
        timeout: Seconds to wait for the indexer
    """

    name = "stork"

    def __init__(self, executable: str = "stork", timeout: float | None = None):
        self.executable = executable
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"Stork(executable={self.executable!r})"

    def inject_scripts(self, scripts: list[str]) -> None:
        scripts.insert(0, INTEGRATION_SCRIPT)
        scripts.insert(0, STORK_SCRIPT)

    def inject_styles(self, stylesheets: list[str]) -> None:
        stylesheets.append(STORK_STYLESHEET)

    def inject_html(self, navitems: Tag) -> None:
        div = new_tag("div", {"class": ["search", "nav-item"]})
        div.append(new_tag("input", {
            "id": "search-input",
            "class": ["stork-input"],
            "data-stork": INDEX_NAME,
            "placeholder": "Search...",
        }))
        div.append(new_tag("div", {"class": ["stork-output"], "data-stork": f"{INDEX_NAME}-output"}))
        navitems.append(div)

    def collect_files(self, root: Path, config: SearchConfig) -> list[dict]:
        """List every page to index, once, in stable order."""
        files = {}
        for version in config.index_versions:
            for path, relative in iter_version_pages(root, version):
                if str(relative) in files:
                    continue
                title = page_title(parse_page(path), relative.stem)
                files[str(relative)] = {"path": str(relative), "url": str(relative), "title": title}
        return list(files.values())

    def write_config(self, root: Path, config: SearchConfig) -> Path:
        template = get_templates_env().get_template(CONFIG_FILE)
        config_path = Path(root) / CONFIG_FILE
        config_path.write_text(
            template.render(
                base_directory=str(root),
                html_selector=HTML_SELECTOR,
                files=self.collect_files(root, config),
            ),
            encoding="utf-8",
        )
        return config_path

    def build_search_index(self, root: Path, docs: list[DocSource], config: SearchConfig) -> list[Path]:
        root = Path(root)
        executable = shutil.which(self.executable)
        if executable is None:
            raise SearchIndexBuildError(f"Stork executable not found: {self.executable}")

        try:
            config_path = self.write_config(root, config)
        except OSError as e:
            raise SearchIndexBuildError(f"Failed to write Stork config: {e}") from e

        try:
            subprocess.run(
                [executable, "build", "--input", str(config_path), "--output", str(root / INDEX_FILE)],
                check=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            raise SearchIndexBuildError(
                f"stork exited with status {e.returncode}: {(e.stderr or '').strip()}"
            ) from e
        except (OSError, subprocess.TimeoutExpired) as e:
            raise SearchIndexBuildError(f"Failed to run stork: {e}") from e
        finally:
            config_path.unlink(missing_ok=True)

        logger.info("Built Stork index %s", root / INDEX_FILE)
        return [Path(INDEX_FILE)]
