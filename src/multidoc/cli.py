"""Command-line interface for multidoc."""

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from .builder import make
from .config import DEFAULT_CONFIG_FILE, BuildConfig, read_build_config
from .exceptions import MultidocError
from .models import search_enabled
from .staging import validate_mount_paths


def is_github_actions() -> bool:
    """Check if running in GitHub Actions."""
    return os.environ.get("GITHUB_ACTIONS") == "true"


def gh_group_start(name: str) -> None:
    """Start a collapsible group in GitHub Actions logs."""
    if is_github_actions():
        print(f"::group::{name}")
    else:
        print(f"\n{'='*60}")
        print(f"  {name}")
        print(f"{'='*60}")


def gh_group_end() -> None:
    """End a collapsible group in GitHub Actions logs."""
    if is_github_actions():
        print("::endgroup::")


def gh_warning(message: str) -> None:
    """Print a warning annotation in GitHub Actions."""
    if is_github_actions():
        print(f"::warning::{message}")
    else:
        print(f"WARNING: {message}")


def gh_error(message: str) -> None:
    """Print an error annotation in GitHub Actions."""
    if is_github_actions():
        print(f"::error::{message}")
    else:
        print(f"ERROR: {message}", file=sys.stderr)


def format_duration(seconds: float) -> str:
    """Format duration in human-readable format."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.0f}s"


def print_configuration(config: BuildConfig) -> None:
    print(f"Output directory: {config.output}")
    print(f"Pretty URLs: {config.pretty_urls}")
    if config.assets_dir:
        print(f"Assets directory: {config.assets_dir}")
    if search_enabled(config.search):
        versions = ", ".join(config.search.index_versions)
        print(f"Search: {config.search.engine.name} (versions: {versions})")
    else:
        print("Search: disabled")
    print("Documentation sources:")
    for doc in config.docs:
        print(f"  {doc.path}: {doc.name} <- {doc.upstream}")


def cmd_build(args) -> int:
    """Run the build command."""
    verbose = args.verbose or is_github_actions()
    config = read_build_config(args.config)
    if args.output:
        config.output = args.output
    if args.no_search:
        config.search = False

    gh_group_start("Build Configuration")
    print(f"Config file: {args.config}")
    print_configuration(config)
    gh_group_end()

    def on_page(path: Path):
        print(f"  [INJECT] {path.as_posix()}")

    def on_warning(path: Path, message: str):
        gh_warning(message)

    start_time = time.time()
    if verbose:
        gh_group_start("Injecting Pages")
    result = make(
        config.output,
        config.docs,
        assets_dir=config.assets_dir,
        brand_image=config.brand_image,
        custom_stylesheets=config.stylesheets,
        custom_scripts=config.scripts,
        search_engine=config.search,
        prettyurls=config.pretty_urls,
        on_page=on_page if verbose else None,
        on_warning=on_warning,
    )
    if verbose:
        gh_group_end()
    total_duration = time.time() - start_time

    gh_group_start("Build Summary")
    print(f"Pages injected: {result.pages}")
    print(f"Warnings: {len(result.warnings)}")
    if result.search_index:
        print("Search index:")
        for artifact in result.search_index:
            print(f"  {artifact.as_posix()}")
    print(f"Output: {result.outdir}")
    print(f"\nTotal duration: {format_duration(total_duration)}")
    gh_group_end()

    return 0


def cmd_check(args) -> int:
    """Validate the configuration without building."""
    config = read_build_config(args.config)

    gh_group_start("Configuration Check")
    print_configuration(config)
    validate_mount_paths(config.docs)

    problems = 0
    for doc in config.docs:
        if not doc.upstream.is_dir():
            gh_error(f"Documentation source not found: {doc.upstream}")
            problems += 1
        elif not (doc.upstream / "index.html").exists():
            gh_warning(f"{doc.upstream} has no index.html")
    if config.assets_dir and not config.assets_dir.is_dir():
        gh_warning(f"Assets directory not found: {config.assets_dir}")
    gh_group_end()

    if problems:
        print(f"\n{problems} problem(s) found")
        return 1
    print("\nConfiguration OK")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="multidoc",
        description="Merge pre-built documentation sites into one site with global navigation and search",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    build_parser_ = subparsers.add_parser(
        "build",
        help="Merge the configured sites into the output directory",
    )
    build_parser_.add_argument(
        "--config",
        type=Path,
        default=Path(DEFAULT_CONFIG_FILE),
        help=f"Path to config file (default: ./{DEFAULT_CONFIG_FILE})",
    )
    build_parser_.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Output directory (overrides the config file)",
    )
    build_parser_.add_argument(
        "--no-search",
        action="store_true",
        help="Disable the global search bar and index",
    )
    build_parser_.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging (logs each page)",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Validate the config file and documentation sources",
    )
    check_parser.add_argument(
        "--config",
        type=Path,
        default=Path(DEFAULT_CONFIG_FILE),
        help=f"Path to config file (default: ./{DEFAULT_CONFIG_FILE})",
    )
    check_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 2

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {
        "build": cmd_build,
        "check": cmd_check,
    }

    try:
        return commands[args.command](args)
    except (MultidocError, FileNotFoundError) as e:
        gh_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
