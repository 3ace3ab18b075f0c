#!/usr/bin/env python3
"""
Project Graph CLI

Scans a source tree for import statements, resolves them to files within
the tree and reports the dependency graph, folder structure and the most
load-bearing files.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from exporters import to_ascii, to_json, to_mermaid
from scanner.errors import NoRootError, ScanCancelledError
from scanner.options import (
    ScanOptions,
    find_config_file,
    load_options,
    merge_exclude_folders,
    normalize_extensions,
)
from scanner.resolver import get_relative_path
from scanner.session import ScanSession


logger = logging.getLogger("project_graph")


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """
    Configure logging with a rich handler on stderr.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging

    Returns:
        The CLI logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_time=verbose,
        show_path=verbose,
    )
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[handler], force=True)
    logger.setLevel(level)
    return logger


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="project-graph",
        description="Map import dependencies in a source tree and rank its most critical files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  project-graph .                          # Scan current directory, text summary
  project-graph ./web -f mermaid           # Mermaid flowchart of the import graph
  project-graph . -f json -o graph.json    # JSON report to file
  project-graph . --include-ext ts tsx     # Only analyze TypeScript files
  project-graph . --exclude-dir fixtures   # Skip folders named 'fixtures'
  project-graph . --main-file src/app.ts   # Pin the entry point
        """,
    )

    # Positional arguments
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Root directory to scan (default: current directory)",
    )

    # Output options
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )

    parser.add_argument(
        "-f", "--format",
        choices=["ascii", "mermaid", "json"],
        default="ascii",
        help="Output format (default: ascii)",
    )

    # Mermaid-specific options
    parser.add_argument(
        "--orientation",
        choices=["LR", "TD", "TB", "RL", "BT"],
        default="LR",
        help="Mermaid flowchart orientation (default: LR)",
    )

    parser.add_argument(
        "--group-by-dir",
        action="store_true",
        help="Group nodes by top-level directory in Mermaid output",
    )

    parser.add_argument(
        "--show-all",
        action="store_true",
        help="Include files with no import edges in Mermaid output",
    )

    # ASCII-specific options
    parser.add_argument(
        "--ascii-style",
        choices=["tree", "ascii"],
        default="tree",
        help="ASCII output style: 'tree' (Unicode) or 'ascii' (pure ASCII)",
    )

    # Scanning options
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Settings file (YAML, TOML or JSON). Default: .project-graph.* in the root",
    )

    parser.add_argument(
        "--include-ext",
        nargs="+",
        default=None,
        help="File extensions to analyze (e.g., .ts .py)",
    )

    parser.add_argument(
        "--exclude-dir",
        nargs="+",
        default=None,
        help="Folder names to exclude, in addition to the defaults",
    )

    parser.add_argument(
        "--main-file",
        type=str,
        default=None,
        help="Root-relative path of the entry point",
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of file reader threads",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-file read timeout in seconds",
    )

    parser.add_argument(
        "--top",
        type=int,
        default=None,
        help="Number of critical files to report (default: 12)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log errors",
    )

    return parser.parse_args(args)


def build_options(parsed: argparse.Namespace, root: Path) -> ScanOptions:
    """Merge settings-file options with command line overrides."""
    config_path: Optional[Path] = Path(parsed.config) if parsed.config else find_config_file(root)
    options = load_options(config_path) if config_path is not None else ScanOptions()

    if parsed.include_ext:
        options.include_extensions = normalize_extensions(parsed.include_ext)
    if parsed.exclude_dir:
        options.exclude_folders = merge_exclude_folders(parsed.exclude_dir) | options.exclude_folders
    if parsed.main_file:
        main_file = parsed.main_file.strip()
        if Path(main_file).is_absolute():
            main_file = get_relative_path(Path(main_file).resolve(), root.resolve())
        options.main_file = main_file.replace("\\", "/")
    if parsed.workers is not None:
        options.max_workers = max(1, parsed.workers)
    if parsed.timeout is not None:
        options.read_timeout = parsed.timeout
    if parsed.top is not None:
        options.critical_limit = max(0, parsed.top)

    return options


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)
    setup_logging(verbose=parsed.verbose, quiet=parsed.quiet)

    root = Path(parsed.root)
    if not root.is_dir():
        print(f"Error: '{parsed.root}' is not a directory", file=sys.stderr)
        return 1

    options = build_options(parsed, root)
    session = ScanSession(root, options)

    try:
        report = session.run()
    except NoRootError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ScanCancelledError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 130
    except KeyboardInterrupt:
        session.cancel()
        print("Scan interrupted", file=sys.stderr)
        return 130

    # Generate output
    if parsed.format == "mermaid":
        output = to_mermaid(
            report=report,
            orientation=parsed.orientation,
            group_by_directory=parsed.group_by_dir,
            show_all=parsed.show_all,
        )
    elif parsed.format == "json":
        output = to_json(report=report)
    else:  # ascii (default)
        output = to_ascii(report=report, style=parsed.ascii_style)

    # Write output
    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output, encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
