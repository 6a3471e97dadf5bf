from __future__ import annotations

import argparse
import os
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .collection import PostCollection, build_collection, iter_source_dirs
from .config import cfg_bool, cfg_str, load_config
from .content import FrontMatterError, read_document
from .output import clean_output_dir, copy_assets, output_path_for, write_page
from .render import render_page
from .utils import pluralize


@dataclass
class BuildReport:
    written: int = 0
    skipped: int = 0
    failed: int = 0
    assets: int = 0


def build_file(source: Path, output_root: Optional[Path], stylesheet: str = "") -> BuildReport:
    """Render a single post. Single posts have no neighbors and need no date."""
    report = BuildReport()
    try:
        document = read_document(source, require_date=False)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Failed to read {source}: {exc}", file=sys.stderr)
        sys.exit(1)
    except FrontMatterError as exc:
        print(f"Invalid post {source}: {exc}", file=sys.stderr)
        sys.exit(1)
    dest = output_path_for(source, source, output_root)
    if write_page(dest, render_page(document, stylesheet=stylesheet)):
        report.written += 1
    else:
        report.failed += 1
    return report


def render_collection(
    collection: PostCollection, source_root: Path, output_root: Optional[Path], stylesheet: str
) -> BuildReport:
    report = BuildReport()
    for index, post in enumerate(collection):
        html_doc = render_page(post, collection.neighbors(index), stylesheet=stylesheet)
        dest = output_path_for(post.source_path, source_root, output_root)
        if write_page(dest, html_doc):
            report.written += 1
        else:
            report.failed += 1
    return report


def build_directory(
    source: Path,
    output_root: Optional[Path],
    recursive: bool = True,
    stylesheet: str = "",
    copy_static: bool = True,
) -> BuildReport:
    report = BuildReport()
    mirror = output_root is not None and output_root.resolve() != source.resolve()
    exclude = output_root if mirror else None
    source_dirs = list(iter_source_dirs(source, recursive=recursive, exclude=exclude))

    # Every collection is complete before the first page is rendered.
    collections = [build_collection(directory) for directory in source_dirs]

    for collection in collections:
        for skipped in collection.skipped:
            if skipped.io_error:
                print(f"Failed to read {skipped.path}: {skipped.reason}", file=sys.stderr)
            else:
                print(f"Skipping {skipped.path}: {skipped.reason}", file=sys.stderr)
        report.skipped += len(collection.skipped)
        result = render_collection(collection, source, output_root, stylesheet)
        report.written += result.written
        report.failed += result.failed

    if mirror and copy_static:
        for directory in source_dirs:
            report.assets += copy_assets(directory, source, output_root)
    return report


def build_site(args: argparse.Namespace) -> BuildReport:
    source = Path(args.source)
    output_root = Path(args.output) if args.output else None

    if not source.exists():
        print(f"The path specified does not exist or is not accessible: {source}", file=sys.stderr)
        sys.exit(1)

    if source.is_file():
        return build_file(source, output_root, stylesheet=args.stylesheet)
    if not source.is_dir():
        print(f"The path specified is neither a file nor a directory: {source}", file=sys.stderr)
        sys.exit(1)

    if not os.access(source, os.R_OK | os.X_OK):
        print(f"The path specified does not exist or is not accessible: {source}", file=sys.stderr)
        sys.exit(1)

    if output_root is not None and args.clean:
        clean_output_dir(output_root, source)
    return build_directory(
        source,
        output_root,
        recursive=args.recursive,
        stylesheet=args.stylesheet,
        copy_static=args.copy_assets,
    )


def main(argv: Optional[list[str]] = None) -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="site.toml",
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    config = load_config(Path(pre_args.config))

    parser = argparse.ArgumentParser(description="Render Markdown posts with front matter to chained HTML pages.")
    parser.add_argument("source", help="Markdown file or directory of posts.")
    parser.add_argument(
        "output",
        nargs="?",
        default=None,
        help="Output directory. Pages are written next to their sources when omitted.",
    )
    parser.add_argument("--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument(
        "--recursive",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool(config, "recursive"),
        help="Descend into subdirectories of a source directory.",
    )
    parser.add_argument(
        "--stylesheet",
        default=cfg_str(config, "stylesheet"),
        help="Stylesheet URL to link instead of the Tailwind CDN script.",
    )
    parser.add_argument(
        "--copy-assets",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool(config, "copy_assets"),
        help="Copy .css files into the output directory.",
    )
    parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool(config, "clean"),
        help="Remove the output directory before building.",
    )
    args = parser.parse_args(argv)
    start = time.perf_counter()
    report = build_site(args)
    elapsed = time.perf_counter() - start
    summary = f"Wrote {pluralize(report.written, 'page')}"
    if report.skipped:
        summary += f", skipped {pluralize(report.skipped, 'post')}"
    if report.failed:
        summary += f", {report.failed} failed"
    if report.assets:
        summary += f", copied {pluralize(report.assets, 'asset')}"
    print(f"{summary}.")
    print(f"Build completed in {elapsed:.2f}s.")
