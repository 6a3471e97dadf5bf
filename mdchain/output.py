from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import Optional

ASSET_SUFFIXES = {".css"}


def output_path_for(source: Path, source_root: Path, output_root: Optional[Path] = None) -> Path:
    """Map a source post to the page it renders to.

    Without an output root the page sits next to its source. With one, the
    layout below ``source_root`` is mirrored below ``output_root``.
    """
    if output_root is None:
        return source.with_suffix(".html")
    if source == source_root:
        return output_root / source.with_suffix(".html").name
    rel = source.relative_to(source_root)
    return (output_root / rel).with_suffix(".html")


def write_page(path: Path, text: str) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        print(f"Failed to write {path}: {exc}", file=sys.stderr)
        return False
    return True


def copy_assets(directory: Path, source_root: Path, output_root: Path) -> int:
    dest_dir = output_root / directory.relative_to(source_root)
    copied = 0
    try:
        items = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        print(f"Failed to list assets in {directory}: {exc}", file=sys.stderr)
        return 0
    for item in items:
        if not item.is_file() or item.suffix not in ASSET_SUFFIXES:
            continue
        dest = dest_dir / item.name
        try:
            dest_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, dest)
        except OSError as exc:
            print(f"Failed to copy {item} to {dest}: {exc}", file=sys.stderr)
            continue
        copied += 1
    return copied


def clean_output_dir(output_dir: Path, source_root: Path) -> None:
    if not output_dir.exists():
        return
    output_resolved = output_dir.resolve()
    source_resolved = source_root.resolve()
    if output_resolved == source_resolved:
        print("Refusing to clean the source directory.", file=sys.stderr)
        sys.exit(1)
    if source_resolved.is_relative_to(output_resolved):
        print("Refusing to clean an output directory that contains the sources.", file=sys.stderr)
        sys.exit(1)
    shutil.rmtree(output_dir)
