from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, NamedTuple, Optional

from .content import Document, FrontMatterError, read_document
from .neighbors import NeighborPair, resolve_neighbors

POST_SUFFIX = ".md"


class SkippedPost(NamedTuple):
    path: Path
    reason: str
    io_error: bool = False


def sort_key(document: Document) -> tuple[dt.date, str]:
    # Filename breaks ties between posts sharing a date.
    return document.metadata.date, document.source_path.name


@dataclass(frozen=True)
class PostCollection:
    """Posts of a single directory in ascending (date, filename) order."""

    directory: Path
    posts: tuple[Document, ...] = ()
    skipped: tuple[SkippedPost, ...] = ()

    def __len__(self) -> int:
        return len(self.posts)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.posts)

    def __getitem__(self, index: int) -> Document:
        return self.posts[index]

    def keys(self) -> list[tuple[dt.date, str]]:
        return [sort_key(post) for post in self.posts]

    def neighbors(self, index: int) -> NeighborPair:
        return resolve_neighbors(self.posts, index)


def list_post_files(directory: Path) -> list[Path]:
    return sorted(
        (path for path in directory.iterdir() if path.is_file() and path.suffix == POST_SUFFIX),
        key=lambda p: p.name,
    )


def build_collection(directory: Path) -> PostCollection:
    """Parse every post directly inside ``directory``.

    Posts that cannot be read or parsed are recorded in ``skipped``; they
    never abort the rest of the directory. A directory that cannot be listed
    is recorded the same way and yields an empty collection.
    """
    posts = []
    skipped = []
    try:
        post_files = list_post_files(directory)
    except OSError as exc:
        skipped.append(SkippedPost(directory, str(exc), io_error=True))
        return PostCollection(directory=directory, skipped=tuple(skipped))
    for md_file in post_files:
        try:
            posts.append(read_document(md_file, require_date=True))
        except FrontMatterError as exc:
            skipped.append(SkippedPost(md_file, str(exc)))
        except (OSError, UnicodeDecodeError) as exc:
            skipped.append(SkippedPost(md_file, str(exc), io_error=True))
    posts.sort(key=sort_key)
    return PostCollection(directory=directory, posts=tuple(posts), skipped=tuple(skipped))


def iter_source_dirs(root: Path, recursive: bool = True, exclude: Optional[Path] = None) -> Iterator[Path]:
    yield root
    if not recursive:
        return
    excluded = exclude.resolve() if exclude is not None else None
    for path in sorted(root.rglob("*"), key=lambda p: p.as_posix()):
        if not path.is_dir():
            continue
        if excluded is not None:
            resolved = path.resolve()
            if resolved == excluded or resolved.is_relative_to(excluded):
                continue
        yield path
