from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Optional

import yaml

DELIMITER_RE = re.compile(r"^---[ \t]*\r?$", re.MULTILINE)


class FrontMatterError(ValueError):
    """Base error for documents whose front matter cannot be used."""


class MalformedDocument(FrontMatterError):
    """The two ``---`` delimiter lines were not found."""


class InvalidMetadata(FrontMatterError):
    """The front matter block does not decode to the required fields."""


class FrontMatter(NamedTuple):
    header: str
    body: str


@dataclass(frozen=True)
class Metadata:
    title: str
    date: Optional[dt.date] = None


@dataclass(frozen=True)
class Document:
    source_path: Path
    metadata: Metadata
    body: str


def split_front_matter(text: str) -> FrontMatter:
    """Split ``text`` on its first two delimiter lines.

    Anything before the first delimiter is dropped. Only two delimiters are
    ever consumed, so later ``---`` lines (horizontal rules) stay in the body.
    """
    clean_text = text.lstrip("\ufeff")
    delimiters = []
    for match in DELIMITER_RE.finditer(clean_text):
        delimiters.append(match)
        if len(delimiters) == 2:
            break
    if len(delimiters) < 2:
        raise MalformedDocument("front matter delimiters not found")
    opening, closing = delimiters
    header = clean_text[opening.end() : closing.start()]
    body = clean_text[closing.end() :]
    return FrontMatter(header.strip(), body.strip())


def parse_date(value: object) -> dt.date:
    if not isinstance(value, str):
        raise InvalidMetadata(f"invalid date: {value!r}")
    try:
        return dt.date.fromisoformat(value.strip())
    except ValueError:
        raise InvalidMetadata(f"invalid date: {value!r}") from None


def decode_metadata(header: str, require_date: bool = True) -> Metadata:
    # BaseLoader keeps every scalar as text, so "title: 1984" or "title: No"
    # stay strings instead of resolving to int or bool.
    try:
        data = yaml.load(header, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise InvalidMetadata(f"invalid YAML front matter: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidMetadata("front matter must be a mapping")

    if "title" not in data:
        raise InvalidMetadata("missing title")
    title = data["title"]
    if not isinstance(title, str):
        raise InvalidMetadata("title must be a string")
    if not title.strip():
        raise InvalidMetadata("empty title")

    date_value = data.get("date")
    if date_value is None or date_value == "":
        if require_date:
            raise InvalidMetadata("missing date")
        return Metadata(title=title.strip())
    return Metadata(title=title.strip(), date=parse_date(date_value))


def parse_document(text: str, source_path: Path, require_date: bool = True) -> Document:
    front_matter = split_front_matter(text)
    metadata = decode_metadata(front_matter.header, require_date=require_date)
    return Document(source_path=source_path, metadata=metadata, body=front_matter.body)


def read_document(path: Path, require_date: bool = True) -> Document:
    raw_text = path.read_text(encoding="utf-8")
    return parse_document(raw_text, path, require_date=require_date)
