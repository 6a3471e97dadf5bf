from __future__ import annotations

from typing import NamedTuple, Optional, Sequence

from .content import Document


class NeighborPair(NamedTuple):
    previous: Optional[Document] = None
    next: Optional[Document] = None


NO_NEIGHBORS = NeighborPair()


def resolve_neighbors(posts: Sequence[Document], index: int) -> NeighborPair:
    """Return the posts on either side of ``posts[index]``.

    The first post has no previous one and the last has no next one; a
    negative lookup never wraps around to the end of the sequence.
    """
    if not 0 <= index < len(posts):
        raise IndexError(f"post index out of range: {index}")
    previous = posts[index - 1] if index > 0 else None
    following = posts[index + 1] if index + 1 < len(posts) else None
    return NeighborPair(previous=previous, next=following)
