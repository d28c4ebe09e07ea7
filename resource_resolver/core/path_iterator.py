"""
Progressive path shortening for request path resolution.

A stored resource may be addressed by a prefix of the request path, with
the rest of the URL (selectors, extension, suffix) left for downstream
processing. The iterator yields candidate resource paths, most specific
first, cutting at the last "." or "/" at each step:

    /content/page.print.a4.html/suffix
    /content/page.print.a4.html
    /content/page.print.a4
    /content/page.print
    /content/page
    /content

Trailing slashes are stripped from the start path; "/" (or an empty path, or
one made of slashes only) yields just "/". The first path segment is the shortest
candidate, so "/" is never tried for a deeper path.
"""
from __future__ import annotations

from typing import Iterator, Optional


class ResourcePathIterator:
    """
    Lazy, finite iterator over shortened candidate paths.

    Each candidate is strictly shorter than the previous one and no
    candidate repeats. Create a new instance to restart.
    """

    def __init__(self, path: Optional[str]):
        self._next_path: Optional[str] = None
        if path is None:
            return

        self._next_path = path.rstrip("/") or "/"

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        if not self._next_path:
            raise StopIteration

        result = self._next_path
        cut = max(result.rfind("."), result.rfind("/"))
        # a cut at index 0 would leave "" (or "/" for the root itself)
        self._next_path = result[:cut] if cut > 0 else None
        return result
