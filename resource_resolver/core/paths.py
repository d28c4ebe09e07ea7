"""
Path helpers shared by the resolver.
"""
from __future__ import annotations

from typing import Optional


def normalize_path(path: str) -> Optional[str]:
    """
    Resolve "." and ".." segments of an absolute path.

    Empty segments (duplicate slashes) are dropped. Returns None when a
    ".." would climb above the root.

        normalize_path("/a/./b/../c")  → "/a/c"
        normalize_path("/a/../..")     → None
    """
    parts: list[str] = []
    for part in path.split("/"):
        if part == "" or part == ".":
            continue
        elif part == "..":
            if not parts:
                return None
            parts.pop()
        else:
            parts.append(part)

    return "/" + "/".join(parts) if parts else "/"
