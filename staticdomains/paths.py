"""Path normalization for staticdomains.

Collapses ``.`` and ``..`` segments of slash-delimited paths. Used both when
resolving a relative ``<base href>`` and when resolving relative asset URLs.

Functions:
    normalize_path: Canonical absolute form of a path.
"""

from __future__ import annotations


def normalize_path(path: str) -> str:
    """Collapse ``.`` and ``..`` segments into a canonical absolute path.

    Every ``..`` removes the nearest preceding segment that is still present,
    so ``a/b/../../c`` climbs two levels. A ``..`` with nothing left to remove
    is dropped, which clamps the result at the root instead of failing.
    Empty segments in the middle of the path (``a//b``) are kept.

    Args:
        path: Slash-separated path, with or without leading/trailing slashes.

    Returns:
        The normalized path, always starting and ending with ``/``.

    Examples:
        >>> normalize_path("/a/./b/../c")
        '/a/c/'

        >>> normalize_path("/../../a")
        '/a/'
    """
    survivors: list[str] = []
    for segment in path.strip("/").split("/"):
        if segment == ".":
            continue
        if segment == "..":
            if survivors:
                survivors.pop()
            continue
        survivors.append(segment)

    # Dropping a segment can leave empty ones at either end ("a//." -> "a/").
    joined = "/".join(survivors).strip("/")
    if not joined:
        return "/"
    return f"/{joined}/"
