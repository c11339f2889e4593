"""Base path resolution for staticdomains.

Works out the absolute URL that relative asset references in a document are
resolved against. The default is the directory of the requested page; an
HTML ``<base href="...">`` tag inside ``<head>`` overrides it.

Key components:
- RequestContext: Host, path and scheme of the request that produced a page.
- BasePath: The resolved domain and base URL of one document.
- resolve_base_path: Computes a BasePath from request data and HTML.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .paths import normalize_path

logger = logging.getLogger(__name__)

# First <base> tag inside <head>, with an optional target attribute on
# either side of href.
_BASE_TAG_RE = re.compile(
    r"<head\b[^>]*>.*?"
    r"<base\s+(?:target=\"[^\"]*\"\s+)?href=\"(?P<href>[^\"]*)\""
    r"(?:\s+target=\"[^\"]*\")?\s*/?>"
    r".*?</head>",
    re.IGNORECASE | re.DOTALL,
)

ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)

_TRIM_CHARS = "/\\"


@dataclass(frozen=True)
class RequestContext:
    """Request data a page was rendered for.

    Attributes:
        host: Host header value, e.g. ``www.example.com``.
        path: Request path, e.g. ``/articles/42``. Query strings are ignored.
        scheme: URL scheme used for the synthesized domain.
    """

    host: str
    path: str = "/"
    scheme: str = "http"


@dataclass(frozen=True)
class BasePath:
    """Resolved base of a document.

    Attributes:
        domain: ``scheme://host`` of the page.
        base_path: Absolute URL ending in ``/`` that relative paths resolve against.
    """

    domain: str
    base_path: str


def base_directory(request_path: str) -> str:
    """Return the directory part of a request path, ending in ``/``.

    Examples:
        >>> base_directory("/articles/42")
        '/articles/'

        >>> base_directory("/articles/")
        '/articles/'
    """
    path = request_path.split("?", 1)[0].split("#", 1)[0]
    if not path:
        return "/"
    if path.endswith("/"):
        return path
    if "/" not in path:
        return "/"
    return path[: path.rindex("/") + 1]


def find_base_href(html: str) -> str | None:
    """Return the href of the first ``<base>`` tag in the document head.

    Returns None when there is no usable tag.
    """
    match = _BASE_TAG_RE.search(html)
    if match is None:
        return None
    return match.group("href")


def resolve_base_path(
    host: str, request_path: str, html: str, scheme: str = "http"
) -> BasePath:
    """Resolve the base URL that relative asset paths in ``html`` use.

    Args:
        host: Host the page was requested on.
        request_path: Path of the requested page.
        html: The document, scanned for a ``<base href>`` declaration.
        scheme: Scheme for the page's domain.

    Returns:
        BasePath with the page domain and the effective base URL.

    Examples:
        >>> resolve_base_path("www.site.com", "/blog/post", "").base_path
        'http://www.site.com/blog/'

        >>> html = '<head><base href="/assets/"/></head>'
        >>> resolve_base_path("www.site.com", "/blog/post", html).base_path
        'http://www.site.com/assets/'
    """
    domain = f"{scheme}://{host}"
    directory = base_directory(request_path)
    base = domain + directory

    declared = find_base_href(html)
    if declared is not None:
        if ABSOLUTE_URL_RE.match(declared):
            base = declared
        elif declared.startswith("/"):
            base = domain + declared
        else:
            base = domain + normalize_path(
                directory.rstrip(_TRIM_CHARS) + "/" + declared
            )
        logger.debug(f"Using <base href={declared!r}> for {domain}{request_path}")

    resolved = BasePath(domain=domain, base_path=base.rstrip(_TRIM_CHARS) + "/")
    logger.debug(f"Resolved base path {resolved.base_path}")
    return resolved
