"""URL rewriting and static domain assignment for staticdomains.

A RewriteSession handles one document: it resolves every matched attribute
value to an absolute URL against the document's BasePath and swaps the host
prefix for a static domain. Fixed labels come from the RewriteConfig
extension table; everything else is spread over numbered domains by the
session's RoundRobinCursor.

Key components:
- RoundRobinCursor: Modular counter over ``1..max_static_domains``.
- RewriteSession: Per-document resolver and domain assigner.
- file_extension: Lowercased extension of a URL's last path component.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING
from urllib.parse import unquote

from .base_path import ABSOLUTE_URL_RE, BasePath
from .config import RewriteConfig
from .paths import normalize_path
from .scanner import MatchedAttribute

if TYPE_CHECKING:
    from .protocols import DomainAssigner

logger = logging.getLogger(__name__)

# Leading scheme and optional "www." that get replaced by the static domain label.
_HOST_PREFIX_RE = re.compile(r"^(?P<scheme>https?)://(?:www\.)?", re.IGNORECASE)

_AUTHORITY_RE = re.compile(
    r"^(?P<authority>[a-z][a-z0-9+.\-]*://[^/]*)(?P<path>.*)$", re.IGNORECASE
)


def file_extension(path: str) -> str:
    """Return the lowercased extension of the last path component.

    Examples:
        >>> file_extension("http://www.site.com/img/Photo.JPG")
        'jpg'

        >>> file_extension("http://www.site.com/dir.d/README")
        ''
    """
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    return unquote(name.rsplit(".", 1)[1]).lower()


class RoundRobinCursor:
    """Position in the cycle of numbered static domains.

    Starts at 0 and moves through ``1, 2, ..., maximum, 1, 2, ...``.

    Attributes:
        current: Last label handed out, 0 before the first one.
    """

    def __init__(self, current: int = 0):
        self.current = current

    def advance(self, maximum: int) -> int:
        """Move to the next domain number and return it."""
        self.current += 1
        if self.current > maximum:
            self.current = 1
        return self.current

    def __repr__(self) -> str:
        return f"RoundRobinCursor(current={self.current})"


class RewriteSession:
    """Rewrites the asset URLs of one document.

    The session owns its cursor and only reads the shared configuration, so
    documents processed in parallel with one RewriteConfig keep independent
    round-robin sequences. Reusing a session across documents continues the
    sequence where the previous document stopped.

    Attributes:
        config: Shared extension table and domain count.
        base: Resolved base of the current document.
        cursor: Round-robin position.
        assigner: Optional replacement for the built-in label choice.
    """

    def __init__(
        self,
        config: RewriteConfig,
        base: BasePath,
        cursor: RoundRobinCursor | None = None,
        assigner: DomainAssigner | None = None,
    ):
        self.config = config
        self.base = base
        self.cursor = cursor or RoundRobinCursor()
        self.assigner = assigner

    @property
    def scheme(self) -> str:
        """Scheme of the document's domain."""
        return self.base.domain.split("://", 1)[0]

    def resolve(self, raw_value: str) -> str:
        """Resolve an attribute value to an absolute URL.

        Absolute URLs keep their path; root-relative paths are appended to
        the page domain; everything else is resolved against the base path
        with ``.`` and ``..`` collapsed.

        Args:
            raw_value: Attribute value as written in the document.

        Returns:
            Absolute URL, before domain substitution.
        """
        if ABSOLUTE_URL_RE.match(raw_value):
            return raw_value
        if raw_value.startswith("//"):
            return f"{self.scheme}:{raw_value}"
        if raw_value.startswith("/"):
            return self.base.domain + raw_value

        match = _AUTHORITY_RE.match(self.base.base_path)
        if match is None:
            return normalize_path(self.base.base_path + raw_value).strip("/\\")
        path = normalize_path(match.group("path") + raw_value)
        return match.group("authority") + path.rstrip("/")

    def get_static_domain(self, path: str) -> str:
        """Return the static domain label for a resolved URL.

        A fixed label from the extension table wins. Otherwise the cursor
        advances and its new value is the label.
        """
        label = self.config.domain_for(file_extension(path))
        if label:
            return str(label)
        return str(self.cursor.advance(self.config.max_static_domains))

    def rewrite_url(self, raw_value: str) -> str:
        """Resolve ``raw_value`` and move it onto its static domain.

        URLs that do not start with ``http://`` or ``https://`` after
        resolution are returned as they are and use up no label.
        """
        resolved = self.resolve(raw_value)
        prefix = _HOST_PREFIX_RE.match(resolved)
        if prefix is None:
            return resolved
        assigner = self.assigner or self
        label = assigner.get_static_domain(resolved)
        scheme = prefix.group("scheme").lower()
        return f"{scheme}://{label}.{resolved[prefix.end():]}"

    def rewrite(self, match: MatchedAttribute) -> str:
        """Return the replacement ``attr="url"`` text for a matched attribute."""
        rewritten = self.rewrite_url(match.raw_value)
        logger.debug(f"{match.raw_value} -> {rewritten}")
        return f'{match.attribute_name}="{rewritten}"'

    __call__ = rewrite
