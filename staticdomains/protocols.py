"""Protocol definitions for staticdomains.

These interfaces let a hosting system swap in its own attribute scanner or
domain assignment strategy without changing the CDN facade.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Iterator
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .scanner import MatchedAttribute


@runtime_checkable
class AttributeScannerProtocol(Protocol):
    """Protocol for locating rewritable attributes in a document."""

    @abstractmethod
    def scan(self, html: str) -> Iterator[MatchedAttribute]:
        """Yield matched attributes in document order.

        Args:
            html: Document text.

        Returns:
            Iterator of non-overlapping matches.
        """
        ...


@runtime_checkable
class DomainAssigner(Protocol):
    """Protocol for choosing the static domain label of a URL.

    Implementations may keep state (e.g. a round-robin position) and are
    called exactly once per rewritten attribute.
    """

    @abstractmethod
    def get_static_domain(self, path: str) -> str:
        """Return the subdomain label for ``path``.

        Args:
            path: Resolved URL of the asset.

        Returns:
            Label placed in front of the host, e.g. ``media`` or ``2``.
        """
        ...
