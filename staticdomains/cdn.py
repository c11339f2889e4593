"""CDN facade for staticdomains.

Ties the pipeline together: resolve the document's base path once, scan the
HTML for asset attributes, and rewrite each one through a RewriteSession.

Usage:
    >>> cdn = CDN()
    >>> cdn.apply('<img src="logo.png">', host="www.example.com", request_path="/")
    '<img src="http://media.example.com/logo.png">'
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from .base_path import RequestContext, resolve_base_path
from .config import RewriteConfig
from .protocols import AttributeScannerProtocol, DomainAssigner
from .rewriter import RewriteSession
from .scanner import AttributeScanner, substitute

logger = logging.getLogger(__name__)


class CDN:
    """Rewrites asset URLs in HTML to static domains.

    The configuration is shared by every document this instance handles.
    Round-robin state lives in sessions: ``apply`` starts a fresh session per
    document unless one is passed in.

    Attributes:
        config: Extension table and static domain count.
    """

    def __init__(
        self,
        config: RewriteConfig | None = None,
        scanner_factory: Callable[[Iterable[str]], AttributeScannerProtocol]
        | None = None,
        assigner_factory: Callable[[RewriteConfig], DomainAssigner] | None = None,
    ):
        """Initialize the facade.

        Args:
            config: Rewrite configuration; defaults to RewriteConfig().
            scanner_factory: Builds a scanner from the current extensions.
            assigner_factory: Builds the label chooser for each new session.
                Sessions use their own extension table and cursor when unset.
        """
        self.config = config or RewriteConfig()
        self._scanner_factory = scanner_factory or AttributeScanner
        self._assigner_factory = assigner_factory

    def new_session(
        self, html: str, host: str, request_path: str = "/", scheme: str = "http"
    ) -> RewriteSession:
        """Resolve the base path of ``html`` and start a session for it."""
        base = resolve_base_path(host, request_path or "/", html, scheme=scheme)
        assigner = None
        if self._assigner_factory is not None:
            assigner = self._assigner_factory(self.config)
        return RewriteSession(self.config, base, assigner=assigner)

    def apply(
        self,
        html: str,
        host: str,
        request_path: str = "/",
        *,
        scheme: str = "http",
        session: RewriteSession | None = None,
    ) -> str:
        """Rewrite every matching asset URL in ``html``.

        Args:
            html: Document to rewrite.
            host: Host the page was requested on.
            request_path: Path of the requested page.
            scheme: Scheme of the page's domain.
            session: Session whose cursor should be continued. Its base path
                is replaced with the one resolved for this document.

        Returns:
            The document with asset URLs moved to static domains.
        """
        fresh = self.new_session(html, host, request_path, scheme)
        if session is None:
            session = fresh
        else:
            session.base = fresh.base

        # Scanner matches the extension table as of this call.
        scanner = self._scanner_factory(self.config.extensions)
        rewritten = 0

        def replace(match):
            nonlocal rewritten
            rewritten += 1
            return session.rewrite(match)

        result = substitute(html, scanner.scan(html), replace)
        logger.debug(f"Rewrote {rewritten} asset URLs for {host}{request_path}")
        return result

    def apply_request(
        self,
        html: str,
        request: RequestContext,
        session: RewriteSession | None = None,
    ) -> str:
        """Rewrite ``html`` for the given request context."""
        return self.apply(
            html,
            request.host,
            request.path,
            scheme=request.scheme,
            session=session,
        )

    __call__ = apply
