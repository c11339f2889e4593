"""Static domain URL rewriting.

This package rewrites asset URLs in HTML so they are served from a set of
static subdomains (e.g. ``media.example.com`` or ``1.example.com``) instead
of the page's own domain, which lets a CDN or a cookieless host pick them up
without touching any templates.

Architecture follows the same small-module layout throughout:
- paths: Path normalization (``.`` and ``..`` collapsing).
- base_path: Effective base URL of a document (request + ``<base>`` tag).
- scanner: Finds rewritable ``src``/``href`` attributes in HTML text.
- rewriter: Resolves each attribute and assigns it a static domain.
- config: Mutable rewrite configuration and YAML loading.
- cdn: The ``CDN`` facade tying the stages together.
"""

from .base_path import BasePath, RequestContext, resolve_base_path
from .cdn import CDN
from .config import InvalidConfigurationError, RewriteConfig, load_config
from .paths import normalize_path
from .rewriter import RewriteSession, RoundRobinCursor
from .scanner import AttributeScanner, MatchedAttribute

__all__ = [
    "__version__",
    "AttributeScanner",
    "BasePath",
    "CDN",
    "InvalidConfigurationError",
    "MatchedAttribute",
    "RequestContext",
    "RewriteConfig",
    "RewriteSession",
    "RoundRobinCursor",
    "load_config",
    "normalize_path",
    "resolve_base_path",
]
__version__ = "0.1.0"
