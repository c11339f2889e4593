"""Attribute scanning for staticdomains.

Locates ``src="..."`` and ``href="..."`` attributes whose value ends in one
of the configured file extensions, and splices replacement text back into
the document. Scanning is a pure stage: it never changes the HTML and can be
restarted by calling ``scan`` again.

Key components:
- MatchedAttribute: One attribute occurrence and its span in the source.
- AttributeScanner: Yields MatchedAttribute objects in document order.
- substitute: Rebuilds a document with replaced spans.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class MatchedAttribute:
    """An asset attribute found in a document.

    Attributes:
        attribute_name: ``src`` or ``href``, in the case it was written.
        raw_value: Attribute value as written in the document.
        start: Offset of the attribute name in the source text.
        end: Offset just past the closing quote.
    """

    attribute_name: str
    raw_value: str
    start: int
    end: int


def build_pattern(extensions: Iterable[str]) -> re.Pattern | None:
    """Compile the attribute pattern for a set of extensions.

    Args:
        extensions: File extensions without the leading dot.

    Returns:
        Compiled pattern, or None when there are no extensions to match.
    """
    alternatives = "|".join(re.escape(ext) for ext in extensions if ext)
    if not alternatives:
        return None
    return re.compile(
        rf'(?P<attr>src|href)="(?P<value>[^"]+?\.(?:{alternatives}))"',
        re.IGNORECASE | re.DOTALL,
    )


class AttributeScanner:
    """Finds rewritable asset attributes in HTML text.

    The pattern is compiled from the extensions given at construction, so a
    scanner reflects the extension table at the time it was built.

    Attributes:
        extensions: Extensions this scanner matches.
    """

    def __init__(self, extensions: Iterable[str]):
        self.extensions = list(extensions)
        self._pattern = build_pattern(self.extensions)

    def scan(self, html: str) -> Iterator[MatchedAttribute]:
        """Yield every matching attribute in document order."""
        if self._pattern is None:
            return
        for match in self._pattern.finditer(html):
            yield MatchedAttribute(
                attribute_name=match.group("attr"),
                raw_value=match.group("value"),
                start=match.start(),
                end=match.end(),
            )

    __call__ = scan


def substitute(
    html: str,
    matches: Iterable[MatchedAttribute],
    replace: Callable[[MatchedAttribute], str],
) -> str:
    """Replace each matched span of ``html`` with ``replace(match)``.

    ``replace`` is called once per match, in the order the matches are
    given, which must be document order. Text outside the spans is kept.

    Args:
        html: Source document.
        matches: Non-overlapping matches in document order.
        replace: Produces the replacement text for one match.

    Returns:
        The rebuilt document.
    """
    parts: list[str] = []
    position = 0
    for match in matches:
        parts.append(html[position : match.start])
        parts.append(replace(match))
        position = match.end
    parts.append(html[position:])
    return "".join(parts)
