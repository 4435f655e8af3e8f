"""
Shareable links for tag searches.

Expressions travel in the ``expr`` query parameter as their canonical text,
next to an optional free-text query (``q``) and saved-search id
(``collection``). Decoding parses the text again; nothing but the canonical
string is ever embedded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import parse_qsl, quote, unquote, urlencode, urlsplit

from .exceptions import ExpressionSyntaxError
from .expression import Expression
from .parser import parse
from .serializer import to_string

logger = logging.getLogger(__name__)

# Same unreserved set as JavaScript's encodeURIComponent.
_URL_SAFE = "!~*'()"


@dataclass(frozen=True)
class DeepLinkParams:
    """Search state carried by a share URL."""

    q: str | None = None
    expr: str | None = None
    collection: str | None = None

    def to_query_pairs(self) -> list[tuple[str, str]]:
        pairs: list[tuple[str, str]] = []
        if self.q:
            pairs.append(("q", self.q))
        if self.expr:
            pairs.append(("expr", self.expr))
        if self.collection:
            pairs.append(("collection", self.collection))
        return pairs

    def expression(self) -> Expression | None:
        """Parse `expr`, or None when absent or invalid."""
        if not self.expr:
            return None
        try:
            return parse(self.expr)
        except ExpressionSyntaxError as exc:
            logger.warning("Ignoring invalid expression in link: %s", exc)
            return None


def expression_to_url_param(expr: Expression) -> str:
    """Percent-encode the canonical form of `expr`."""
    return quote(to_string(expr), safe=_URL_SAFE)


def url_param_to_expression(param: str) -> Expression | None:
    """Decode and parse a URL parameter; None if it does not parse."""
    decoded = unquote(param)
    try:
        return parse(decoded)
    except ExpressionSyntaxError as exc:
        logger.warning("Failed to parse expression from URL: %s", exc)
        return None


def build_share_url(base_url: str, params: DeepLinkParams) -> str:
    """
    Build a share URL for `params` on top of `base_url`.

    Only the scheme and host of `base_url` are kept. Empty parameters are
    omitted; with none set, the bare origin is returned.
    """
    parts = urlsplit(base_url)
    origin = f"{parts.scheme}://{parts.netloc}" if parts.scheme else base_url.rstrip("/")
    pairs = params.to_query_pairs()
    if not pairs:
        return origin
    return f"{origin}/?{urlencode(pairs)}"


def parse_share_url(url: str) -> DeepLinkParams:
    """Read the search state back out of a share URL."""
    values = dict(parse_qsl(urlsplit(url).query))
    return DeepLinkParams(
        q=values.get("q") or None,
        expr=values.get("expr") or None,
        collection=values.get("collection") or None,
    )


def expression_share_url(base_url: str, expr: Expression) -> str:
    """Share URL carrying only the expression filter."""
    return build_share_url(base_url, DeepLinkParams(expr=to_string(expr)))
