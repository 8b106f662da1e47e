"""Cursor pagination links for user listings.

A page is described by the request's own query parameters; the links keep
those (``search``, ``size``...) and swap the position parameters
(``page``/``next``/``prev``) for a cursor pointing at the first or last
document of the current page.
"""
from typing import Iterable, Tuple
from urllib.parse import urlencode

POSITION_PARAMS = ("page", "next", "prev")


def pagination_link(
    params: Iterable[Tuple[str, str]],
    cursor: str,
    doc_id: str,
    base_path: str = "/users"
) -> str:
    """Build a link resuming the listing from ``doc_id``.

    Args:
        params: Query parameters of the current request, in order
        cursor: ``"next"`` or ``"prev"``
        doc_id: Document the cursor points at
        base_path: Path of the listing endpoint

    Returns:
        Relative URL

    Examples:
        >>> pagination_link([("search", "an"), ("page", "1"), ("size", "2")], "next", "abc")
        '/users?search=an&size=2&next=abc'
    """
    kept = [(key, value) for key, value in params if key not in POSITION_PARAMS]
    kept.append((cursor, doc_id))
    return f"{base_path}?{urlencode(kept)}"


def build_links(params: Iterable[Tuple[str, str]], documents: list[dict]) -> dict:
    """``next``/``prev`` links for a page; empty strings for an empty page."""
    if not documents:
        return {"next": "", "prev": ""}

    params = list(params)
    return {
        "next": pagination_link(params, "next", documents[-1]["id"]),
        "prev": pagination_link(params, "prev", documents[0]["id"]),
    }
