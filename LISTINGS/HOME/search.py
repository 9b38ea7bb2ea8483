# file: LISTINGS/HOME/search.py
from typing import Callable, Mapping

SEARCH_FIELDS = ("title", "location", "description")


def _fold(value) -> str:
    if value is None:
        return ""
    return str(value).casefold()


def build_predicate(query: str) -> Callable[[Mapping], bool]:
    """
    Return a predicate that is true when the query text occurs, ignoring
    case, in a document's title, location or description.

    The query is plain text; characters such as "." or "*" only match
    themselves. An empty query matches every document.
    """
    needle = _fold(query)
    if not needle:
        return lambda doc: True

    def predicate(doc: Mapping) -> bool:
        return any(needle in _fold(doc.get(field)) for field in SEARCH_FIELDS)

    return predicate
