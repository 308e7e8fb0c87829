"""Client search used by the client list and the dashboard search box."""
from typing import Any, List

STARTS_WITH = 2
CONTAINS = 1
OTHER = 0


def _field(candidate: Any, name: str):
    if isinstance(candidate, dict):
        return candidate.get(name)
    return getattr(candidate, name, None)


def _name_key(candidate: Any) -> str:
    return str(_field(candidate, 'name') or '').lower()


def matches(query: str, candidate: Any) -> bool:
    """Case-insensitive substring match on name or on the stringified phone"""
    q = query.strip().lower()
    if not q:
        return True
    phone = str(_field(candidate, 'phone') or '')
    return q in _name_key(candidate) or q in phone


def match_tier(query: str, candidate: Any) -> int:
    name = _name_key(candidate)
    if name.startswith(query):
        return STARTS_WITH
    if query in name:
        return CONTAINS
    return OTHER


def rank_clients(query: str, candidates: List[Any]) -> List[Any]:
    """
    Filter and order clients for a search query.

    Matches are ranked name-starts-with, then name-contains, then the rest
    (phone-only matches), ties broken by name. An empty query returns every
    candidate in name order. Works on model instances and plain dicts.
    """
    q = (query or '').strip().lower()
    if not q:
        return sorted(candidates, key=_name_key)

    found = [candidate for candidate in candidates if matches(q, candidate)]
    return sorted(found, key=lambda c: (-match_tier(q, c), _name_key(c)))
