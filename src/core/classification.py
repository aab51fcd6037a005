"""
Event classification against the client taxonomy.
"""

from collections.abc import Iterable

from core.config import OTHER_CLIENT
from models.reports import ClientRule


def classify_client(title: str | None, rules: Iterable[ClientRule]) -> str:
    """
    Return the first client whose keyword appears in the title.

    Matching is a case-insensitive substring test with no word boundaries,
    so a client "Art" also matches "Martin". Rules are consulted in taxonomy
    order; put more specific clients first. Unmatched titles go to "Other".
    """
    lowered = "" if title is None else str(title).lower()
    for rule in rules:
        if any(keyword.lower() in lowered for keyword in rule.keywords):
            return rule.name
    return OTHER_CLIENT
