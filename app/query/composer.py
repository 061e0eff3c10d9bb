# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Builds member filter predicates from search and category parameters."""
from typing import Optional

from app.models.domain import NAME_FIELDS, SEARCH_FIELDS, WHITELIST_FIELDS, Category
from app.query.predicates import Contains, Equals, MatchAll, Predicate, all_of, any_of


def text_predicate(term: str, fields: tuple[str, ...] = SEARCH_FIELDS) -> Predicate:
    """Case-insensitive substring match of ``term`` against any of ``fields``.

    An empty term selects every record, including records where all the
    searched fields are missing.
    """
    if term == "":
        return MatchAll()
    return any_of(*(Contains(f, term) for f in fields))


def category_predicate(category: Category, value: str) -> Predicate:
    return Equals(category.field, value)


def compose(search: str = "", category: Optional[Category] = None,
            value: Optional[str] = None) -> Predicate:
    """Combine a free-text term with an optional pinned category value.

    Once a category is pinned the text term is matched against name fields
    only, so it cannot re-match the location field the category constrains.
    """
    search = search or ""
    if category is None:
        return text_predicate(search)
    if value is None or value == "":
        raise ValueError("Category and value are required parameters")
    pinned = category_predicate(category, value)
    if search.strip() == "":
        return pinned
    return all_of(pinned, text_predicate(search, NAME_FIELDS))


def email_predicate(email: str) -> Predicate:
    """Member owns ``email`` either as primary or spouse address."""
    return any_of(*(Equals(f, email) for f in WHITELIST_FIELDS))
