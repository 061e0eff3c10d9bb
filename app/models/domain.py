# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain model — member record fields and the closed set of grouping categories.
NO FastAPI dependency. Records travel through the service as plain dicts
keyed by the field names below.
"""

import re
import uuid
from enum import Enum

# ── Member record fields ──
ID = "id"
FIRST_NAME = "first_name"
LAST_NAME = "last_name"
SPOUSE_FIRST_NAME = "spouse_first_name"
SPOUSE_LAST_NAME = "spouse_last_name"
EMAIL = "email"
SPOUSE_EMAIL = "spouse_email"
MOBILE = "mobile"
SPOUSE_MOBILE = "spouse_mobile"
CITY = "city"
NATIVE_PLACE = "native_place"
KOVIL = "kovil"
YEAR_SINCE = "year_since"
PHOTO_LINK = "photo_link"
USER_UPDATED = "user_updated"

MEMBER_FIELDS: tuple[str, ...] = (
    ID,
    FIRST_NAME,
    LAST_NAME,
    SPOUSE_FIRST_NAME,
    SPOUSE_LAST_NAME,
    EMAIL,
    SPOUSE_EMAIL,
    MOBILE,
    SPOUSE_MOBILE,
    CITY,
    NATIVE_PLACE,
    KOVIL,
    YEAR_SINCE,
    PHOTO_LINK,
    USER_UPDATED,
)

# Fields a profile update may write. Identifier and timestamp are owned by the store.
EDITABLE_FIELDS: tuple[str, ...] = tuple(
    f for f in MEMBER_FIELDS if f not in (ID, USER_UPDATED)
)

NAME_FIELDS: tuple[str, ...] = (
    FIRST_NAME,
    LAST_NAME,
    SPOUSE_FIRST_NAME,
    SPOUSE_LAST_NAME,
)

# Free-text search covers names plus the two location fields.
SEARCH_FIELDS: tuple[str, ...] = NAME_FIELDS + (CITY, NATIVE_PLACE)

WHITELIST_FIELDS: tuple[str, ...] = (EMAIL, SPOUSE_EMAIL)

# Bounded by the id column width (a dashed UUID).
MEMBER_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,36}")


class Category(str, Enum):
    """Grouping dimension usable both as a filter and as a statistics axis."""

    NATIVE_VILLAGE = "nativeVillage"
    CITY_RESIDENCE = "cityResidence"
    NAGARA_KOVIL = "nagaraKovil"
    YEAR_MOVED = "yearMoved"

    @property
    def field(self) -> str:
        return CATEGORY_FIELDS[self]

    @classmethod
    def parse(cls, name: str) -> "Category":
        """Resolve a category name. Raises ValueError for anything outside the enum."""
        try:
            return cls(name)
        except ValueError:
            valid = ", ".join(c.value for c in cls)
            raise ValueError(f"Invalid category. Valid categories: {valid}") from None


CATEGORY_FIELDS: dict[Category, str] = {
    Category.NATIVE_VILLAGE: NATIVE_PLACE,
    Category.CITY_RESIDENCE: CITY,
    Category.NAGARA_KOVIL: KOVIL,
    Category.YEAR_MOVED: YEAR_SINCE,
}


def canonical_id(value: str) -> str:
    """Store form of a member identifier.

    Identifiers are opaque tokens of letters, digits, ``-`` and ``_`` that fit
    the id column, so imported ids (e.g. Mongo ObjectIds) stay addressable.
    UUID-shaped tokens in any case or without dashes collapse to the lowercase
    dashed form the store assigns. Raises ValueError for anything else.
    """
    text = str(value).strip()
    if not MEMBER_ID_PATTERN.fullmatch(text):
        raise ValueError(f"Invalid member id '{value}'")
    try:
        return str(uuid.UUID(text))
    except ValueError:
        return text


def normalize_record(record: dict) -> dict:
    """Full-width record with every text field rendered as a string.

    Imports often carry numeric years or phone numbers; stored fields are text.
    Missing fields become None and a fresh identifier is assigned when absent.
    Raises ValueError when the record carries a malformed identifier.
    """
    row = {}
    for f in MEMBER_FIELDS:
        value = record.get(f)
        if value is not None and f != USER_UPDATED and not isinstance(value, str):
            value = str(value)
        row[f] = value
    row[ID] = canonical_id(row[ID]) if row[ID] else str(uuid.uuid4())
    return row
