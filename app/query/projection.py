# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Field visibility per response view."""
from enum import Enum
from typing import Any, Mapping, Optional

from app.models.domain import (
    CITY, EMAIL, FIRST_NAME, ID, KOVIL, LAST_NAME, MOBILE, NATIVE_PLACE,
    SPOUSE_EMAIL, SPOUSE_FIRST_NAME, SPOUSE_LAST_NAME, SPOUSE_MOBILE, YEAR_SINCE,
)


class View(str, Enum):
    LIST = "list"
    CATEGORY = "category"
    DETAIL = "detail"


LIST_FIELDS: tuple[str, ...] = (
    ID, FIRST_NAME, LAST_NAME, SPOUSE_FIRST_NAME, SPOUSE_LAST_NAME, CITY, NATIVE_PLACE,
)
CATEGORY_VIEW_FIELDS: tuple[str, ...] = LIST_FIELDS + (
    KOVIL, YEAR_SINCE, EMAIL, SPOUSE_EMAIL, MOBILE, SPOUSE_MOBILE,
)

# None means the full record.
VIEW_FIELDS: dict[View, Optional[tuple[str, ...]]] = {
    View.LIST: LIST_FIELDS,
    View.CATEGORY: CATEGORY_VIEW_FIELDS,
    View.DETAIL: None,
}


def fields_for(view: View) -> Optional[tuple[str, ...]]:
    return VIEW_FIELDS[view]


def project(record: Mapping[str, Any], fields: Optional[tuple[str, ...]]) -> dict[str, Any]:
    """Trim a record to ``fields``. Absent fields are omitted, not filled with None."""
    if fields is None:
        return dict(record)
    return {f: record[f] for f in fields if f in record}
