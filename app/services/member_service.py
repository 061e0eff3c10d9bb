# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: member lookup, search and profile updates.
Raises ValueError for invalid input and KeyError when a member is absent.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from app.core.logging import get_logger
from app.metrics import MEMBER_QUERIES, MEMBER_UPDATES, WHITELIST_CHECKS
from app.models.domain import EDITABLE_FIELDS, ID, PHOTO_LINK, USER_UPDATED, Category
from app.query.composer import compose, email_predicate
from app.query.pagination import MEMBER_SORT, PageRequest
from app.query.predicates import Equals
from app.query.projection import View, fields_for

logger = get_logger(__name__)


class MemberService:
    """Business logic for the member roster."""

    def __init__(self, repo) -> None:
        self._repo = repo

    # ── Queries ──

    def check_whitelist(self, email: str) -> bool:
        member = self._repo.find_one(email_predicate(email), fields=(ID,))
        result = "allowed" if member else "denied"
        WHITELIST_CHECKS.labels(result=result).inc()
        if member is None:
            logger.info("Access denied for email: %s", email)
        return member is not None

    def get_by_email(self, email: str) -> dict[str, Any]:
        MEMBER_QUERIES.labels(kind="email").inc()
        member = self._repo.find_one(email_predicate(email), fields=fields_for(View.DETAIL))
        if member is None:
            raise KeyError(f"No member with email '{email}'")
        return member

    def get_member(self, member_id: str) -> dict[str, Any]:
        MEMBER_QUERIES.labels(kind="detail").inc()
        member = self._repo.find_one(Equals(ID, member_id), fields=fields_for(View.DETAIL))
        if member is None:
            raise KeyError(f"Member {member_id} not found")
        return member

    def search_members(self, search: str = "",
                       page: Optional[PageRequest] = None) -> list[dict[str, Any]]:
        """One page of members matching ``search``, ordered by first name."""
        page = page or PageRequest()
        MEMBER_QUERIES.labels(kind="search").inc()
        return self._repo.find(
            compose(search),
            fields=fields_for(View.LIST),
            sort=MEMBER_SORT,
            skip=page.offset,
            limit=page.limit,
        )

    def list_by_category(self, category: Optional[str], value: Optional[str],
                         search: str = "") -> list[dict[str, Any]]:
        """All members pinned to one category value, optionally narrowed by name."""
        if not category or not value:
            raise ValueError("Category and value are required parameters")
        predicate = compose(search, Category.parse(category), value)
        MEMBER_QUERIES.labels(kind="category").inc()
        return self._repo.find(
            predicate,
            fields=fields_for(View.CATEGORY),
            sort=MEMBER_SORT,
        )

    # ── Commands ──

    def update_member(self, member_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Apply a partial profile update. Unknown keys and the identifier are dropped."""
        changes = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
        member = self._apply(member_id, changes)
        MEMBER_UPDATES.labels(kind="profile").inc()
        logger.info("Member updated id=%s fields=%s", member_id, sorted(changes))
        return member

    def update_photo(self, member_id: str, photo_link: str) -> dict[str, Any]:
        if not photo_link:
            raise ValueError("photo_link is required")
        member = self._apply(member_id, {PHOTO_LINK: photo_link})
        MEMBER_UPDATES.labels(kind="photo").inc()
        logger.info("Member photo updated id=%s", member_id)
        return member

    def _apply(self, member_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        changes[USER_UPDATED] = datetime.now(timezone.utc)
        if self._repo.update_one(member_id, changes) == 0:
            raise KeyError(f"Member {member_id} not found")
        return self.get_member(member_id)
