# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Service: grouped member counts per category."""
from typing import Any, Dict, List, Optional

from app.core.config import settings
from app.core.logging import get_logger
from app.metrics import STATS_QUERIES
from app.models.domain import Category
from app.query.aggregation import reshape, spec_for

logger = get_logger(__name__)


class StatsService:
    def __init__(self, repo, top_n: int = settings.STATS_TOP_N):
        self._repo = repo
        self._top_n = top_n

    def category_stats(self, category: Category,
                       top_n: Optional[int] = None) -> List[Dict[str, Any]]:
        STATS_QUERIES.labels(category=category.value).inc()
        return reshape(self._repo.aggregate(spec_for(category, top_n)))

    def analytics(self) -> Dict[str, List[Dict[str, Any]]]:
        """All four categories at once; popularity-ordered ones keep only the top groups."""
        result = {c.value: self.category_stats(c, self._top_n) for c in Category}
        logger.debug("Analytics computed groups=%s",
                     {k: len(v) for k, v in result.items()})
        return result
