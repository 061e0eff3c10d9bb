# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Query package — predicate composition, projection, pagination, aggregation."""
from app.query.aggregation import AggregationSpec, GroupOrder, group_counts, reshape, spec_for
from app.query.composer import compose, email_predicate, text_predicate
from app.query.pagination import MEMBER_SORT, PageRequest
from app.query.predicates import And, Contains, Equals, MatchAll, NotEmpty, Or, Predicate
from app.query.projection import View, fields_for, project

__all__ = [
    "AggregationSpec", "GroupOrder", "group_counts", "reshape", "spec_for",
    "compose", "email_predicate", "text_predicate",
    "MEMBER_SORT", "PageRequest",
    "And", "Contains", "Equals", "MatchAll", "NotEmpty", "Or", "Predicate",
    "View", "fields_for", "project",
]
