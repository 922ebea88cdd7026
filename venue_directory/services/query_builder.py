"""Predicate construction shared by the paginated lister and the counter.

`build_conditions` returns an immutable tuple of clauses; both the listing
query and the count query are built from the same tuple, so a filter can
never narrow one and not the other.
"""
from typing import Optional, Tuple

from sqlalchemy import ColumnElement, or_

from venue_directory.core.exceptions import InvalidInputError
from venue_directory.models.business_model import Business
from venue_directory.schemas.filter_schema import BusinessFilters, Pagination

Conditions = Tuple[ColumnElement[bool], ...]

SORT_FIELDS = {
    "name": Business.name,
    "rating": Business.rating,
    "reviews_count": Business.reviews_count,
    "created_at": Business.created_at,
}

SORT_ORDERS = ("asc", "desc")

# OFFSET and LIMIT are bound as signed 64-bit integers by every driver
MAX_WINDOW = 2**63 - 1

SEARCH_COLUMNS = (
    Business.name,
    Business.description,
    Business.full_address,
    Business.city,
    Business.business_type,
)


def normalize_query(query: Optional[str]) -> str:
    """Blank search text means list mode."""
    return (query or "").strip()


def search_condition(query: str) -> ColumnElement[bool]:
    """Case-insensitive substring match over the searchable text columns."""
    return or_(*(column.icontains(query, autoescape=True) for column in SEARCH_COLUMNS))


def build_conditions(
    filters: Optional[BusinessFilters],
    query: Optional[str] = None,
    admissible_ids: Optional[frozenset[int]] = None,
) -> Conditions:
    """Assemble the WHERE clauses for a listing or count query."""
    filters = filters or BusinessFilters()
    conditions = [Business.is_active.is_(True)]

    text = normalize_query(query)
    if text:
        conditions.append(search_condition(text))

    if filters.city:
        conditions.append(Business.city.icontains(filters.city, autoescape=True))
    if filters.state:
        conditions.append(Business.state.icontains(filters.state, autoescape=True))
    if filters.rating_min is not None:
        conditions.append(Business.rating >= filters.rating_min)
    if filters.featured_only:
        conditions.append(Business.featured.is_(True))
    if filters.verified_only:
        conditions.append(Business.verified.is_(True))

    if admissible_ids is not None:
        conditions.append(Business.id.in_(sorted(admissible_ids)))

    return tuple(conditions)


def order_by_clauses(sort: Optional[str] = None, order: str = "desc") -> tuple:
    """Deterministic ORDER BY; id ascending always breaks ties."""
    if order not in SORT_ORDERS:
        raise InvalidInputError(f"Unknown sort order '{order}'", detail={"allowed": list(SORT_ORDERS)})

    if sort is None:
        return (Business.featured.desc(), Business.rating.desc(), Business.id.asc())

    column = SORT_FIELDS.get(sort)
    if column is None:
        raise InvalidInputError(f"Unknown sort key '{sort}'", detail={"allowed": list(SORT_FIELDS)})

    return (column.asc() if order == "asc" else column.desc(), Business.id.asc())


def validate_pagination(pagination: Pagination) -> None:
    if pagination.offset < 0:
        raise InvalidInputError(f"offset must be >= 0, got {pagination.offset}")
    if pagination.limit < 0:
        raise InvalidInputError(f"limit must be >= 0, got {pagination.limit}")
    if pagination.offset > MAX_WINDOW or pagination.limit > MAX_WINDOW:
        raise InvalidInputError("offset and limit must fit in a 64-bit integer")
