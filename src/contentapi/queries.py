"""
Translation of typed filters into Content Delivery API query parameters.
"""

from dataclasses import dataclass, fields as dataclass_fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

from .exceptions import InvalidFilterError

TFilter = TypeVar("TFilter")

ApiQuery = Dict[str, Any]


class ContentTypes(str, Enum):
    CATEGORY = "category"
    FILE = "file"
    ARTICLE = "article"


class ArticleOrder(str, Enum):
    CREATED_AT = "createdAt"
    CREATED_AT_DESC = "-createdAt"
    COUNT_VIEWS = "countViews"
    COUNT_VIEWS_DESC = "-countViews"


_ORDER_TO_SORT_KEY = {
    ArticleOrder.CREATED_AT: "sys.createdAt",
    ArticleOrder.CREATED_AT_DESC: "-sys.createdAt",
    ArticleOrder.COUNT_VIEWS: "fields.countViews",
    ArticleOrder.COUNT_VIEWS_DESC: "-fields.countViews",
}

# Listing projection; `fields.text` is left out to keep list payloads small.
ARTICLE_LIST_SELECT = ",".join(
    [
        "sys.id",
        "sys.createdAt",
        "sys.updatedAt",
        "fields.title",
        "fields.slug",
        "fields.summary",
        "fields.image",
        "fields.category",
    ]
)

CATEGORY_ORDER = "fields.slug"
MAIN_CATEGORIES_OVERFETCH = 10
ROOT_CATEGORIES_LIMIT = 10
ALL_CATEGORIES_LIMIT = 100


# -------------------------------
# Filters
# -------------------------------


@dataclass(frozen=True)
class EntryFilter:
    """Single-entry lookup by id or slug (slug wins when both are set)."""

    id: Optional[str] = None
    slug: Optional[str] = None


@dataclass(frozen=True)
class ArticleFilter(EntryFilter):
    pass


@dataclass(frozen=True)
class CategoryFilter(EntryFilter):
    pass


@dataclass(frozen=True)
class ArticlesFilter:
    limit: int
    order: Union[ArticleOrder, str, None] = ArticleOrder.CREATED_AT_DESC
    category_id: Optional[str] = None
    category_slug: Optional[str] = None


def coerce_filter(
    cls: Type[TFilter], value: Union[TFilter, Mapping[str, Any], None]
) -> Optional[TFilter]:
    """
    Accept either a filter instance or a plain mapping with the same keys.

    Unknown mapping keys are rejected; `None` passes through.
    """
    if value is None or isinstance(value, cls):
        return value
    if isinstance(value, Mapping):
        known = {f.name for f in dataclass_fields(cls)}
        unknown = set(value) - known
        if unknown:
            raise InvalidFilterError(f"unknown keys {sorted(unknown)}")
        try:
            return cls(**value)
        except TypeError as exc:
            raise InvalidFilterError(str(exc)) from exc
    raise InvalidFilterError(f"expected {cls.__name__} or mapping, got {type(value).__name__}")


def sort_key(order: Union[ArticleOrder, str, None]) -> str:
    """Backend sort key for an article order; unknown values sort newest first."""
    try:
        return _ORDER_TO_SORT_KEY[ArticleOrder(order)]
    except ValueError:
        return _ORDER_TO_SORT_KEY[ArticleOrder.CREATED_AT_DESC]


# -------------------------------
# Query builders
# -------------------------------


def single_entry_query(entry_filter: Optional[EntryFilter]) -> ApiQuery:
    if entry_filter is None or not (entry_filter.id or entry_filter.slug):
        raise InvalidFilterError("either id or slug is required")

    query: ApiQuery = {"include": 1, "limit": 1}
    if entry_filter.slug:
        query["fields.slug"] = entry_filter.slug
    else:
        query["sys.id"] = entry_filter.id
    return query


def articles_query(articles_filter: Optional[ArticlesFilter]) -> ApiQuery:
    if articles_filter is None:
        raise InvalidFilterError("filter is required")

    limit = articles_filter.limit
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise InvalidFilterError(f"limit must be a positive integer, got {limit!r}")

    query: ApiQuery = {
        "limit": limit,
        "select": ARTICLE_LIST_SELECT,
        "order": sort_key(articles_filter.order),
    }

    if articles_filter.category_id:
        query["fields.category.sys.id"] = articles_filter.category_id
    if articles_filter.category_slug:
        query["fields.category.fields.slug"] = articles_filter.category_slug

    return query


def main_categories_query(limit: int) -> ApiQuery:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise InvalidFilterError(f"limit must be a non-negative integer, got {limit!r}")
    return {"order": CATEGORY_ORDER, "limit": limit + MAIN_CATEGORIES_OVERFETCH}


def root_categories_query() -> ApiQuery:
    return {
        "order": CATEGORY_ORDER,
        "fields.parent[exists]": "false",
        "limit": ROOT_CATEGORIES_LIMIT,
    }


def all_categories_query() -> ApiQuery:
    return {"order": CATEGORY_ORDER, "limit": ALL_CATEGORIES_LIMIT}


def for_content_type(query: ApiQuery, content_type: ContentTypes) -> ApiQuery:
    """Copy of `query` scoped to one content type."""
    return {**query, "content_type": content_type.value}
