"""
Read-only access to categories and articles stored in Contentful.
"""

from typing import Any, List, Mapping, Optional, Union

from .cache import CachedContentfulApi, CachedFetchProvider, CachePolicy, ITEM, COLLECTION
from .client import ContentfulClient, Credentials
from .entities import Article, ArticleCollection, Category, CategoryCollection
from .normalize import to_articles, to_categories
from .queries import (
    ApiQuery,
    ArticleFilter,
    ArticlesFilter,
    CategoryFilter,
    ContentTypes,
    all_categories_query,
    articles_query,
    coerce_filter,
    for_content_type,
    main_categories_query,
    root_categories_query,
    single_entry_query,
)

CACHE_OPTIONS = {
    ContentTypes.CATEGORY.value: {
        ITEM: CachePolicy(max=50, max_age="1h"),
        COLLECTION: CachePolicy(max=50, max_age="30m"),
    },
    ContentTypes.ARTICLE.value: {
        ITEM: CachePolicy(max=50, max_age="10m"),
        COLLECTION: CachePolicy(max=100, max_age="30m"),
    },
}

ArticleFilterLike = Union[ArticleFilter, Mapping[str, Any], None]
ArticlesFilterLike = Union[ArticlesFilter, Mapping[str, Any], None]
CategoryFilterLike = Union[CategoryFilter, Mapping[str, Any], None]


class ContentApi:
    """
    Asynchronous, read-only façade over categories and articles.

    Every lookup builds a delivery query, hands it to the cached fetch
    provider under its content type, and normalizes the raw answer. The
    façade keeps no state of its own; invalid filters raise
    `InvalidFilterError` before anything is fetched, and provider errors
    propagate unchanged.

    Args:
        provider: Any object with an async
            `get_cache_entries(content_type, query)` method

    Example:
        >>> api = ContentApi.from_env()
        >>> article = await api.article({"slug": "hello-world"})
        >>> latest = await api.articles_list(ArticlesFilter(limit=5))
    """

    def __init__(self, provider: CachedFetchProvider) -> None:
        self.provider = provider

    @classmethod
    def from_credentials(cls, credentials: Credentials, **client_options: Any) -> "ContentApi":
        """Build the default stack: delivery client behind the partitioned cache."""
        client = ContentfulClient(credentials, **client_options)
        return cls(CachedContentfulApi(client, CACHE_OPTIONS))

    @classmethod
    def from_env(cls, **client_options: Any) -> "ContentApi":
        """Same as `from_credentials` with credentials read from the environment."""
        return cls.from_credentials(Credentials.from_env(), **client_options)

    # ------------------------------------------------------------------
    # Articles
    # ------------------------------------------------------------------

    async def article(self, filter: ArticleFilterLike) -> Optional[Article]:
        """Single article by slug or id, with body text; `None` if not found."""
        query = single_entry_query(coerce_filter(ArticleFilter, filter))
        collection = await self._get_articles(query)
        return collection.items[0] if collection.items else None

    async def articles(self, filter: ArticlesFilterLike) -> ArticleCollection:
        """One page of articles (without body text) plus the total match count."""
        query = articles_query(coerce_filter(ArticlesFilter, filter))
        return await self._get_articles(query)

    async def articles_list(self, filter: ArticlesFilterLike) -> List[Article]:
        collection = await self.articles(filter)
        return list(collection.items)

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def category(self, filter: CategoryFilterLike) -> Optional[Category]:
        """Single category by slug or id; `None` if not found."""
        query = single_entry_query(coerce_filter(CategoryFilter, filter))
        collection = await self._get_categories(query)
        return collection.items[0] if collection.items else None

    async def main_categories(self, limit: int) -> List[Category]:
        """
        Up to `limit` categories whose parent has a name, ordered by slug.

        Only one page of `limit + 10` candidates is examined, so fewer than
        `limit` may come back even when more exist.
        """
        query = main_categories_query(limit)
        candidates = await self._get_categories_list(query)
        main = [
            item
            for item in candidates
            if item is not None and item.parent is not None and item.parent.name
        ]
        return main[:limit]

    async def root_categories(self) -> List[Category]:
        """Up to 10 categories without a parent, ordered by slug."""
        return await self._get_categories_list(root_categories_query())

    async def all_categories(self) -> CategoryCollection:
        """Up to 100 categories ordered by slug."""
        return await self._get_categories(all_categories_query())

    # ------------------------------------------------------------------
    # Fetch helpers
    # ------------------------------------------------------------------

    async def _get_articles(self, query: ApiQuery) -> ArticleCollection:
        raw = await self.provider.get_cache_entries(
            ContentTypes.ARTICLE.value, for_content_type(query, ContentTypes.ARTICLE)
        )
        return to_articles(raw)

    async def _get_categories(self, query: ApiQuery) -> CategoryCollection:
        raw = await self.provider.get_cache_entries(
            ContentTypes.CATEGORY.value, for_content_type(query, ContentTypes.CATEGORY)
        )
        return to_categories(raw)

    async def _get_categories_list(self, query: ApiQuery) -> List[Category]:
        collection = await self._get_categories(query)
        return list(collection.items)
