"""contentapi - Cached, read-only access to categories and articles stored in Contentful."""

from .client import ContentfulClient, Credentials
from .cache import CachedContentfulApi, CachePolicy
from .content_api import CACHE_OPTIONS, ContentApi
from .entities import Article, ArticleCollection, Category, CategoryCollection, Image
from .exceptions import APIError, ConfigurationError, ContentApiError, InvalidFilterError
from .queries import ArticleFilter, ArticleOrder, ArticlesFilter, CategoryFilter, ContentTypes

__all__ = [
    "ContentApi",
    "ContentfulClient",
    "Credentials",
    "CachedContentfulApi",
    "CachePolicy",
    "CACHE_OPTIONS",
    "Article",
    "ArticleCollection",
    "Category",
    "CategoryCollection",
    "Image",
    "ArticleFilter",
    "ArticleOrder",
    "ArticlesFilter",
    "CategoryFilter",
    "ContentTypes",
    "APIError",
    "ConfigurationError",
    "ContentApiError",
    "InvalidFilterError",
]
__version__ = "0.0.1"
