from .base import Entity, EntityCollection, Field
from .articles import Article, ArticleCollection
from .categories import Category, CategoryCollection
from .images import Image

__all__ = [
    "Entity",
    "EntityCollection",
    "Field",
    "Article",
    "ArticleCollection",
    "Category",
    "CategoryCollection",
    "Image",
]
