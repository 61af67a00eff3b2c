# entities/articles.py
from typing import Optional

from .base import Entity, EntityCollection, Field
from .categories import Category
from .images import Image


class Article(Entity):
    """
    Normalized article.

    `text` is only present on single-article lookups; listings leave it out.
    """

    # Core content
    title: Optional[str] = Field("title")
    slug: Optional[str] = Field("slug")
    summary: Optional[str] = Field("summary")
    text: Optional[str] = Field("text")

    # Relations
    image: Optional[Image] = Field("image")
    category: Optional[Category] = Field("category")

    count_views: int = Field("countViews", default=1)


ArticleCollection = EntityCollection[Article]
