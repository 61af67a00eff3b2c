# entities/categories.py
from typing import Optional

from .base import Entity, EntityCollection, Field


class Category(Entity):
    """
    Node of the category tree.

    `parent` is a copied-in snapshot of the parent category, not a shared
    reference; root categories have none.
    """

    name: Optional[str] = Field("name")
    slug: Optional[str] = Field("slug")
    parent: Optional["Category"] = Field("parent")

    @property
    def is_root(self) -> bool:
        return "parent" not in self.data


CategoryCollection = EntityCollection[Category]
