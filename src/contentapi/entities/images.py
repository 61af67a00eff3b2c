# entities/images.py
from typing import Optional

from .base import Entity, Field


class Image(Entity):
    """Image asset; every attribute is filled only if the upstream file had it."""

    title: Optional[str] = Field("title")
    url: Optional[str] = Field("url")
    width: Optional[int] = Field("width")
    height: Optional[int] = Field("height")
    size: Optional[int] = Field("size")
    content_type: Optional[str] = Field("contentType")
