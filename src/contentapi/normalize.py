"""
Mapping of raw delivery entries onto the domain entities.

Raw entries look like `{id, createdAt?, updatedAt?, fields: {...}}` and raw
collections like `{items?: [...], total?: int}`. Every function here is
total: absent input gives `None` (or an empty collection), missing nested
keys are skipped, and nothing raises for partial payloads.
"""

from typing import Any, Callable, Dict, Mapping, Optional, TypeVar

from .entities import (
    Article,
    ArticleCollection,
    Category,
    CategoryCollection,
    EntityCollection,
    Image,
)

TEntity = TypeVar("TEntity")


def _copy_present(target: Dict[str, Any], source: Mapping[str, Any], *keys: str) -> None:
    for key in keys:
        if source.get(key) is not None:
            target[key] = source[key]


def _fields(raw: Mapping[str, Any]) -> Mapping[str, Any]:
    return raw.get("fields") or {}


def _to_collection(
    raw: Optional[Mapping[str, Any]],
    convert: Callable[[Any], Optional[TEntity]],
) -> EntityCollection:
    if not raw:
        return EntityCollection(items=(), total=0)

    total = raw.get("total") or 0
    items = raw.get("items")
    if items is None:
        # A bare count is a valid answer (nonzero total, no items).
        return EntityCollection(items=(), total=total)

    converted = tuple(convert(item) for item in items)
    return EntityCollection(items=converted, total=max(total, len(converted)))


def to_article(raw: Optional[Mapping[str, Any]]) -> Optional[Article]:
    if not raw:
        return None

    fields = _fields(raw)
    data: Dict[str, Any] = {"id": raw.get("id")}
    _copy_present(data, raw, "createdAt", "updatedAt")
    _copy_present(data, fields, "title", "slug", "summary")
    data["countViews"] = fields.get("countViews") or 1

    if fields.get("text"):
        data["text"] = fields["text"]

    if fields.get("category"):
        data["category"] = to_category(fields["category"])

    if fields.get("image"):
        data["image"] = to_image(fields["image"])

    return Article(data)


def to_articles(raw: Optional[Mapping[str, Any]]) -> ArticleCollection:
    return _to_collection(raw, to_article)


def to_category(raw: Optional[Mapping[str, Any]]) -> Optional[Category]:
    """
    Normalize a category; timestamps are intentionally not carried over.

    `parent` is followed as deep as the payload goes, which is one level
    per fetch for delivery responses.
    """
    if not raw:
        return None

    data: Dict[str, Any] = {"id": raw.get("id")}
    fields = raw.get("fields")
    if fields:
        _copy_present(data, fields, "name", "slug")
        if fields.get("parent"):
            data["parent"] = to_category(fields["parent"])

    return Category(data)


def to_categories(raw: Optional[Mapping[str, Any]]) -> CategoryCollection:
    return _to_collection(raw, to_category)


def to_image(raw: Optional[Mapping[str, Any]]) -> Optional[Image]:
    if not raw:
        return None

    data: Dict[str, Any] = {"id": raw.get("id")}

    file = _fields(raw).get("file")
    if file:
        if file.get("url"):
            data["url"] = file["url"]
        if file.get("contentType"):
            data["contentType"] = file["contentType"]

        details = file.get("details")
        if details:
            _copy_present(data, details, "size")
            image = details.get("image")
            if image:
                _copy_present(data, image, "width", "height")

    return Image(data)
