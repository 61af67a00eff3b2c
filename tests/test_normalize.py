import pytest

from contentapi.entities import Article, Category, Image
from contentapi.normalize import (
    to_article,
    to_articles,
    to_categories,
    to_category,
    to_image,
)

from conftest import raw_category


def full_raw_article():
    return {
        "id": "a1",
        "createdAt": "2020-01-01T00:00:00Z",
        "updatedAt": "2020-01-02T00:00:00Z",
        "fields": {
            "title": "Hello",
            "slug": "hello",
            "summary": "Short",
            "text": "Long body",
            "countViews": 42,
            "category": raw_category("c1", name="News", slug="news"),
            "image": {
                "id": "i1",
                "fields": {
                    "file": {
                        "url": "//images/hello.jpg",
                        "contentType": "image/jpeg",
                        "details": {"size": 1234, "image": {"width": 640, "height": 480}},
                    }
                },
            },
        },
    }


# ---------------------------------------------------------------------------
# Articles
# ---------------------------------------------------------------------------


def test_to_article_maps_every_field():
    article = to_article(full_raw_article())

    assert isinstance(article, Article)
    assert article.id == "a1"
    assert article.created_at == "2020-01-01T00:00:00Z"
    assert article.updated_at == "2020-01-02T00:00:00Z"
    assert (article.title, article.slug, article.summary) == ("Hello", "hello", "Short")
    assert article.text == "Long body"
    assert article.count_views == 42
    assert article.category == Category({"id": "c1", "name": "News", "slug": "news"})
    assert article.image.url == "//images/hello.jpg"
    assert article.image.width == 640


def test_to_article_none_for_absent_input():
    assert to_article(None) is None
    assert to_article({}) is None


@pytest.mark.parametrize(
    "omitted", ["title", "slug", "summary", "text", "category", "image"]
)
def test_to_article_omits_missing_fields(omitted):
    raw = full_raw_article()
    del raw["fields"][omitted]

    article = to_article(raw)

    assert omitted not in article
    assert omitted not in article.to_dict()


def test_to_article_minimal_payload_keeps_only_id_and_count_views():
    article = to_article({"id": "a1", "fields": {}})
    assert article.to_dict() == {"id": "a1", "countViews": 1}

    without_fields = to_article({"id": "a2"})
    assert without_fields.to_dict() == {"id": "a2", "countViews": 1}


@pytest.mark.parametrize("count_views", [None, 0])
def test_to_article_count_views_defaults_to_one(count_views):
    raw = {"id": "a1", "fields": {"countViews": count_views}}
    assert to_article(raw).data["countViews"] == 1


def test_to_article_skips_empty_text():
    article = to_article({"id": "a1", "fields": {"text": ""}})
    assert "text" not in article


def test_to_articles_edge_cases():
    empty = to_articles(None)
    assert (empty.items, empty.total) == ((), 0)

    count_only = to_articles({"total": 5})
    assert (count_only.items, count_only.total) == ((), 5)


def test_to_articles_preserves_order():
    a = {"id": "a", "fields": {"title": "A"}}
    b = {"id": "b", "fields": {"title": "B"}}

    collection = to_articles({"items": [a, b]})

    assert list(collection.items) == [to_article(a), to_article(b)]


def test_to_articles_total_never_below_item_count():
    a = {"id": "a", "fields": {}}
    b = {"id": "b", "fields": {}}

    assert to_articles({"items": [a, b]}).total == 2
    assert to_articles({"items": [a, b], "total": 40}).total == 40


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


def test_to_category_recurses_into_parent_and_drops_timestamps():
    raw = raw_category("c2", name="Sport", slug="sport", parent=raw_category("c1", name="News"))

    category = to_category(raw)

    assert category.to_dict() == {
        "id": "c2",
        "name": "Sport",
        "slug": "sport",
        "parent": {"id": "c1", "name": "News"},
    }
    assert "created_at" not in category


def test_to_category_without_fields():
    category = to_category({"id": "c1"})
    assert category.to_dict() == {"id": "c1"}
    assert to_category(None) is None


def test_to_categories_edge_cases():
    assert to_categories(None).total == 0
    assert to_categories({"total": 3}).items == ()
    assert to_categories({"total": 3}).total == 3

    collection = to_categories({"items": [raw_category("x"), raw_category("y")], "total": 9})
    assert [c.id for c in collection] == ["x", "y"]
    assert collection.total == 9


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


def test_to_image_partial_file_details():
    image = to_image({"fields": {"file": {"url": "u", "details": {"image": {"width": 10, "height": 20}}}}})

    assert isinstance(image, Image)
    assert image.to_dict() == {"id": None, "url": "u", "width": 10, "height": 20}
    assert "content_type" not in image
    assert "size" not in image


@pytest.mark.parametrize(
    "raw",
    [
        {"id": "i1"},
        {"id": "i1", "fields": {}},
        {"id": "i1", "fields": {"file": {}}},
        {"id": "i1", "fields": {"file": {"details": {}}}},
    ],
)
def test_to_image_tolerates_missing_levels(raw):
    assert to_image(raw).to_dict() == {"id": "i1"}


def test_to_image_none_for_absent_input():
    assert to_image(None) is None
