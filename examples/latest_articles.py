"""
Example: Reading categories and articles with the content API

Usage:
    export CONTENTFUL_SPACE="your-space-id"
    export CONTENTFUL_ACCESS_TOKEN="your-delivery-token"
    python examples/latest_articles.py
"""

import asyncio
import logging

from contentapi import ArticleOrder, ArticlesFilter, ContentApi


async def main():
    # -------------------------------------------------------------------------
    # 1. Initialize the API (fails fast if credentials are missing)
    # -------------------------------------------------------------------------

    api = ContentApi.from_env()

    # -------------------------------------------------------------------------
    # 2. Category tree
    # -------------------------------------------------------------------------

    print("=== Root categories ===\n")
    for category in await api.root_categories():
        print(f"  {category.slug}: {category.name}")

    print("\n=== Main categories ===\n")
    for category in await api.main_categories(5):
        print(f"  {category.parent.name} / {category.name}")

    # -------------------------------------------------------------------------
    # 3. Articles
    # -------------------------------------------------------------------------

    print("\n=== Most viewed ===\n")
    page = await api.articles(ArticlesFilter(limit=5, order=ArticleOrder.COUNT_VIEWS_DESC))
    print(f"{len(page)} of {page.total} articles")
    for article in page:
        print(f"  [{article.count_views}] {article.title}")

    if page.items:
        article = await api.article({"slug": page.items[0].slug})
        print(f"\n{article.title}\n\n{article.text or ''}")

    # A second call is answered from the cache.
    await api.articles(ArticlesFilter(limit=5, order=ArticleOrder.COUNT_VIEWS_DESC))


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    asyncio.run(main())
