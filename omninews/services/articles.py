"""Content store gateway: filtered reads and writes against the articles table.

Every operation is a single query or a single commit. There are no
transactions spanning calls and no concurrency checks, so concurrent edits
resolve as last write wins.
"""
import logging
from typing import Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from omninews.config import FEED_LIMIT, TRENDING_LIMIT
from omninews.models import Article
from omninews.schemas import ArticleCreate, ArticleUpdate, Category
from omninews.utils.text import extract_excerpt

logger = logging.getLogger(__name__)


def list_articles(
    db: Session,
    category: Optional[Category] = None,
    is_published: Optional[bool] = None,
    is_breaking: Optional[bool] = None,
    limit: Optional[int] = None,
    search: Optional[str] = None,
) -> list[Article]:
    """Return articles newest first, narrowed by whichever filters are given.

    Args:
        db: Database session
        category: Only articles in this category
        is_published: Match the published flag exactly
        is_breaking: Match the breaking flag exactly
        limit: Maximum number of rows
        search: Case-insensitive substring of the title or category name
    """
    query = db.query(Article)

    if category:
        query = query.filter(Article.category == Category(category).value)
    if is_published is not None:
        query = query.filter(Article.is_published == is_published)
    if is_breaking is not None:
        query = query.filter(Article.is_breaking == is_breaking)
    if search:
        term = search.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{term}%"
        query = query.filter(or_(
            Article.title.ilike(pattern, escape="\\"),
            Article.category.ilike(pattern, escape="\\"),
        ))

    query = query.order_by(Article.created_at.desc())

    if limit:
        query = query.limit(limit)

    return query.all()


def list_trending(db: Session, limit: int = TRENDING_LIMIT) -> list[Article]:
    """Published articles with the most views."""
    return (
        db.query(Article)
        .filter(Article.is_published == True)  # noqa: E712
        .order_by(Article.view_count.desc())
        .limit(limit)
        .all()
    )


def get_article(db: Session, article_id: str) -> Optional[Article]:
    return db.query(Article).filter(Article.id == article_id).first()


def create_article(db: Session, data: ArticleCreate) -> Article:
    """Insert a new article; id, timestamps, view count and excerpt are server-assigned."""
    values = data.model_dump()
    values["category"] = Category(values["category"]).value
    article = Article(**values, excerpt=extract_excerpt(data.content))
    db.add(article)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(article)
    logger.info(f"Created article: {article.title} (ID: {article.id}, published={article.is_published})")
    return article


def update_article(db: Session, article_id: str, data: ArticleUpdate) -> Optional[Article]:
    """Apply the fields present in ``data``. Returns None when the article does not exist."""
    article = get_article(db, article_id)
    if not article:
        return None

    changes = data.model_dump(exclude_unset=True)
    for field in ("title", "content", "category", "is_published", "is_breaking"):
        # Required columns cannot be cleared by an explicit null
        if field in changes and changes[field] is None:
            changes.pop(field)
    if "category" in changes:
        changes["category"] = Category(changes["category"]).value
    if "content" in changes:
        changes["excerpt"] = extract_excerpt(changes["content"])

    for field, value in changes.items():
        setattr(article, field, value)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(article)
    logger.info(f"Updated article {article_id}: {sorted(changes)}")
    return article


def toggle_publish(db: Session, article_id: str) -> Optional[Article]:
    """Flip the published flag of an article."""
    article = get_article(db, article_id)
    if not article:
        return None
    article.is_published = not article.is_published
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(article)
    logger.info(f"Article {article_id} is now {'published' if article.is_published else 'hidden'}")
    return article


def delete_article(db: Session, article_id: str) -> bool:
    """Permanently delete an article. Returns False when it did not exist."""
    article = get_article(db, article_id)
    if not article:
        return False
    title = article.title
    db.delete(article)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Deleted article: {title} (ID: {article_id})")
    return True


def get_home_feed(db: Session, category: Optional[Category] = None, limit: int = FEED_LIMIT) -> dict:
    """Assemble the landing page.

    The hero is the newest published breaking article, falling back to the
    newest article of the feed. The hero is removed from the grid.
    """
    breaking = list_articles(db, is_published=True, is_breaking=True, limit=1)
    articles = list_articles(db, category=category, is_published=True, limit=limit)

    hero = breaking[0] if breaking else (articles[0] if articles else None)
    if hero is not None:
        articles = [article for article in articles if article.id != hero.id]

    return {
        "hero": hero,
        "articles": articles,
        "trending": list_trending(db),
    }


def backfill_excerpts(db: Session, dry_run: bool = False) -> int:
    """Recompute the excerpt of every article whose stored value is stale.

    Returns the number of articles that changed (or would change on a dry run).
    """
    changed = 0
    for article in db.query(Article).all():
        excerpt = extract_excerpt(article.content)
        if article.excerpt == excerpt:
            continue
        changed += 1
        logger.info(f"Excerpt out of date: {article.title} (ID: {article.id})")
        if not dry_run:
            article.excerpt = excerpt

    if dry_run:
        return changed
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    return changed
