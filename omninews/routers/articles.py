"""Article API endpoints."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, HTTPException, status
from sqlalchemy.orm import Session
from omninews.database import get_db
from omninews.schemas import (
    ArticleCreate,
    ArticleListResponse,
    ArticleResponse,
    ArticleUpdate,
    CATEGORY_LABELS,
    Category,
    CategoryOption,
    HomeFeedResponse,
)
from omninews.security import require_admin
from omninews.services import articles as gateway
from omninews.config import FEED_LIMIT, TRENDING_LIMIT

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/articles", tags=["articles"])

@router.get("", response_model=ArticleListResponse)
async def list_articles(
    category: Optional[Category] = Query(None, description="Filter by category"),
    is_published: Optional[bool] = Query(None, description="Filter by published flag"),
    is_breaking: Optional[bool] = Query(None, description="Filter by breaking flag"),
    limit: Optional[int] = Query(None, ge=1, le=100, description="Maximum number of articles"),
    search: Optional[str] = Query(None, description="Match title or category"),
    db: Session = Depends(get_db)
):
    """
    Get articles, newest first.

    - **category**: Filter by category
    - **is_published**: Filter by published flag
    - **is_breaking**: Filter by breaking flag
    - **limit**: Maximum number of articles (max 100)
    - **search**: Case-insensitive match on title or category
    """
    try:
        articles = gateway.list_articles(
            db,
            category=category,
            is_published=is_published,
            is_breaking=is_breaking,
            limit=limit,
            search=search,
        )
        return ArticleListResponse(
            articles=[ArticleResponse.model_validate(article) for article in articles],
            total=len(articles),
        )
    except Exception as e:
        logger.error(f"Error listing articles: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error listing articles: {str(e)}"
        )

@router.get("/feed", response_model=HomeFeedResponse)
async def get_home_feed(
    category: Optional[Category] = Query(None, description="Filter the grid by category"),
    limit: int = Query(FEED_LIMIT, ge=1, le=100, description="Grid size before the hero is removed"),
    db: Session = Depends(get_db)
):
    """
    Get the public landing page: hero article, article grid and trending sidebar.
    """
    try:
        feed = gateway.get_home_feed(db, category=category, limit=limit)
        return HomeFeedResponse(
            hero=ArticleResponse.model_validate(feed["hero"]) if feed["hero"] else None,
            articles=[ArticleResponse.model_validate(article) for article in feed["articles"]],
            trending=[ArticleResponse.model_validate(article) for article in feed["trending"]],
        )
    except Exception as e:
        logger.error(f"Error building home feed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error building home feed: {str(e)}"
        )

@router.get("/trending", response_model=ArticleListResponse)
async def get_trending(
    limit: int = Query(TRENDING_LIMIT, ge=1, le=50, description="Number of articles"),
    db: Session = Depends(get_db)
):
    """
    Get the most viewed published articles.
    """
    try:
        articles = gateway.list_trending(db, limit=limit)
        return ArticleListResponse(
            articles=[ArticleResponse.model_validate(article) for article in articles],
            total=len(articles),
        )
    except Exception as e:
        logger.error(f"Error getting trending articles: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error getting trending articles: {str(e)}"
        )

@router.get("/categories", response_model=list[CategoryOption])
async def get_categories():
    """
    Get the article categories with their display labels, in tab order.
    """
    return [CategoryOption(value=value, label=label) for value, label in CATEGORY_LABELS.items()]

@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(
    article_id: str,
    db: Session = Depends(get_db)
):
    """
    Get a specific article by ID.
    """
    try:
        article = gateway.get_article(db, article_id)

        if not article:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Article not found"
            )

        return ArticleResponse.model_validate(article)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting article: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error getting article: {str(e)}"
        )

@router.post("", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    request: ArticleCreate,
    db: Session = Depends(get_db),
    admin: str = Depends(require_admin)
):
    """
    Create an article, either as a draft or already published.
    """
    try:
        article = gateway.create_article(db, request)
        return ArticleResponse.model_validate(article)
    except Exception as e:
        logger.error(f"Error creating article: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error creating article: {str(e)}"
        )

@router.patch("/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: str,
    request: ArticleUpdate,
    db: Session = Depends(get_db),
    admin: str = Depends(require_admin)
):
    """
    Update the fields sent in the body; the others are left untouched.
    """
    try:
        article = gateway.update_article(db, article_id, request)
        if not article:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Article not found"
            )
        return ArticleResponse.model_validate(article)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating article: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error updating article: {str(e)}"
        )

@router.post("/{article_id}/toggle-publish", response_model=ArticleResponse)
async def toggle_publish(
    article_id: str,
    db: Session = Depends(get_db),
    admin: str = Depends(require_admin)
):
    """
    Publish a hidden article or hide a published one.
    """
    try:
        article = gateway.toggle_publish(db, article_id)
        if not article:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Article not found"
            )
        return ArticleResponse.model_validate(article)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error toggling article: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error toggling article: {str(e)}"
        )

@router.delete("/{article_id}")
async def delete_article(
    article_id: str,
    db: Session = Depends(get_db),
    admin: str = Depends(require_admin)
):
    """
    Delete an article by ID. There is no soft delete.
    """
    try:
        if not gateway.delete_article(db, article_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Article not found"
            )
        return {"message": "Article deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting article: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error deleting article: {str(e)}"
        )
