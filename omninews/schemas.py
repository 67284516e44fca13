"""Pydantic schemas for request/response validation."""
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, field_validator

class Category(str, Enum):
    """Closed set of article categories."""
    NASIONAL = "nasional"
    TECH = "tech"
    LIFESTYLE = "lifestyle"
    VIRAL = "viral"
    SOCIAL = "social"

CATEGORY_LABELS = {
    Category.NASIONAL: "Nasional",
    Category.TECH: "Tech",
    Category.LIFESTYLE: "Lifestyle",
    Category.VIRAL: "Viral",
    Category.SOCIAL: "Social",
}

DEFAULT_CATEGORY = Category.VIRAL


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ArticleCreate(BaseModel):
    """Schema for creating an article from the admin form."""
    title: str
    content: str
    source_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    category: Category = DEFAULT_CATEGORY
    is_published: bool = False
    is_breaking: bool = False

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("source_url", "thumbnail_url")
    @classmethod
    def optional_url(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class ArticleUpdate(BaseModel):
    """Schema for a partial update; only fields that were sent are applied."""
    title: Optional[str] = None
    content: Optional[str] = None
    source_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    category: Optional[Category] = None
    is_published: Optional[bool] = None
    is_breaking: Optional[bool] = None

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("source_url", "thumbnail_url")
    @classmethod
    def optional_url(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class ArticleResponse(BaseModel):
    """Schema for article response."""
    id: str
    title: str
    content: str
    excerpt: Optional[str] = None
    source_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    category: Category
    is_published: bool
    is_breaking: bool
    view_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class ArticleListResponse(BaseModel):
    """Schema for article list response."""
    articles: list[ArticleResponse]
    total: int

class HomeFeedResponse(BaseModel):
    """Landing page payload: hero slot, grid and trending sidebar."""
    hero: Optional[ArticleResponse] = None
    articles: list[ArticleResponse]
    trending: list[ArticleResponse]

class GenerateArticleRequest(BaseModel):
    """Body of the generate-article function. Missing sourceUrl is reported by the generator."""
    sourceUrl: Optional[str] = None

class GeneratedArticle(BaseModel):
    """Draft returned to the admin form."""
    title: str
    content: str
    category: str
    thumbnailUrl: str = ""

class ErrorResponse(BaseModel):
    error: str

class CategoryOption(BaseModel):
    """Category value and its display label, for the category tabs."""
    value: Category
    label: str
