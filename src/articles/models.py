"""
Pydantic schemas for editorial articles.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ArticleStatus(str, Enum):
    """Editorial lifecycle of an article"""
    DRAFT = "draft"
    FEATURED = "featured"
    ARCHIVED = "archived"


class ArticleReference(BaseModel):
    """A cited source quoted in an article"""
    id: Optional[str] = Field(None, description="Assigned by the repository on create")
    article_id: Optional[str] = Field(None, description="Owning article id")
    title: str
    url: str
    quote: str = Field("", description="Quoted passage supporting the article")
    domain: str = Field("", description="Source domain, e.g. 'aap.org'")
    published_date: Optional[datetime] = None


class ArticleCreate(BaseModel):
    """Fields a caller supplies when creating an article"""
    title: str = Field(..., min_length=1)
    content: str = Field(..., description="Markdown body")
    summary: str = ""
    references: List[ArticleReference] = Field(default_factory=list)
    publish_date: datetime = Field(default_factory=datetime.now)
    status: ArticleStatus = ArticleStatus.DRAFT
    tags: List[str] = Field(default_factory=list)
    category: str = "General"


class Article(ArticleCreate):
    """Stored article"""
    id: str
    created_at: datetime
    updated_at: datetime
