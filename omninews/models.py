"""SQLAlchemy database models."""
import uuid
from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from omninews.database import Base

class Article(Base):
    """News article, the only persisted entity."""
    __tablename__ = "articles"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False, index=True)
    content = Column(Text, nullable=False)  # Paragraphs separated by a blank line
    excerpt = Column(String, nullable=True)  # Derived from content
    source_url = Column(String, nullable=True)  # Set when drafted from a social post
    thumbnail_url = Column(String, nullable=True)
    category = Column(String, nullable=False, default="viral", index=True)
    is_published = Column(Boolean, nullable=False, default=False, index=True)
    is_breaking = Column(Boolean, nullable=False, default=False, index=True)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
