from sqlalchemy import (
    Column, Integer, String, Text, Boolean, TIMESTAMP, DECIMAL,
    Enum as SAEnum
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from learnvow.core.config import settings
from learnvow.core.database import Base
from learnvow.models.enums import ContentType

class Book(Base):
    """A catalog item: either an ebook or an audiobook."""
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    author = Column(String(255), nullable=False, index=True)
    category = Column(String(100), nullable=True, index=True)
    description = Column(Text, nullable=True)

    content_type = Column(SAEnum(ContentType, name="content_type_enum", values_callable=lambda obj: [e.value for e in obj]),
                          nullable=False, index=True)

    price = Column(DECIMAL(10, 2), nullable=False, default=0)
    currency = Column(String(10), nullable=False, default=lambda: settings.PAYMENT_CURRENCY)
    cover_url = Column(String(500), nullable=True)
    # Storage location of the book file; only handed out through signed links
    file_url = Column(String(500), nullable=True)

    # Used by reader/player surfaces to turn a position into a percentage
    total_pages = Column(Integer, nullable=True)       # ebooks
    duration_seconds = Column(Integer, nullable=True)  # audiobooks

    is_published = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    progress_entries = relationship("ReadingProgress", back_populates="book", cascade="all, delete-orphan")
    purchases = relationship("Purchase", back_populates="book", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Book(id={self.id}, title='{self.title}', type='{self.content_type}')>"
