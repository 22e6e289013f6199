from sqlalchemy import Column, Integer, TIMESTAMP, ForeignKey, UniqueConstraint, Float
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from learnvow.core.database import Base

class ReadingProgress(Base):
    """How far one user has advanced through one book, as a percentage."""
    __tablename__ = "reading_progress"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False)

    progress = Column(Float, nullable=False, default=0.0) # 0..100
    last_accessed = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="progress_entries")
    book = relationship("Book", back_populates="progress_entries")

    __table_args__ = (
        # Conflict target of the progress upsert
        UniqueConstraint('user_id', 'content_id', name='uq_reading_progress_user_content'),
    )

    def __repr__(self):
        return f"<ReadingProgress(id={self.id}, user_id={self.user_id}, content_id={self.content_id}, progress={self.progress})>"
