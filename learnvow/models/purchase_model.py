from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, UniqueConstraint, DECIMAL
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from learnvow.core.database import Base

class Purchase(Base):
    """Ownership of a book by a user; the set of purchases is the user's library."""
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    payment_id = Column(Integer, ForeignKey("payments.id", ondelete="SET NULL"), nullable=True)

    price_paid = Column(DECIMAL(10, 2), nullable=False)
    currency = Column(String(10), nullable=False, default="BDT")

    purchased_at = Column(TIMESTAMP(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="purchases")
    book = relationship("Book", back_populates="purchases")
    payment = relationship("Payment", back_populates="purchase")

    __table_args__ = (
        UniqueConstraint('user_id', 'book_id', name='uq_purchase_user_book'),
    )

    def __repr__(self):
        return f"<Purchase(id={self.id}, user_id={self.user_id}, book_id={self.book_id})>"
