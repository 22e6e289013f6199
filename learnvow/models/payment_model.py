from sqlalchemy import (
    Column, Integer, String, Text, ForeignKey, TIMESTAMP, DECIMAL,
    Enum as SAEnum
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from learnvow.core.database import Base
from learnvow.models.enums import PaymentStatus, PaymentGateway

class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True) # Payment record kept if user is deleted
    book_id = Column(Integer, ForeignKey("books.id", ondelete="SET NULL"), nullable=True, index=True)

    # Our order reference, handed to the gateway and echoed back on verification
    order_id = Column(String(255), nullable=False, unique=True, index=True)

    amount = Column(DECIMAL(10, 2), nullable=False)
    currency = Column(String(10), nullable=False, default="BDT")

    status = Column(SAEnum(PaymentStatus, name="payment_status_enum", values_callable=lambda obj: [e.value for e in obj]),
                    nullable=False, default=PaymentStatus.PENDING, index=True)

    payment_gateway = Column(SAEnum(PaymentGateway, name="payment_gateway_enum", values_callable=lambda obj: [e.value for e in obj]),
                             nullable=False, index=True)

    transaction_id = Column(String(255), nullable=True, unique=True, index=True) # From the gateway on verification
    error_message = Column(Text, nullable=True)

    paid_at = Column(TIMESTAMP(timezone=True), nullable=True)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="payments")
    book = relationship("Book")
    purchase = relationship("Purchase", back_populates="payment", uselist=False)

    def __repr__(self):
        return f"<Payment(id={self.id}, order_id='{self.order_id}', amount={self.amount} {self.currency}, status='{self.status}')>"
