import enum

class ContentType(str, enum.Enum):
    EBOOK = "ebook"
    AUDIOBOOK = "audiobook"

class UserRole(str, enum.Enum):
    CUSTOMER = "Customer"
    ADMIN = "Admin"

class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUNDED = "refunded"

class PaymentGateway(str, enum.Enum):
    MOCK = "mock"       # Simulated hosted checkout
    MANUAL = "manual"   # Direct purchase recorded without a gateway round trip

# Enum columns are stored as VARCHAR values (values_callable on SAEnum) so the
# same schema works on SQLite in tests and PostgreSQL in production.
