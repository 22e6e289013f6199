import os
from dotenv import load_dotenv
from typing import Optional, List

# .env lives in the package root (learnvow/.env), one level above this core/ directory
dotenv_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), '.env')
load_dotenv(dotenv_path)

class Settings:
    PROJECT_NAME: str = "LearnVow Storefront API"
    API_V1_STR: str = "/api/v1"

    # Database (row-store)
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./learnvow.db")
    # Bounded wait for any single row-store call (statement timeout / lock wait / pool checkout)
    ROW_STORE_TIMEOUT_SECONDS: float = float(os.getenv("ROW_STORE_TIMEOUT_SECONDS", "5"))

    # Firebase (identity provider)
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")

    # Mocked payment gateway
    PAYMENT_GATEWAY_URL: str = os.getenv("PAYMENT_GATEWAY_URL", "http://localhost:8000/mock-payment-gateway")
    PAYMENT_GATEWAY_DELAY_SECONDS: float = float(os.getenv("PAYMENT_GATEWAY_DELAY_SECONDS", "1.0"))
    PAYMENT_CURRENCY: str = os.getenv("PAYMENT_CURRENCY", "BDT")

    # Progress
    PROGRESS_RECENT_LIMIT: int = int(os.getenv("PROGRESS_RECENT_LIMIT", "10"))

    # Signed book-file links
    FILE_URL_SECRET_KEY: str = os.getenv("FILE_URL_SECRET_KEY", "change-this-file-url-secret")
    FILE_URL_TTL_SECONDS: int = int(os.getenv("FILE_URL_TTL_SECONDS", "3600"))

    # CORS
    CORS_ALLOWED_ORIGINS_STR: str = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    @property
    def CORS_ALLOWED_ORIGINS(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ALLOWED_ORIGINS_STR.split(',') if origin.strip()]

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Application settings
    APP_FRONTEND_URL: str = os.getenv("APP_FRONTEND_URL", "http://localhost:3000")

    # Email settings
    EMAIL_HOST: Optional[str] = os.getenv("EMAIL_HOST")
    EMAIL_PORT: int = int(os.getenv("EMAIL_PORT", "587")) # 587 for TLS
    EMAIL_USERNAME: Optional[str] = os.getenv("EMAIL_USERNAME")
    EMAIL_PASSWORD: Optional[str] = os.getenv("EMAIL_PASSWORD")
    EMAIL_FROM_ADDRESS: Optional[str] = os.getenv("EMAIL_FROM_ADDRESS")
    EMAIL_FROM_NAME: Optional[str] = os.getenv("EMAIL_FROM_NAME", PROJECT_NAME)
    EMAIL_USE_TLS: bool = os.getenv("EMAIL_USE_TLS", "true").lower() == "true"
    EMAIL_USE_SSL: bool = os.getenv("EMAIL_USE_SSL", "false").lower() == "true"
    EMAILS_TEMPLATES_DIR: str = os.getenv(
        "EMAILS_TEMPLATES_DIR",
        os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates", "emails"),
    )


settings = Settings()
