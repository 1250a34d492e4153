from typing import Annotated, List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode


class Settings(BaseSettings):
    # Application Information
    app_name: str = Field(default="CourseHub")
    app_description: str = Field(default="Online Course Marketplace")
    app_version: str = Field(default="1.0.0")
    app_url: str = Field(default="http://localhost:8000")
    frontend_url: str = Field(default="http://localhost:5173")
    debug: bool = Field(default=True)
    production: bool = Field(default=False)

    # Database Configuration
    # DB_URL wins over the individual parts when set
    db_url: Optional[str] = Field(default=None)
    db_host: str = Field(default="127.0.0.1")
    db_port: int = Field(default=5432)
    db_database: str = Field(default="coursehub")
    db_username: str = Field(default="coursehub")
    db_password: str = Field(default="coursehub")
    db_echo: bool = Field(default=False)

    # Security Settings
    cors_allowed_origins: Annotated[List[str], NoDecode] = Field(
        default=["http://localhost:5173"]
    )

    password_hash_rounds: int = Field(default=12, ge=4, le=16)

    # JWT Configuration
    jwt_secret: str = Field(default="change-me-in-production")
    jwt_algorithm: str = Field(default="HS256")
    jwt_user_expiration: int = Field(default=7)
    jwt_refresh_expiration: int = Field(default=30)
    jwt_issuer: str = Field(default="CourseHub")

    # External identity provider (ID tokens exchanged for our own JWTs)
    identity_provider_name: str = Field(default="firebase")
    identity_token_secret: str = Field(default="")
    identity_token_algorithm: str = Field(default="HS256")
    identity_token_issuer: Optional[str] = Field(default=None)
    identity_token_audience: Optional[str] = Field(default=None)

    # Admin role assignment
    admin_emails: Annotated[List[str], NoDecode] = Field(default=[])

    # Payment gateway (Razorpay)
    razorpay_key_id: str = Field(default="")
    razorpay_key_secret: str = Field(default="")
    razorpay_live_orders: bool = Field(default=False)
    razorpay_api_url: str = Field(default="https://api.razorpay.com/v1")
    razorpay_timeout: int = Field(default=10)
    payment_currency: str = Field(default="INR")
    enrollment_retry_attempts: int = Field(default=3)

    # Referrals
    referral_discount_percent: int = Field(default=10, ge=0, le=100)
    referral_code_length: int = Field(default=8, ge=6, le=32)

    # Rate limiting
    rate_limit_enabled: bool = Field(default=True)
    rate_limit_storage_uri: str = Field(default="memory://")
    rate_limit_default: str = Field(default="60/minute")

    # Logging
    log_level: str = Field(default="info")
    log_file: str = Field(default="logs/app.log")

    # Pagination
    default_page_size: int = Field(default=20)
    max_page_size: int = Field(default=100)

    # ============================
    # Generic comma-separated parser
    # ============================
    @staticmethod
    def _parse_csv(value, default):
        if isinstance(value, str):
            items = [x.strip() for x in value.split(",") if x.strip()]
            return items if items else default
        if isinstance(value, list):
            return value
        return default

    @field_validator("cors_allowed_origins", mode="before")
    def validate_cors(cls, v):
        return cls._parse_csv(v, ["http://localhost:5173"])

    @field_validator("admin_emails", mode="before")
    def validate_admin_emails(cls, v):
        return [email.lower() for email in cls._parse_csv(v, [])]

    @property
    def database_url(self) -> str:
        if self.db_url:
            return self.db_url
        return "postgresql+psycopg2://{user}:{password}@{host}:{port}/{database}".format(
            user=self.db_username,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_database,
        )

    def is_admin_email(self, email: Optional[str]) -> bool:
        return bool(email) and email.lower() in self.admin_emails

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def load_settings():
    try:
        settings = Settings()
        return settings
    except ValidationError as e:
        print("❌ Validation Error:", e)
        raise


settings = load_settings()
