from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # Environment
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Database - PostgreSQL for production, SQLite for development
    database_url: str = Field(
        default="sqlite:///./pricing.db",
        alias="DATABASE_URL"
    )

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")

    # CORS - Back-office frontend URLs (comma-separated)
    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        alias="ALLOWED_ORIGINS"
    )

    # ==============================================
    # Pricing
    # ==============================================
    # Currency used when a rate band does not declare one
    default_currency: str = Field(default="EUR", alias="DEFAULT_CURRENCY")

    # Amounts in API responses are rounded to this many places (core keeps exact values)
    price_decimal_places: int = Field(default=2, alias="PRICE_DECIMAL_PLACES")

    # Rate limiting for quote endpoints
    rate_limit_storage_uri: str = Field(default="memory://", alias="RATE_LIMIT_STORAGE_URI")
    pricing_rate_limit: str = Field(default="60/minute", alias="PRICING_RATE_LIMIT")

    @field_validator('price_decimal_places')
    @classmethod
    def validate_decimal_places(cls, v: int) -> int:
        if v < 0 or v > 6:
            raise ValueError("PRICE_DECIMAL_PLACES must be between 0 and 6")
        return v

    @field_validator('default_currency')
    @classmethod
    def validate_currency(cls, v: str) -> str:
        if len(v) != 3:
            raise ValueError("DEFAULT_CURRENCY must be a 3-letter ISO code")
        return v.upper()

    @property
    def cors_origins(self) -> List[str]:
        """
        Parse allowed origins from comma-separated string.
        Returns a list suitable for CORSMiddleware.
        """
        if not self.allowed_origins:
            return ["http://localhost:3000"]

        origins = []
        for origin in self.allowed_origins.split(","):
            origin = origin.strip().rstrip("/")
            if origin and origin not in origins:
                origins.append(origin)

        return origins if origins else ["http://localhost:3000"]

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Initialize settings on module load
settings = get_settings()
