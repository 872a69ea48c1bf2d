from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings

MIN_JWT_SECRET_LENGTH = 32  # 256 bits

class Settings(BaseSettings):
    PROJECT_NAME: str = "Storefront API"
    DATABASE_URL: str = "sqlite:///./storefront.db"

    # JWT
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_MS: int = 86400000 # 24 hours

    # argon2 time cost
    PASSWORD_HASH_ROUNDS: int = 3

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Let anonymous clients browse the catalog (GET /api/products)
    ALLOW_ANONYMOUS_CATALOG_READ: bool = False

    @field_validator("JWT_SECRET")
    @classmethod
    def check_secret_length(cls, value: str) -> str:
        if len(value) < MIN_JWT_SECRET_LENGTH:
            raise ValueError(f"JWT_SECRET must be at least {MIN_JWT_SECRET_LENGTH} characters")
        return value

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
