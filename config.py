from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

DEFAULT_JWT_SECRET = "change-this-in-production"


class Settings(BaseSettings):
    # Support both POSTGRES_* and standard PG* env vars (common in Railway/Render)
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_PORT: Optional[int] = None
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None

    # Fallback/Alternatives
    PGHOST: Optional[str] = None
    PGPORT: Optional[int] = None
    PGUSER: Optional[str] = None
    PGPASSWORD: Optional[str] = None
    PGDATABASE: Optional[str] = None

    DATABASE_URL: Optional[str] = None
    DB_ECHO: bool = False
    # Verify the database server certificate on non-local connections
    DB_SSL_VERIFY: bool = True

    # development and test accept the default signing key, anything else refuses it
    ENVIRONMENT: str = "production"

    # Access tokens
    JWT_SECRET_KEY: SecretStr = SecretStr(DEFAULT_JWT_SECRET)
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Restrict update/delete to the instructor who created the course
    COURSE_OWNERSHIP_REQUIRED: bool = False

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file="./.env",
        env_ignore_empty=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_jwt_secret(self) -> "Settings":
        if not self.is_development and self.JWT_SECRET_KEY.get_secret_value() == DEFAULT_JWT_SECRET:
            raise ValueError(
                "JWT secret key must be changed from default outside development. "
                "Set JWT_SECRET_KEY environment variable."
            )
        return self

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() in ("development", "test")

    @property
    def POSTGRES_URL(self) -> str:
        # 1. Prefer DATABASE_URL if available
        if self.DATABASE_URL:
            url = self.DATABASE_URL
            # Fix scheme for asyncpg
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql+asyncpg://", 1)
            elif url.startswith("postgresql://"):
                url = url.replace("postgresql://", "postgresql+asyncpg://", 1)

            # asyncpg does not understand sslmode, the engine passes its own ssl context
            if "?" in url:
                base_url, query = url.split("?", 1)
                params = [p for p in query.split("&") if not p.startswith("sslmode=")]
                if params:
                    url = f"{base_url}?{'&'.join(params)}"
                else:
                    url = base_url

            return url

        # 2. Construct from components (check both POSTGRES_* and PG*)
        host = self.POSTGRES_SERVER or self.PGHOST or "localhost"
        port = self.POSTGRES_PORT or self.PGPORT or 5432
        user = self.POSTGRES_USER or self.PGUSER or "postgres"
        password = self.POSTGRES_PASSWORD or self.PGPASSWORD or "postgres"
        db = self.POSTGRES_DB or self.PGDATABASE or "courses"

        return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db}"

    @property
    def is_local_database(self) -> bool:
        url = self.POSTGRES_URL
        return "localhost" in url or "127.0.0.1" in url


settings = Settings()
