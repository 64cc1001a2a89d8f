"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with BOOKSHELF_ prefix
(and an optional .env file in the working directory).

Learn: The JWT secret has NO default. If BOOKSHELF_JWT_SECRET is missing
or blank, building Settings raises a ValidationError and the app refuses
to start.
"""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")
MIN_PRODUCTION_SECRET_BYTES = 32


class Settings(BaseSettings):
    """All app configuration. Set via BOOKSHELF_* env vars."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./bookshelf.db"
    create_tables: bool = True

    # Auth
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_expire_hours: int = Field(default=24, gt=0)
    bcrypt_rounds: int = Field(default=14, ge=4, le=31)

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_prefix="BOOKSHELF_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("jwt_secret")
    @classmethod
    def secret_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("BOOKSHELF_JWT_SECRET must not be empty")
        return v

    @field_validator("jwt_algorithm")
    @classmethod
    def symmetric_algorithm(cls, v: str) -> str:
        if v not in HMAC_ALGORITHMS:
            raise ValueError(
                f"jwt_algorithm must be one of {', '.join(HMAC_ALGORITHMS)}"
            )
        return v

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Require a long secret outside development."""
        if (
            self.environment != "development"
            and len(self.jwt_secret.encode("utf-8")) < MIN_PRODUCTION_SECRET_BYTES
        ):
            raise ValueError(
                "BOOKSHELF_JWT_SECRET must be at least 32 bytes in "
                "non-development environments. Generate one with: "
                "bookshelf gen-secret"
            )
        return self


def load_settings(**overrides) -> Settings:
    """Build and validate settings once, at startup.

    Keyword overrides win over the environment (used by tests and the CLI).
    """
    return Settings(**overrides)
