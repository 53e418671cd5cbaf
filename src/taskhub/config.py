"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with TASKHUB_ prefix
(a local .env file is read too, for development).

Learn: Settings are read once at startup and passed into create_app().
The signing secret and token lifetime are injected into the TokenService
from here — nothing in the auth layer reads environment at call time.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings

from taskhub.auth.roles import Role


class Settings(BaseSettings):
    """All app configuration. Set via TASKHUB_* env vars."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./taskhub.db"

    # Redis (rate limiting only; optional)
    redis_url: str = ""

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 24 * 60
    bcrypt_rounds: int = 10
    # Highest role a caller may pick for themselves at /register.
    registration_max_role: Role = Role.ADMIN

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # CORS
    cors_origins: list[str] = ["*"]

    # Rate limiting
    rate_limit_auth_rpm: int = 10  # per IP, login + register

    model_config = {"env_prefix": "TASKHUB_", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure sensitive defaults are changed in non-development environments."""
        if (
            self.environment != "development"
            and self.jwt_secret == "change-me-in-production"
        ):
            raise ValueError(
                "TASKHUB_JWT_SECRET must be set to a secure value in "
                "non-development environments. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("TASKHUB_BCRYPT_ROUNDS must be between 4 and 31")
        return self


# Singleton — used when create_app() is called without explicit settings
settings = Settings()
