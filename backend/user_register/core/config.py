"""Application configuration loaded from environment variables.

Settings for the SQLite store, session tokens, password peppers, the
verification-code lifecycle and outbound providers. Uses pydantic-settings
for validation and .env file support. The instance is frozen after load;
components copy the values they need at construction time.
"""

from typing import Literal

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum length for TOKEN_SECRET in production (256 bits = 32 bytes)
_MIN_TOKEN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application
    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # Database (single-file SQLite store)
    database_path: str = "./database.db"
    database_busy_timeout_seconds: float = 5.0

    # CORS
    # Never set to ["*"]: the API accepts Authorization headers.
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Session tokens
    token_secret: SecretStr = SecretStr("")
    token_issuer: str = "user-register"
    token_audience: str = "user-register"
    token_expire_minutes: int = 10

    # Password hashing
    # Rotate by moving the current pepper to PASSWORD_PEPPER_PREVIOUS and
    # setting a new PASSWORD_PEPPER_CURRENT.
    password_pepper_current: SecretStr = SecretStr("")
    password_pepper_previous: SecretStr = SecretStr("")
    bcrypt_rounds: int = 12

    # Mail validation codes
    mail_validation_ttl_minutes: int = 60
    mail_sender: Literal["console", "resend"] = "console"
    email_from: str = "noreply@user-register.local"
    resend_api_key: SecretStr = SecretStr("")

    # Address lookup
    viacep_base_url: str = "https://viacep.com.br/ws"

    # Upper bound for every outbound HTTP call (seconds)
    outbound_timeout_seconds: float = 10.0

    # Rate limiting
    # Format: "count/period" (e.g., "5/15minute", "3/hour")
    rate_limit_enabled: bool = True
    rate_limit_login: str = "5/15minute"
    rate_limit_register: str = "10/hour"
    rate_limit_forgot_password: str = "3/hour"

    @property
    def database_url(self) -> str:
        """Async database URL for SQLAlchemy."""
        return f"sqlite+aiosqlite:///{self.database_path}"

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Validate configuration invariants.

        Checks:
        - Token lifetime, code TTL and bcrypt cost are in range (all environments)
        - CORS must not use wildcard origin (all environments)
        - TOKEN_SECRET must be set and >= 32 chars in production
        - PASSWORD_PEPPER_CURRENT must be set in production
        - Resend delivery requires RESEND_API_KEY in production
        """
        if self.token_expire_minutes <= 0:
            msg = f"TOKEN_EXPIRE_MINUTES must be positive. Got: {self.token_expire_minutes}"
            raise ValueError(msg)
        if self.mail_validation_ttl_minutes <= 0:
            msg = (
                "MAIL_VALIDATION_TTL_MINUTES must be positive. "
                f"Got: {self.mail_validation_ttl_minutes}"
            )
            raise ValueError(msg)
        # bcrypt accepts cost factors 4..31
        if not 4 <= self.bcrypt_rounds <= 31:
            msg = f"BCRYPT_ROUNDS must be between 4 and 31. Got: {self.bcrypt_rounds}"
            raise ValueError(msg)

        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain '*' (wildcard). "
                "Set the exact frontend origin(s) instead."
            )
            raise ValueError(msg)

        if self.environment == "production":
            secret_value = self.token_secret.get_secret_value()
            if len(secret_value) < _MIN_TOKEN_SECRET_LENGTH:
                msg = (
                    f"TOKEN_SECRET must be at least {_MIN_TOKEN_SECRET_LENGTH} "
                    "characters in production. Generate with: "
                    'python -c "import secrets; print(secrets.token_hex(32))"'
                )
                raise ValueError(msg)
            if not self.password_pepper_current.get_secret_value():
                msg = "PASSWORD_PEPPER_CURRENT must be set in production."
                raise ValueError(msg)
            if (
                self.mail_sender == "resend"
                and not self.resend_api_key.get_secret_value()
            ):
                msg = "RESEND_API_KEY must be set when MAIL_SENDER=resend in production."
                raise ValueError(msg)

        return self


settings = Settings()
