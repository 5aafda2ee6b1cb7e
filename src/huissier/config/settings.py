"""
Service settings.

Values are layered, later layers winning: field defaults, config/default.yaml,
the per-environment YAML overlay, then environment variables (including
those loaded from the environment's .env file).
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml
from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STATEMENT = (
    "Clicking Sign or Approve only means you have proved this wallet is owned "
    "by you. This request will not trigger any blockchain transaction or cost "
    "any gas fee."
)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Backend credentials (JWT secret, Supabase service key) are optional at
    load time; components that need them raise ConfigurationFailure when
    they are missing, so the service reports a 500 instead of refusing to
    start.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Application
    APP_VERSION: str = "0.1.0"
    ENV: str = Field(default="development", description="Environment name")

    # API Server
    API_HOST: str = Field(default="0.0.0.0")
    API_PORT: int = Field(default=8000, ge=1024, le=65535)
    API_RELOAD: bool = Field(default=False)

    # CORS Configuration (explicit allow-list, never a wildcard)
    CORS_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
            "https://dgfun.xyz",
        ],
        description="Allowed CORS origins",
    )
    CORS_ALLOW_HEADERS: List[str] = Field(
        default=["authorization", "x-client-info", "apikey", "content-type"],
    )
    CORS_ALLOW_METHODS: List[str] = Field(default=["GET", "POST", "OPTIONS"])

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./huissier.db",
        description="Database connection URL",
    )
    DATABASE_ECHO: bool = Field(default=False)
    DATABASE_TIMEOUT: float = Field(
        default=10.0,
        description="Database pool checkout timeout in seconds",
    )

    # Identity backend
    IDENTITY_BACKEND: str = Field(
        default="local",
        description="Identity backend: local (JWT) or supabase",
    )
    JWT_SECRET_KEY: Optional[str] = Field(default=None, description="JWT secret key")
    JWT_ALGORITHM: str = Field(default="HS256")
    SESSION_TTL_MINUTES: int = Field(default=60, ge=1)
    SUPABASE_URL: Optional[str] = Field(default=None)
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(default=None)
    BACKEND_TIMEOUT: float = Field(
        default=10.0,
        description="Identity backend request timeout in seconds",
    )
    DEFAULT_REDIRECT_URL: str = Field(default="https://dgfun.xyz/")

    # Client
    SIGNING_TIMEOUT_SECONDS: float = Field(
        default=120.0,
        gt=0,
        description="How long the client waits for the wallet to sign",
    )

    # Sign-In With Solana challenge
    SIWS_STATEMENT: str = Field(default=DEFAULT_STATEMENT)
    SIWS_VERSION: str = Field(default="1")
    SIWS_CHAIN_ID: str = Field(default="mainnet")
    SIWS_RESOURCES: List[str] = Field(default=["https://dgfun.xyz"])

    # Nonces
    NONCE_LENGTH: int = Field(default=12, description="Nonce length in characters")
    NONCE_TTL_SECONDS: int = Field(default=300, ge=10)
    REQUIRE_ISSUED_NONCE: bool = Field(
        default=True,
        description="Reject nonces that were not issued or were already used",
    )
    NONCE_PURGE_INTERVAL_SECONDS: int = Field(
        default=600,
        ge=0,
        description="Seconds between expired-nonce purges (0 disables)",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # Observability - Metrics
    METRICS_ENABLED: bool = Field(
        default=True,
        description="Expose Prometheus metrics on /metrics",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"Invalid LOG_LEVEL. Must be one of: {allowed}")
        return v_upper

    @field_validator("IDENTITY_BACKEND")
    @classmethod
    def validate_identity_backend(cls, v: str) -> str:
        """Validate identity backend name."""
        allowed = ["local", "supabase"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid IDENTITY_BACKEND. Must be one of: {allowed}")
        return v_lower

    @field_validator("NONCE_LENGTH")
    @classmethod
    def validate_nonce_length(cls, v: int) -> int:
        """Nonces shorter than 8 characters are not accepted by SIWS."""
        if v < 8:
            raise ValueError("NONCE_LENGTH must be at least 8")
        return v


# Environment name -> (.env file, YAML overlay)
ENVIRONMENT_FILES: Dict[str, Tuple[str, str]] = {
    "production": (".env.production", "production.yaml"),
    "development": (".env.development", "development.yaml"),
    "test": (".env.test", "test.yaml"),
}


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    env: Optional[str] = None,
) -> Settings:
    """
    Build settings from config/ YAML files, a .env file and the environment.

    The project root is HUISSIER_ROOT, else the working directory. YAML
    values for keys that are set in the environment are dropped so the
    environment always wins.

    Args:
        config_file: YAML overlay in config/ (default: per environment)
        env_file: Dotenv file in the project root (default: per environment)
        env: Environment name (default: ENV variable, else development)

    Returns:
        Settings instance

    Raises:
        ValidationError: If a field fails validation
    """
    root = Path(os.getenv("HUISSIER_ROOT", Path.cwd()))
    environment = env or os.getenv("ENV", "development")

    default_env_file, default_overlay = ENVIRONMENT_FILES.get(
        environment, (".env", f"{environment}.yaml")
    )
    dotenv_path = root / (env_file or default_env_file)
    if dotenv_path.exists():
        load_dotenv(dotenv_path, override=True)

    values = _read_yaml(root / "config" / "default.yaml")
    values.update(_read_yaml(root / "config" / (config_file or default_overlay)))

    return Settings(**{k: v for k, v in values.items() if k not in os.environ})


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or initialize global settings singleton."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """Override global settings (for testing)."""
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to force re-initialization (for testing)."""
    global _settings
    _settings = None
