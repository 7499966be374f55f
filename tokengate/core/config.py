"""
Configuration management using Pydantic Settings.
Supports multiple environments: development, staging, production.
"""

from pathlib import Path
from typing import Optional, List
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"


class Settings(BaseSettings):
    """Application settings with environment-based configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "QXB Token Gateway"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"

    # API
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: List[str] = ["*"]

    # Database
    db_path: str = "data/app.db"
    database_url: Optional[str] = None

    # Blockchain
    ethereum_rpc_url: str = "https://ethereum-sepolia-rpc.publicnode.com"
    contract_address: str = "0x5068a014aC8e691Be53848FE5872cbA9f8C4dA17"
    rpc_timeout: int = 10  # seconds
    rpc_max_retries: int = 3

    # Contract owner key, only read by the admin CLI commands
    private_key: Optional[str] = None

    # Security
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_hours: int = 24

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # json or console
    log_file: Optional[str] = None

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        allowed = ["development", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        if v not in ("HS256", "HS384", "HS512"):
            raise ValueError("Only HMAC JWT algorithms are supported")
        return v

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def uses_default_jwt_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET


# Global settings instance
settings = Settings()


class DatabaseConfig:
    """Database-specific configuration."""

    @staticmethod
    def get_database_url(url: Optional[str] = None) -> str:
        """Get database URL with an async driver."""
        url = url or settings.database_url or f"sqlite:///{settings.db_path}"
        if url.startswith("sqlite://"):
            return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @staticmethod
    def is_sqlite(url: str) -> bool:
        return url.startswith("sqlite")

    @staticmethod
    def get_sqlite_path(url: str) -> Optional[Path]:
        """Return the database file for a file-backed SQLite URL."""
        if not DatabaseConfig.is_sqlite(url):
            return None
        _, _, path = url.partition(":///")
        if not path or path == ":memory:":
            return None
        return Path(path)

    @staticmethod
    def get_engine_config(url: str) -> dict:
        """Get SQLAlchemy engine configuration."""
        if DatabaseConfig.is_sqlite(url):
            if DatabaseConfig.get_sqlite_path(url) is None:
                # In-memory databases live and die with their single connection
                from sqlalchemy.pool import StaticPool

                return {
                    "poolclass": StaticPool,
                    "connect_args": {"check_same_thread": False},
                }
            # Sessions queue for the one connection instead of sharing its transaction
            return {
                "pool_size": 1,
                "max_overflow": 0,
                "pool_timeout": 30,
            }
        return {
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
            "pool_recycle": 3600,
        }


class NetworkConfig:
    """Known networks and RPC client configuration."""

    NETWORK_NAMES = {
        1: "Ethereum Mainnet",
        11155111: "Sepolia Testnet",
    }

    @staticmethod
    def get_network_name(chain_id: int) -> str:
        return NetworkConfig.NETWORK_NAMES.get(chain_id, "Unknown Network")

    @staticmethod
    def get_rpc_config() -> dict:
        """Get Ethereum RPC client configuration."""
        return {
            "endpoint": settings.ethereum_rpc_url,
            "timeout": settings.rpc_timeout,
            "max_retries": settings.rpc_max_retries,
        }
