"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for different deployment environments.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Optional
from enum import Enum
from pathlib import Path


class Environment(str, Enum):
    """Supported deployment environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Supported log levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class StorageBackend(str, Enum):
    """Backends able to hold the persisted favorites"""
    FILE = "file"
    REDIS = "redis"
    MEMORY = "memory"


class PlacesSettings(BaseSettings):
    """Google Maps Platform web service configuration"""

    api_key: Optional[str] = Field(
        default=None,
        description="Static API key sent as the 'key' query parameter"
    )
    base_url: str = Field(default="https://maps.googleapis.com/maps/api")
    timeout_seconds: float = Field(default=10.0, gt=0.0, le=60.0)
    nearby_radius_m: int = Field(default=5000, ge=1, le=50000)
    category: str = Field(default="veterinary_care")
    language: Optional[str] = Field(default=None)

    model_config = {
        "env_prefix": "PLACES_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class SearchSettings(BaseSettings):
    """Search coordinator behaviour"""

    debounce_ms: int = Field(default=500, ge=0, le=10000)
    # Seoul City Hall, used until a coordinate has been resolved
    fallback_latitude: float = Field(default=37.5665, ge=-90.0, le=90.0)
    fallback_longitude: float = Field(default=126.9780, ge=-180.0, le=180.0)

    model_config = {"env_prefix": "SEARCH_"}


class RedisSettings(BaseSettings):
    """Redis configuration for the shared favorites backend"""

    host: str = Field(default="localhost")
    port: int = Field(default=6379, ge=1, le=65535)
    password: Optional[str] = Field(default=None)
    db: int = Field(default=0, ge=0, le=15)
    socket_timeout: int = Field(default=5, ge=1, le=30)

    @property
    def url(self) -> str:
        """Generate Redis URL from configuration"""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"

    model_config = {"env_prefix": "REDIS_"}


class StorageSettings(BaseSettings):
    """Local durable key-value storage configuration"""

    backend: StorageBackend = Field(default=StorageBackend.FILE)
    file_path: str = Field(default="data/favorites.json")
    favorites_key: str = Field(default="favorites")

    @field_validator('backend', mode='before')
    @classmethod
    def normalize_backend(cls, v):
        """Accept backend names in any case"""
        if isinstance(v, str):
            return StorageBackend(v.lower())
        return v

    model_config = {"env_prefix": "STORAGE_"}


class LocationSettings(BaseSettings):
    """Device location provider configuration"""

    permission_granted: bool = Field(default=True)
    fixed_latitude: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    fixed_longitude: Optional[float] = Field(default=None, ge=-180.0, le=180.0)
    accuracy: str = Field(default="high")

    model_config = {"env_prefix": "LOCATION_"}


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="Vet Hospital Finder")
    environment: Environment = Field(default=Environment.DEVELOPMENT)

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(default="json")

    # Nested Settings
    places: PlacesSettings = Field(default_factory=PlacesSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    location: LocationSettings = Field(default_factory=LocationSettings)

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def get_storage_path(self) -> Path:
        """Get absolute path of the favorites file"""
        return Path(self.storage.file_path).resolve()

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings instance"""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment and files"""
    global settings
    settings = Settings()
    return settings
