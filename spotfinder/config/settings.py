"""
Configuration management system using Pydantic Settings.
Supports environment-based configuration for different deployment environments.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode
from typing import Annotated, Optional, Dict, Any, List, Literal
from enum import Enum
import os


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


DEFAULT_USER_AGENT = "SpotFinder/1.0 (nearest spot lookup)"


# Later files win; missing files are skipped
ENV_FILES = (".env", f".env.{os.getenv('ENVIRONMENT', 'development').lower()}")


def _split_csv(v):
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    return v


class GeocoderSettings(BaseSettings):
    """Nominatim geocoder configuration"""

    base_url: str = Field(default="https://nominatim.openstreetmap.org")
    result_limit: int = Field(default=1, ge=1, le=50)
    timeout_seconds: float = Field(default=10.0, gt=0, le=120)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)

    model_config = {"env_prefix": "GEOCODER_", "env_file": ENV_FILES, "extra": "ignore"}


class SearchSettings(BaseSettings):
    """Overpass proximity search configuration"""

    overpass_url: str = Field(default="https://overpass-api.de/api/interpreter")
    radius_m: float = Field(default=2000.0, gt=0, le=50000)
    # Used for both the [timeout:N] query budget and the HTTP timeout
    timeout_seconds: int = Field(default=25, ge=1, le=180)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)

    model_config = {"env_prefix": "SEARCH_", "env_file": ENV_FILES, "extra": "ignore"}


class CategorySettings(BaseSettings):
    """Tag filter describing which points of interest count as a match"""

    label: str = Field(default="chicken", description="Human-readable category name")
    amenity_types: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["restaurant", "fast_food"]
    )
    name_keywords: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["chicken", "wing", "pollo", "peri-peri", "periperi"]
    )
    cuisine_keywords: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["chicken", "fried_chicken", "wings"]
    )

    @field_validator('amenity_types', 'name_keywords', 'cuisine_keywords', mode='before')
    @classmethod
    def parse_keyword_lists(cls, v):
        """Parse comma-separated keyword lists from environment variables"""
        return _split_csv(v)

    model_config = {"env_prefix": "CATEGORY_", "env_file": ENV_FILES, "extra": "ignore"}


class SecuritySettings(BaseSettings):
    """CORS configuration"""

    cors_origins: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(
        default_factory=lambda: ["GET", "POST"]
    )
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from environment variable or list"""
        return _split_csv(v) or ["*"]

    model_config = {"env_prefix": "SECURITY_", "env_file": ENV_FILES, "extra": "ignore"}


class Settings(BaseSettings):
    """Main application settings"""

    # Application Configuration
    app_name: str = Field(default="Nearest Spot Finder")
    app_version: str = Field(default="1.0.0")
    environment: Environment = Field(default=Environment.DEVELOPMENT)
    debug: bool = Field(default=False)

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = Field(default=False)
    workers: int = Field(default=1, ge=1, le=16)

    # Logging Configuration
    log_level: LogLevel = Field(default=LogLevel.INFO)
    # "json" or "text"; LOG_PATTERN only applies to text output
    log_format: Literal["json", "text"] = Field(default="json")
    log_pattern: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    log_file: Optional[str] = Field(default=None)

    # Nested Settings
    geocoder: GeocoderSettings = Field(default_factory=GeocoderSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    category: CategorySettings = Field(default_factory=CategorySettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)

    @field_validator('log_format', mode='before')
    @classmethod
    def normalize_log_format(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator('environment', mode='before')
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment setting"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def get_cors_config(self) -> Dict[str, Any]:
        """Get CORS configuration for FastAPI"""
        return {
            "allow_origins": self.security.cors_origins,
            "allow_credentials": self.security.cors_allow_credentials,
            "allow_methods": self.security.cors_allow_methods,
            "allow_headers": self.security.cors_allow_headers,
        }

    model_config = {
        "env_file": ENV_FILES,
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


def use_settings(new_settings: Settings) -> Settings:
    """Install an explicitly loaded settings object as the global instance"""
    global settings
    settings = new_settings
    return settings
