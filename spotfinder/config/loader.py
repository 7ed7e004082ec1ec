"""
Configuration loader utility for environment-specific settings.
"""

import logging
import os
from pathlib import Path
from typing import Optional
from .settings import (
    Settings,
    Environment,
    GeocoderSettings,
    SearchSettings,
    CategorySettings,
    SecuritySettings,
)

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Utility class for loading environment-specific configurations"""

    @staticmethod
    def load_environment_config(environment: Optional[str] = None) -> Settings:
        """
        Load configuration for the specified environment.

        Args:
            environment: Target environment (development, staging, production, testing)
                        If None, uses ENVIRONMENT env var or defaults to development

        Returns:
            Settings instance with environment-specific configuration
        """
        if environment is None:
            environment = os.getenv("ENVIRONMENT", "development")

        env = Environment(environment.lower())
        env_file = Path(f".env.{env.value}")

        if env_file.exists():
            path = str(env_file)
            return Settings(
                _env_file=path,
                environment=env,
                geocoder=GeocoderSettings(_env_file=path),
                search=SearchSettings(_env_file=path),
                category=CategorySettings(_env_file=path),
                security=SecuritySettings(_env_file=path),
            )

        logger.warning(f"Environment file {env_file} not found, using default settings")
        return Settings(environment=env)

    @staticmethod
    def get_available_environments() -> list[str]:
        """Get list of available environment configurations"""
        env_files = []
        for env_file in Path(".").glob(".env.*"):
            env_name = env_file.name.replace(".env.", "", 1)
            if env_name in {e.value for e in Environment}:
                env_files.append(env_name)
        return sorted(env_files)

    @staticmethod
    def create_sample_env_file(environment: str, output_path: Optional[str] = None) -> str:
        """
        Create a sample .env file for the specified environment.

        Args:
            environment: Target environment
            output_path: Optional custom output path

        Returns:
            Path to the created sample file
        """
        env = Environment(environment.lower())

        if output_path is None:
            output_path = f".env.{env.value}.sample"

        defaults = Settings()
        category = defaults.category

        sample_content = f"""# Sample configuration for {env.value} environment
# Copy this file to .env.{env.value} and modify as needed

# Application Configuration
APP_NAME={defaults.app_name}
ENVIRONMENT={env.value}
DEBUG={'true' if env == Environment.DEVELOPMENT else 'false'}

# Server Configuration
HOST={defaults.host}
PORT={defaults.port}
RELOAD={'true' if env == Environment.DEVELOPMENT else 'false'}
WORKERS={1 if env == Environment.DEVELOPMENT else 4}

# Logging Configuration
LOG_LEVEL={defaults.log_level.value}
LOG_FORMAT={"text" if env == Environment.DEVELOPMENT else "json"}

# Geocoder (Nominatim) Configuration
GEOCODER_BASE_URL={defaults.geocoder.base_url}
GEOCODER_RESULT_LIMIT={defaults.geocoder.result_limit}
GEOCODER_TIMEOUT_SECONDS={defaults.geocoder.timeout_seconds}
GEOCODER_USER_AGENT=your-app/1.0 (contact: you@example.com)

# Proximity Search (Overpass) Configuration
SEARCH_OVERPASS_URL={defaults.search.overpass_url}
SEARCH_RADIUS_M={defaults.search.radius_m}
SEARCH_TIMEOUT_SECONDS={defaults.search.timeout_seconds}

# Category Filter
CATEGORY_LABEL={category.label}
CATEGORY_AMENITY_TYPES={','.join(category.amenity_types)}
CATEGORY_NAME_KEYWORDS={','.join(category.name_keywords)}
CATEGORY_CUISINE_KEYWORDS={','.join(category.cuisine_keywords)}

# Security Configuration
SECURITY_CORS_ORIGINS=*
"""

        with open(output_path, "w") as f:
            f.write(sample_content)

        return output_path


def load_config_for_environment(environment: Optional[str] = None) -> Settings:
    """Convenience function to load configuration for an environment"""
    return ConfigLoader.load_environment_config(environment)
