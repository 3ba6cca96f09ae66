import os
from typing import Optional
import logging

logger = logging.getLogger(__name__)

class Settings:
    """
    Application settings loaded from environment variables with validation.
    """

    def __init__(self):
        # Firebase settings
        self.firebase_api_key = self._get_env("FIREBASE_API_KEY")
        self.firebase_project_id = self._get_env("FIREBASE_PROJECT_ID")
        self.google_application_credentials = self._get_env("GOOGLE_APPLICATION_CREDENTIALS")

        # Security settings
        self.secret_key = self._get_env("SECRET_KEY", "a-very-secret-key-for-development-only")
        self.session_max_age = int(self._get_env("SESSION_MAX_AGE", "3600"))

        # API client settings
        self.api_base_url = self._get_env("API_BASE_URL", "http://localhost:8000")

        # Page routing
        self.login_path = self._get_env("LOGIN_PATH", "/login")
        self.dashboard_path = self._get_env("DASHBOARD_PATH", "/dashboard")

        # Server settings
        self.host = self._get_env("HOST", "0.0.0.0")
        self.port = int(self._get_env("PORT", "8000"))
        self.reload = self._get_env("RELOAD", "true").lower() == "true"

        # Rate limiting
        self.rate_limit_per_minute = int(self._get_env("RATE_LIMIT", "60"))

        # Validate configuration
        self._validate_config()

    def _get_env(self, key: str, default: Optional[str] = None) -> str:
        """
        Get an environment variable or return a default value
        """
        value = os.environ.get(key, default)
        if value is None:
            logger.warning(f"Environment variable {key} not set")
        return value

    def _validate_config(self):
        """
        Validate configuration and log warnings for missing values
        """
        if not self.firebase_api_key:
            logger.warning("FIREBASE_API_KEY not set. Signup and signin will be unavailable.")
        if not self.firebase_project_id and not self.google_application_credentials:
            logger.warning("No Firestore project configured. Profile and waste log storage will be no-ops.")

    def __str__(self) -> str:
        """
        Return a string representation of the settings, masking sensitive values
        """
        return (
            f"Settings("
            f"firebase_api_key={'*****' if self.firebase_api_key else None}, "
            f"firebase_project_id={self.firebase_project_id}, "
            f"google_application_credentials={self.google_application_credentials}, "
            f"secret_key={'*****' if self.secret_key else None}, "
            f"session_max_age={self.session_max_age}, "
            f"api_base_url={self.api_base_url}, "
            f"login_path={self.login_path}, "
            f"dashboard_path={self.dashboard_path}, "
            f"host={self.host}, "
            f"port={self.port}, "
            f"reload={self.reload}, "
            f"rate_limit_per_minute={self.rate_limit_per_minute}"
            f")"
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
