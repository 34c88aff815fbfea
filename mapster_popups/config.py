"""
Configuration management using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from pydantic import ConfigDict, Field
from typing import Dict, Optional
from pathlib import Path

from .constants import (
    ACF_FIELD_ROLES,
    CATEGORY_TAXONOMY,
    DEFAULT_ACF_FIELD_KEYS,
    DEFAULT_CATEGORY_SLUG,
    DEFAULT_DATA_FILE,
    DEFAULT_POPUP_BUTTON_ACTION,
    DEFAULT_POPUP_BUTTON_TEXT,
    DEFAULT_POPUP_IMAGE_SOURCE,
    DEFAULT_POPUP_OPEN_TRIGGER,
    DEFAULT_POPUP_STYLE_ID,
    LOCATION_POST_TYPE,
    REQUIRED_CAPABILITY,
)
from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # WordPress Configuration
    wp_url: str = "http://localhost"
    wp_username: Optional[str] = None
    wp_password: Optional[str] = None
    wp_user: Optional[str] = None  # Alias for wp_username
    wp_pass: Optional[str] = None  # Alias for wp_password
    required_capability: str = REQUIRED_CAPABILITY

    # Mapster post type and category
    post_type: str = LOCATION_POST_TYPE
    post_type_rest_base: Optional[str] = None  # resolved from /types when unset
    taxonomy: str = CATEGORY_TAXONOMY
    category_slug: str = DEFAULT_CATEGORY_SLUG

    # Records
    data_file: str = DEFAULT_DATA_FILE

    # Popup values
    popup_style_id: int = DEFAULT_POPUP_STYLE_ID
    popup_image_source: str = DEFAULT_POPUP_IMAGE_SOURCE
    popup_button_action: str = DEFAULT_POPUP_BUTTON_ACTION
    popup_open_trigger: str = DEFAULT_POPUP_OPEN_TRIGGER
    popup_button_text: str = DEFAULT_POPUP_BUTTON_TEXT
    acf_field_keys: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_ACF_FIELD_KEYS))

    # Request Behavior
    request_timeout: int = 30
    request_delay_ms: int = 0
    max_retries: int = 3

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # 'json' or 'text'
    log_dir: str = "logs"

    model_config = ConfigDict(
        env_file=(".env", "wp_config.env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def wp_user_final(self) -> Optional[str]:
        """Get WordPress username from either wp_username or wp_user"""
        return self.wp_username or self.wp_user

    @property
    def wp_pass_final(self) -> Optional[str]:
        """Get WordPress password from either wp_password or wp_pass"""
        return self.wp_password or self.wp_pass

    def require_credentials(self):
        """Raise if no WordPress application password is configured"""
        if not self.wp_user_final or not self.wp_pass_final:
            raise ConfigurationError(
                "Missing WP_USER/WP_PASS (or WP_USERNAME/WP_PASSWORD)."
            )

    def field_key_table(self) -> Dict[str, str]:
        """Return the role -> ACF field key table, checking every role is mapped"""
        missing = [role for role in ACF_FIELD_ROLES if not self.acf_field_keys.get(role)]
        if missing:
            raise ConfigurationError(f"acf_field_keys is missing roles: {', '.join(missing)}")
        return dict(self.acf_field_keys)

    def ensure_directories(self):
        """Create necessary directories if they don't exist"""
        Path(self.log_dir).mkdir(parents=True, exist_ok=True)


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create global settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings():
    """Reload settings from environment (useful for testing)"""
    global _settings
    _settings = None
    return get_settings()
