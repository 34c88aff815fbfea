"""
Mapster Popup Generator
Fill the map popups of Mapster location posts from an address/contact file
"""

from .constants import (
    DEFAULT_ACF_FIELD_KEYS,
    LOCATION_POST_TYPE,
    CATEGORY_TAXONOMY,
    DEFAULT_CATEGORY_SLUG,
    TRIGGER_VALUE,
)
from .models import Address, Contact, Record, LocationPost, PopupFields, UpdateResult
from .config import Settings, get_settings
from .exceptions import (
    MapsterPopupError,
    ConfigurationError,
    DataUnavailable,
    NoMatch,
    AuthenticationError,
    AuthorizationError,
    AcfUnavailableError,
    RateLimitError,
    WordPressAPIError,
)
from .records import load_records, find_record, compose_description, describe_from_file
from .wordpress import WordPressClient
from .updater import PopupUpdater

__all__ = [
    # Constants
    'DEFAULT_ACF_FIELD_KEYS',
    'LOCATION_POST_TYPE',
    'CATEGORY_TAXONOMY',
    'DEFAULT_CATEGORY_SLUG',
    'TRIGGER_VALUE',
    # Models
    'Address',
    'Contact',
    'Record',
    'LocationPost',
    'PopupFields',
    'UpdateResult',
    # Config
    'Settings',
    'get_settings',
    # Exceptions
    'MapsterPopupError',
    'ConfigurationError',
    'DataUnavailable',
    'NoMatch',
    'AuthenticationError',
    'AuthorizationError',
    'AcfUnavailableError',
    'RateLimitError',
    'WordPressAPIError',
    # Records
    'load_records',
    'find_record',
    'compose_description',
    'describe_from_file',
    # WordPress
    'WordPressClient',
    'PopupUpdater',
]
