"""
Custom exceptions for the Mapster popup generator
"""


class MapsterPopupError(Exception):
    """Base exception for all popup generator errors"""
    pass


class ConfigurationError(MapsterPopupError):
    """Settings are incomplete or inconsistent"""
    pass


class DataUnavailable(MapsterPopupError):
    """The address/contact records file could not be loaded"""
    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Records unavailable at {self.path}: {reason}")


class NoMatch(MapsterPopupError):
    """No record carries the requested name"""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No matching entry found for post title: {name}")


class AuthenticationError(MapsterPopupError):
    """Failed to authenticate with WordPress"""
    pass


class AuthorizationError(MapsterPopupError):
    """Authenticated user lacks the capability needed for the run"""
    def __init__(self, username: str, capability: str):
        self.username = username
        self.capability = capability
        super().__init__(f"User '{username}' lacks capability '{capability}'")


class AcfUnavailableError(MapsterPopupError):
    """ACF fields are not exposed for the location post type"""
    pass


class RateLimitError(MapsterPopupError):
    """Request was rate limited or blocked"""
    def __init__(self, message: str = "Rate limit exceeded", retry_after: int = None):
        super().__init__(message)
        self.retry_after = retry_after


class WordPressAPIError(MapsterPopupError):
    """WordPress API returned an error"""
    def __init__(self, status_code: int, message: str, response_body: str = None):
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(f"WordPress API error {status_code}: {message}")
