"""
Pydantic data models for type safety and validation
"""

from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Any, Dict, List, Optional
from datetime import datetime


def _as_text(value: Any) -> str:
    """Render a JSON scalar the way it reads in a text block; null becomes ''"""
    if value is None:
        return ''
    if isinstance(value, bool):
        return '1' if value else ''
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float, str)):
        return str(value)
    return ''


class Address(BaseModel):
    """Postal address of a record"""

    street: str = ''
    city: str = ''
    postal_code: str = ''

    @field_validator('street', 'city', 'postal_code', mode='before')
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)

    model_config = ConfigDict(extra='ignore')


class Contact(BaseModel):
    """Contact channels of a record"""

    email: str = ''
    phone: str = ''

    @field_validator('email', 'phone', mode='before')
    @classmethod
    def coerce_text(cls, v):
        return _as_text(v)

    model_config = ConfigDict(extra='ignore')


class Record(BaseModel):
    """One address/contact entry from the records file"""

    name: Optional[str] = None
    address: Address = Field(default_factory=Address)
    contact: Contact = Field(default_factory=Contact)

    @field_validator('name', mode='before')
    @classmethod
    def strict_name(cls, v):
        """Only string names can ever equal a post title"""
        return v if isinstance(v, str) else None

    @field_validator('address', 'contact', mode='before')
    @classmethod
    def empty_when_not_object(cls, v):
        return v if isinstance(v, dict) else {}

    model_config = ConfigDict(extra='ignore')


class LocationPost(BaseModel):
    """A published Mapster location post as seen through the REST API"""

    id: int
    title: str = ''
    status: str = 'publish'
    has_acf: bool = False


class PopupFields(BaseModel):
    """Popup values written into a location's ACF field group"""

    enabled: int = 1
    style_id: int
    header: str
    image_source: str
    body: str = ''
    button_action: str
    open_trigger: str
    button_text: str

    def to_acf(self, field_keys: Dict[str, str]) -> Dict[str, Any]:
        """
        Render the values as an ACF payload keyed by field key.

        Args:
            field_keys: role -> ACF field key table

        Returns:
            Nested dict ready to send as the post's ``acf`` attribute
        """
        return {
            field_keys['enable_popup']: self.enabled,
            field_keys['popup_style']: self.style_id,
            field_keys['popup_fields']: {
                field_keys['header']: self.header,
                field_keys['image']: self.image_source,
                field_keys['body']: self.body or '',
                field_keys['button_action']: self.button_action,
                field_keys['trigger']: self.open_trigger,
                field_keys['button_text']: self.button_text,
            },
        }


class UpdateResult(BaseModel):
    """Result of a popup update run"""

    total: int = 0
    updated: int = 0
    matched: int = 0
    unmatched: int = 0
    tagged: int = 0
    skipped: int = 0
    failed: int = 0
    dry_run: bool = False
    aborted: bool = False
    abort_reason: Optional[str] = None
    records_loaded: int = 0
    errors: List[Dict[str, Any]] = Field(default_factory=list)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage"""
        if self.total == 0:
            return 0.0
        return (self.updated / self.total) * 100

    @property
    def duration_seconds(self) -> Optional[float]:
        """Calculate duration in seconds"""
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None
