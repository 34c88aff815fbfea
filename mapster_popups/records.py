"""
Address/contact records: loading the JSON file and composing popup descriptions
"""

import json
import logging
from pathlib import Path
from typing import List, Sequence, Tuple, Union

from pydantic import ValidationError

from .exceptions import DataUnavailable, NoMatch
from .models import Record

logger = logging.getLogger(__name__)


def load_records(path: Union[str, Path]) -> List[Record]:
    """
    Load every record from a JSON array file.

    Entries that are not JSON objects are skipped with a warning.

    Args:
        path: Location of the records file

    Returns:
        Records in file order

    Raises:
        DataUnavailable: file missing, unreadable, invalid JSON or not an array
    """
    path = Path(path)
    if not path.exists():
        raise DataUnavailable(path, "file not found")

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DataUnavailable(path, f"could not read file ({e})") from e

    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DataUnavailable(path, f"JSON parsing error: {e.msg}") from e

    if not isinstance(decoded, list):
        raise DataUnavailable(path, f"expected a JSON array, got {type(decoded).__name__}")

    records = []
    for index, entry in enumerate(decoded):
        if not isinstance(entry, dict):
            logger.warning(f"⚠️ Skipping entry {index} in {path}: not an object")
            continue
        try:
            records.append(Record.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"⚠️ Skipping entry {index} in {path}: {e.error_count()} invalid field(s)")

    logger.debug(f"Loaded {len(records)} records from {path}")
    return records


def find_record(records: Sequence[Record], name: str) -> Record:
    """Return the first record whose name equals ``name`` exactly"""
    for record in records:
        if record.name is not None and record.name == name:
            return record
    raise NoMatch(name)


def format_description(record: Record) -> str:
    """Four lines: street, "postal_code city", email, phone; trimmed as a whole"""
    address = record.address
    contact = record.contact
    text = f"{address.street}\n{address.postal_code} {address.city}\n{contact.email}\n{contact.phone}"
    return text.strip()


def match_description(records: Sequence[Record], target_name: str) -> Tuple[str, bool]:
    """Return the description and whether a record matched; no match logs a warning"""
    try:
        record = find_record(records, target_name)
    except NoMatch as e:
        logger.warning(f"⚠️ {e}")
        return '', False
    return format_description(record), True


def compose_description(records: Sequence[Record], target_name: str) -> str:
    """
    Compose the popup description for the entity named ``target_name``.

    Matching is exact and case-sensitive. When several records share the
    name the first one in sequence order is used.

    Returns:
        The description, or '' when no record matches
    """
    description, _ = match_description(records, target_name)
    return description


def describe_from_file(path: Union[str, Path], target_name: str) -> str:
    """Load the records file and compose; an unavailable file yields ''"""
    try:
        records = load_records(path)
    except DataUnavailable as e:
        logger.error(f"❌ {e}")
        return ''
    return compose_description(records, target_name)
