"""
Mappings module - Contains the fleet header keyword dictionaries
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from config import FLEET_KEYWORDS_FILE, FLEET_KEYWORDS_MAPPING_ID
from schema import FLEET_FIELDS
from .fleet_mappings import FLEET_KEYWORD_MAPPINGS

logger = logging.getLogger(__name__)


def get_mapping_by_id(mapping_id: str):
    """
    Get a keyword mapping configuration by its ID.

    Args:
        mapping_id: The unique ID of the mapping configuration

    Returns:
        Mapping configuration dictionary or None if not found
    """
    for mapping in FLEET_KEYWORD_MAPPINGS:
        if mapping.get("id") == mapping_id:
            return mapping

    return None


def load_mapping_file(path: Path) -> dict:
    """
    Load a keyword mapping configuration from a JSON file.

    The file holds either a single mapping object or a list of them; with a
    list, the first entry is used.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, list):
        if not data:
            raise ValueError(f"Keyword file {path} contains no mappings")
        data = data[0]

    if not isinstance(data, dict) or not isinstance(data.get("fields"), dict):
        raise ValueError(f"Keyword file {path} must have a 'fields' object")

    return data


def _clean_keywords(fields: Dict[str, List[str]]) -> Dict[str, List[str]]:
    cleaned = {}
    for field in FLEET_FIELDS:
        keywords = fields.get(field) or []
        cleaned[field] = ["".join(str(k).lower().split()) for k in keywords if str(k).strip()]

    unknown = set(fields) - set(FLEET_FIELDS)
    if unknown:
        logger.warning(f"[Mappings] Ignoring unknown fields in keyword dictionary: {sorted(unknown)}")

    return cleaned


def get_field_keywords(mapping_id: Optional[str] = None) -> Dict[str, List[str]]:
    """
    Get the field -> keyword list dictionary used for header detection.

    Resolution order: explicit mapping_id, then FLEET_KEYWORDS_FILE, then the
    configured default mapping id.

    Args:
        mapping_id: Optional ID of a built-in mapping configuration

    Returns:
        Dictionary mapping every semantic field to its normalized keywords

    Raises:
        KeyError: If the mapping id is not known
    """
    if mapping_id is None and FLEET_KEYWORDS_FILE:
        mapping = load_mapping_file(Path(FLEET_KEYWORDS_FILE))
        logger.debug(f"[Mappings] Loaded keyword dictionary '{mapping.get('id')}' from {FLEET_KEYWORDS_FILE}")
        return _clean_keywords(mapping["fields"])

    mapping_id = mapping_id or FLEET_KEYWORDS_MAPPING_ID
    mapping = get_mapping_by_id(mapping_id)
    if mapping is None:
        raise KeyError(f"Mapping '{mapping_id}' not found.")

    return _clean_keywords(mapping["fields"])


__all__ = [
    "FLEET_KEYWORD_MAPPINGS",
    "get_mapping_by_id",
    "load_mapping_file",
    "get_field_keywords",
]
