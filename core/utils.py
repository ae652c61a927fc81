import hashlib
import logging
import uuid
from typing import Any, Optional

logger = logging.getLogger(__name__)

CONTENT_HASH_LENGTH = 32


class ContentFingerprinter:
    """
    Pure logic for detecting whether an entity's embeddable text changed.
    """

    @staticmethod
    def calculate(composite_text: str) -> str:
        """
        Deterministic hash of the composite text an embedding is built from.
        Formula: SHA256(composite_text)[:32]
        """
        return hashlib.sha256(composite_text.encode('utf-8')).hexdigest()[:CONTENT_HASH_LENGTH]


def parse_uuid(value: Any) -> Optional[uuid.UUID]:
    """UUID form of value, or None when it is not a valid UUID."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        logger.debug(f"Not a valid UUID: {value!r}")
        return None
