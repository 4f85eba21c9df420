"""Shared validation utilities"""

import re
import uuid
from typing import Optional

# secrets.token_urlsafe output: URL-safe base64 alphabet
SESSION_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]{16,64}$")


def validate_uuid(value: str) -> bool:
    """Validate UUID format"""
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def is_valid_session_token(value: Optional[str]) -> bool:
    """Cart session cookies that fail this check are treated as absent"""
    return bool(value) and SESSION_TOKEN_PATTERN.match(value) is not None
