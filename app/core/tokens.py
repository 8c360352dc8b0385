"""Invitation token generation."""
import secrets
from typing import Callable, Optional

from app.config import settings

TokenGenerator = Callable[[], str]


def generate_token(num_bytes: Optional[int] = None) -> str:
    """Return a URL-safe random token. Defaults to settings.invitation_token_bytes (256 bits)."""
    num_bytes = num_bytes or settings.invitation_token_bytes
    # Never go below 128 bits
    return secrets.token_urlsafe(max(num_bytes, 16))
