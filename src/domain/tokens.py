"""
Reset token generation.

The plain token only ever travels in the reset email; the database keeps its
SHA-256 digest so a leaked table cannot be replayed.
"""

import hashlib
import secrets

TOKEN_BYTES = 32


def generate_reset_token() -> str:
    """64 lowercase hex characters (32 bytes from the OS CSPRNG)."""
    return secrets.token_hex(TOKEN_BYTES)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()
