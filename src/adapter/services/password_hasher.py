import base64
import hashlib

import bcrypt

from src.app.services.password_hasher import IPasswordHasher


def _prepare(password: str) -> bytes:
    # bcrypt only accepts 72 bytes; a base64 SHA-256 digest is always 44
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


class BcryptPasswordHasher(IPasswordHasher):
    """
    bcrypt implementation of IPasswordHasher (cost factor 12 by default).

    Passwords are pre-hashed with SHA-256 so every character counts and
    passwords of any length hash and verify.
    """

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(_prepare(password), bcrypt.gensalt(self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_prepare(password), password_hash.encode())
        except ValueError:
            # Malformed hash
            return False
