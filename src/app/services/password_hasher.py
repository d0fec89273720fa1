from abc import ABC, abstractmethod


class IPasswordHasher(ABC):
    """Adaptive password hashing primitive - application layer"""

    @abstractmethod
    def hash(self, password: str) -> str:
        """Hash a plain text password"""
        pass

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison of a plain text password against a hash"""
        pass
