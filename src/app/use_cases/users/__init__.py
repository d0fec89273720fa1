"""
User Management Use Cases

All user-related business logic.
"""

from .load_context_use_case import LoadContextUseCase

__all__ = [
    "LoadContextUseCase",
]
