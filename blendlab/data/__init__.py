"""Data access layer for blend-lab."""

from .repository import (
    ReferenceDataRepository,
    get_repository,
)

__all__ = [
    "ReferenceDataRepository",
    "get_repository",
]
