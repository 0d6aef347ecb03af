"""Persistence layer for the job board."""

from .repository import (
    DatabaseError,
    DuplicateRecordError,
    InvalidCredentialsError,
    JobBoardDatabase,
    RecordNotFoundError,
)

__all__ = [
    "DatabaseError",
    "DuplicateRecordError",
    "InvalidCredentialsError",
    "JobBoardDatabase",
    "RecordNotFoundError",
]
