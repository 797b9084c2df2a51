"""Repository layer: one repository per record collection, per backend."""

from lexflow.db.repositories.base import Repository
from lexflow.db.repositories.local import LocalRepository, TimestampIdGenerator
from lexflow.db.repositories.remote import RemoteRepository

__all__ = [
    "LocalRepository",
    "RemoteRepository",
    "Repository",
    "TimestampIdGenerator",
]
