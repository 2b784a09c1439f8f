"""Change-set resolution from version-control status output."""

from .models import (
    AddedFile,
    ChangeSet,
    DeletedFile,
    FileChange,
    ModifiedFile,
    RenamedFile,
)
from .resolver import DELIMITER, resolve, resolve_all

__all__ = [
    "AddedFile",
    "ChangeSet",
    "DeletedFile",
    "FileChange",
    "ModifiedFile",
    "RenamedFile",
    "DELIMITER",
    "resolve",
    "resolve_all",
]
