"""File-change records resolved from ``git diff --name-status`` output."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, Optional


@dataclass(frozen=True)
class FileChange(ABC):
    """Base for the four change variants.

    Equality is structural and includes the variant, so ``AddedFile("a")``
    and ``ModifiedFile("a")`` are distinct members of a change set.
    """

    @property
    @abstractmethod
    def current_path(self) -> Optional[str]:
        """Path that still exists after the change, or None for deletions."""

    @property
    @abstractmethod
    def diffable_path(self) -> Optional[str]:
        """Path whose content changed and can be diffed, or None."""


@dataclass(frozen=True)
class AddedFile(FileChange):
    path: str

    @property
    def current_path(self) -> Optional[str]:
        return self.path

    @property
    def diffable_path(self) -> Optional[str]:
        return self.path


@dataclass(frozen=True)
class DeletedFile(FileChange):
    path: str

    @property
    def current_path(self) -> Optional[str]:
        return None

    @property
    def diffable_path(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class ModifiedFile(FileChange):
    path: str

    @property
    def current_path(self) -> Optional[str]:
        return self.path

    @property
    def diffable_path(self) -> Optional[str]:
        return self.path


@dataclass(frozen=True)
class RenamedFile(FileChange):
    old_path: str
    new_path: str
    content_modified: bool

    @property
    def current_path(self) -> Optional[str]:
        return self.new_path

    @property
    def diffable_path(self) -> Optional[str]:
        # A pure rename has no new content to check.
        return self.new_path if self.content_modified else None


ChangeSet = FrozenSet[FileChange]
