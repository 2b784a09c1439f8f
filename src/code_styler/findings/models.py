"""Finding variants reported by checkers.

Three scopes exist: the merge request as a whole, a whole file, and a single
line of a file. Only line findings are subject to diff-relevance filtering.
"""

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union

from ..diff.models import DiffLineKind


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class FindingScope(str, Enum):
    MERGE_REQUEST = "merge_request"
    FILE = "file"
    LINE = "line"


@dataclass(frozen=True)
class FindingSource:
    """Checker or rule family a finding comes from."""

    title: str
    description: str


def _identity(*parts: str) -> str:
    digest = hashlib.sha256("\x1f".join(parts).encode("utf-8")).hexdigest()
    return digest[:16]


@dataclass(frozen=True)
class MergeRequestFinding:
    text: str
    source: FindingSource
    severity: Severity = Severity.ERROR

    scope: ClassVar[FindingScope] = FindingScope.MERGE_REQUEST

    @property
    def identity(self) -> str:
        return _identity(self.scope.value, self.text)

    @property
    def location(self) -> str:
        return "merge request"


@dataclass(frozen=True)
class FileFinding:
    path: str
    text: str
    source: FindingSource
    severity: Severity = Severity.ERROR

    scope: ClassVar[FindingScope] = FindingScope.FILE

    @property
    def identity(self) -> str:
        return _identity(self.scope.value, self.path, self.text)

    @property
    def location(self) -> str:
        return self.path


@dataclass(frozen=True)
class LineFinding:
    path: str
    line: Union[int, str]
    change_kind: DiffLineKind
    text: str
    source: FindingSource
    severity: Severity = Severity.ERROR

    scope: ClassVar[FindingScope] = FindingScope.LINE

    @property
    def identity(self) -> str:
        return _identity(self.scope.value, self.path, str(self.line), self.text)

    @property
    def line_number(self) -> Optional[int]:
        """Line as an integer, or None when the checker reported something else."""
        if isinstance(self.line, bool):
            return None
        if isinstance(self.line, int):
            return self.line
        try:
            return int(str(self.line).strip())
        except ValueError:
            return None

    @property
    def location(self) -> str:
        return f"{self.path}:{self.line}"


Finding = Union[MergeRequestFinding, FileFinding, LineFinding]
