"""Flags image files stored in formats the project wants to avoid."""

from typing import Iterable, List, Optional, Sequence

from ..changes.models import ChangeSet
from ..diff.models import FileDiff
from ..findings.models import FileFinding, Finding, FindingSource, Severity
from .base import DiffChecker


class ImageChecker(DiffChecker):
    source = FindingSource(
        title="ImageChecker",
        description="Rules for graphic files stored in the project",
    )

    def __init__(self, extensions: Iterable[str] = (".jpg", ".jpeg")):
        self.extensions = tuple(ext.lower() for ext in extensions)

    async def check_diff(self, changes: ChangeSet, diffs: Sequence[FileDiff]) -> List[Finding]:
        paths = sorted(p for p in (change.current_path for change in changes) if p is not None)
        findings: List[Finding] = []
        for path in paths:
            finding = self._finding_for(path)
            if finding is not None:
                findings.append(finding)
        return findings

    def _finding_for(self, path: str) -> Optional[FileFinding]:
        if not path.lower().endswith(self.extensions):
            return None
        return FileFinding(
            path=path,
            text="Consider a format other than JPEG for this image",
            source=self.source,
            severity=Severity.WARNING,
        )
