"""Merge-request checker for branch naming."""

from typing import List

from ..findings.models import Finding, FindingSource, MergeRequestFinding, Severity
from .base import MergeRequest, MergeRequestChecker

_CYRILLIC = range(0x0400, 0x0500)


class BranchNameChecker(MergeRequestChecker):
    source = FindingSource(
        title="MergeRequestChecker",
        description="Rules for merge request naming",
    )

    async def check(self, merge_request: MergeRequest) -> List[Finding]:
        if any(ord(char) in _CYRILLIC for char in merge_request.source_branch):
            return [
                MergeRequestFinding(
                    text="Branch name must not contain Cyrillic characters",
                    source=self.source,
                    severity=Severity.ERROR,
                )
            ]
        return []
