"""Wraps an external formatter/linter binary as a diff checker.

The configured command runs once per diffed file with a matching extension;
its output is matched line by line against ``pattern``, which must define
``line`` and ``message`` groups. Linters exit non-zero when they find
something, so exit codes are ignored.
"""

import re
import shlex
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Sequence, Union

from ..changes.models import ChangeSet
from ..config import DEFAULT_FORMATTER_PATTERN
from ..diff.models import FileDiff
from ..execution import CommandExecutor
from ..findings.models import Finding, FindingSource, LineFinding, Severity
from ..logging_config import get_logger
from .base import DiffChecker

logger = get_logger(__name__)


class FormatterChecker(DiffChecker):
    source = FindingSource(
        title="Formatter",
        description="Rules from the formatter configuration in the root of the project",
    )

    def __init__(
        self,
        command: Union[str, Sequence[str]],
        project_path: Union[str, Path],
        executor: CommandExecutor,
        extensions: Iterable[str] = (".py",),
        exclude: Iterable[str] = (),
        pattern: str = DEFAULT_FORMATTER_PATTERN,
    ):
        self.argv = shlex.split(command) if isinstance(command, str) else list(command)
        self.project_path = Path(project_path)
        self.executor = executor
        self.extensions = tuple(extensions)
        self.exclude = frozenset(exclude)
        self.pattern = re.compile(pattern)
        if "line" not in self.pattern.groupindex or "message" not in self.pattern.groupindex:
            raise ValueError("formatter pattern needs 'line' and 'message' groups")

    def _wants(self, file_diff: FileDiff) -> bool:
        path = PurePosixPath(file_diff.new_path)
        return path.suffix in self.extensions and path.name not in self.exclude

    async def check_diff(self, changes: ChangeSet, diffs: Sequence[FileDiff]) -> List[Finding]:
        findings: List[Finding] = []
        for file_diff in diffs:
            if not self._wants(file_diff):
                continue
            output = [
                line
                async for line in self.executor.stream(
                    [*self.argv, file_diff.new_path], self.project_path
                )
            ]
            findings.extend(self.parse_output(file_diff, output))
        return findings

    def parse_output(self, file_diff: FileDiff, output: Iterable[str]) -> List[LineFinding]:
        findings: List[LineFinding] = []
        for text in output:
            match = self.pattern.search(text)
            if match is None:
                continue
            line = int(match.group("line"))
            findings.append(
                LineFinding(
                    path=file_diff.new_path,
                    line=line,
                    change_kind=file_diff.kind_at(line),
                    text=match.group("message").rstrip("."),
                    source=self.source,
                    severity=Severity.ERROR,
                )
            )
        logger.debug("%s: %d formatter finding(s)", file_diff.new_path, len(findings))
        return findings
