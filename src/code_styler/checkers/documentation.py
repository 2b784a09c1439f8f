"""Docstring checker for Python sources touched by the diff.

Reports public classes and functions without a docstring, and parameters of
documented public functions that the docstring never mentions. Only lines
that are part of the file's diff are reported.
"""

import ast
import asyncio
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from ..changes.models import ChangeSet
from ..diff.models import DiffLine, FileDiff
from ..findings.models import Finding, FindingSource, LineFinding, Severity
from ..logging_config import get_logger
from .base import DiffChecker

logger = get_logger(__name__)

_IMPLICIT_PARAMS = frozenset({"self", "cls"})

_FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]


def _is_public(name: str) -> bool:
    return not name.startswith("_")


class _DocstringVisitor(ast.NodeVisitor):
    """Collects (line, message) pairs for undocumented public API."""

    def __init__(self) -> None:
        self.messages: List[Tuple[int, str]] = []

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        if not _is_public(node.name):
            return
        if ast.get_docstring(node) is None:
            self.messages.append((node.lineno, f'Public class "{node.name}" has no docstring'))
        for child in node.body:
            if isinstance(child, (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)):
                self.visit(child)

    def visit_FunctionDef(self, node: _FunctionNode) -> None:
        if not _is_public(node.name):
            return
        docstring = ast.get_docstring(node)
        if docstring is None:
            self.messages.append((node.lineno, f'Public function "{node.name}" has no docstring'))
            return
        for arg in _parameters(node):
            if arg.arg in _IMPLICIT_PARAMS or arg.arg in docstring:
                continue
            self.messages.append(
                (
                    arg.lineno,
                    f'Parameter "{arg.arg}" of public function "{node.name}" is not documented',
                )
            )

    visit_AsyncFunctionDef = visit_FunctionDef


def _parameters(node: _FunctionNode) -> List[ast.arg]:
    args = node.args
    params = [*args.posonlyargs, *args.args, *args.kwonlyargs]
    if args.vararg is not None:
        params.append(args.vararg)
    if args.kwarg is not None:
        params.append(args.kwarg)
    return params


def find_undocumented(source: str) -> List[Tuple[int, str]]:
    """(line, message) pairs for a module's undocumented public API."""
    visitor = _DocstringVisitor()
    visitor.visit(ast.parse(source))
    return sorted(visitor.messages)


class DocumentationChecker(DiffChecker):
    source = FindingSource(
        title="Documentation",
        description="Community rules for documenting public code",
    )

    def __init__(self, project_path: Union[str, Path], extensions: Iterable[str] = (".py",)):
        self.project_path = Path(project_path)
        self.extensions = tuple(extensions)

    async def check_diff(self, changes: ChangeSet, diffs: Sequence[FileDiff]) -> List[Finding]:
        findings: List[Finding] = []
        for file_diff in diffs:
            if PurePosixPath(file_diff.new_path).suffix not in self.extensions:
                continue
            source = await asyncio.to_thread(self._read, file_diff.new_path)
            if source is None:
                continue
            findings.extend(self._check_file(file_diff, source))
        return findings

    def _read(self, relative_path: str) -> Optional[str]:
        path = self.project_path / relative_path
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read %s: %s", path, e)
            return None

    def _check_file(self, file_diff: FileDiff, source: str) -> List[LineFinding]:
        try:
            messages = find_undocumented(source)
        except SyntaxError as e:
            logger.warning("Cannot parse %s: %s", file_diff.new_path, e)
            return []

        findings: List[LineFinding] = []
        for line, message in messages:
            diff_line = _touching(file_diff.lines, line)
            if diff_line is None:
                continue
            findings.append(
                LineFinding(
                    path=file_diff.new_path,
                    line=line,
                    change_kind=diff_line.kind,
                    text=message,
                    source=self.source,
                    severity=Severity.ERROR,
                )
            )
        return findings


def _touching(lines: Sequence[DiffLine], line: int) -> Optional[DiffLine]:
    for diff_line in lines:
        if diff_line.touches(line):
            return diff_line
    return None
