"""Concurrent checker orchestration.

All diff checkers of a run share one read-only ``(changes, diffs)`` snapshot
and run as separate asyncio tasks. The coordinator collects every result
itself, so checkers never touch the aggregate list. The first checker to
fail cancels the others and its exception is re-raised unchanged: a run
either returns every checker's findings or none.
"""

import asyncio
from pathlib import PurePosixPath
from typing import Iterable, List, Sequence

from .changes.models import ChangeSet
from .checkers.base import DiffChecker, MergeRequest, MergeRequestChecker
from .diff.models import FileDiff
from .findings.models import Finding
from .logging_config import get_logger

logger = get_logger(__name__)


def _checker_name(checker: object) -> str:
    source = getattr(checker, "source", None)
    return getattr(source, "title", None) or type(checker).__name__


async def _gather_fail_fast(aws: Sequence, names: Sequence[str]) -> List[List[Finding]]:
    """Await coroutines concurrently, cancelling the rest on the first failure.

    Results are returned in submission order.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        failed = [task for task in tasks if task in done and not task.cancelled() and task.exception()]
        if failed:
            first = failed[0]
            logger.error(
                "Checker %s failed: %s", names[tasks.index(first)], first.exception()
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            raise first.exception()
        return [task.result() for task in tasks]
    finally:
        # Reached with live tasks only when the coordinator itself is cancelled.
        for task in tasks:
            if not task.done():
                task.cancel()


async def run_checkers(
    changes: ChangeSet,
    diffs: Sequence[FileDiff],
    checkers: Sequence[DiffChecker],
) -> List[Finding]:
    """Run every diff checker on the same snapshot and concatenate their findings."""
    snapshot_changes = frozenset(changes)
    snapshot_diffs = tuple(diffs)
    names = [_checker_name(checker) for checker in checkers]
    logger.debug("Running %d diff checker(s): %s", len(checkers), ", ".join(names))

    results = await _gather_fail_fast(
        [checker.check_diff(snapshot_changes, snapshot_diffs) for checker in checkers], names
    )

    findings: List[Finding] = []
    for name, result in zip(names, results):
        logger.debug("%s: %d finding(s)", name, len(result))
        findings.extend(result)
    return findings


async def run_merge_request_checkers(
    merge_request: MergeRequest, checkers: Sequence[MergeRequestChecker]
) -> List[Finding]:
    """Run metadata-only checkers and concatenate their findings."""
    names = [_checker_name(checker) for checker in checkers]
    results = await _gather_fail_fast([checker.check(merge_request) for checker in checkers], names)
    findings: List[Finding] = []
    for result in results:
        findings.extend(result)
    return findings


def diffable_paths(changes: ChangeSet) -> List[str]:
    """Paths with new content to diff: added, modified, renamed-with-changes."""
    paths = {change.diffable_path for change in changes}
    paths.discard(None)
    return sorted(paths)


def is_excluded(path: str, excludes: Iterable[str]) -> bool:
    """True when an exclude entry matches ``path``.

    An entry matches when it equals the path, when it contains ``/`` and
    prefixes the path, or when it equals one of the path's components.
    """
    components = PurePosixPath(path).parts
    for exclude in excludes:
        if not exclude:
            continue
        if exclude == path:
            return True
        if "/" in exclude:
            if path.startswith(exclude):
                return True
        elif exclude in components:
            return True
    return False


def exclude_paths(paths: Iterable[str], excludes: Iterable[str]) -> List[str]:
    excludes = list(excludes)
    kept = []
    for path in paths:
        if is_excluded(path, excludes):
            logger.debug("Excluded from analysis: %s", path)
        else:
            kept.append(path)
    return kept
