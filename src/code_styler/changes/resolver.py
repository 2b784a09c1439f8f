"""Resolve framed name-status output into a change set.

Each record looks like ``%<path>% #<status>#`` and records are separated by
``@delimiter@``. For renames the path field holds ``<old>\\t<new>`` and the
status carries the similarity score, e.g. ``R087``.
"""

import re
from typing import Iterable, Iterator, Optional

from ..logging_config import get_logger
from .models import (
    AddedFile,
    ChangeSet,
    DeletedFile,
    FileChange,
    ModifiedFile,
    RenamedFile,
)

logger = get_logger(__name__)

DELIMITER = "@delimiter@"

# The status is the last #...# pair so paths may contain '#' and '%'.
_RECORD_RE = re.compile(r"%(?P<path>.*)%\s*#(?P<status>[^#]*)#\s*$", re.DOTALL)

_FULL_SIMILARITY = 100


def split_records(output: str) -> Iterator[str]:
    """Yield non-empty framed records, dropping the newline a shell may leave."""
    for record in output.split(DELIMITER):
        if record.startswith("\r\n"):
            record = record[2:]
        elif record.startswith("\n"):
            record = record[1:]
        if record:
            yield record


def parse_record(record: str) -> Optional[FileChange]:
    """Parse one framed status record. Returns None for skipped records."""
    match = _RECORD_RE.search(record)
    if match is None:
        logger.debug("Skipping malformed status record: %r", record)
        return None

    path = match.group("path")
    status = match.group("status").strip()

    if status == "A":
        return AddedFile(path)
    if status == "D":
        return DeletedFile(path)
    if status == "M":
        return ModifiedFile(path)
    if status.startswith("R"):
        parts = path.split("\t")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            logger.debug("Skipping rename record without an old/new pair: %r", record)
            return None
        return RenamedFile(parts[0], parts[1], content_modified=_similarity(status) != _FULL_SIMILARITY)

    logger.warning("Unknown status: %s for file: %s", status, path)
    return None


def _similarity(status: str) -> Optional[int]:
    try:
        return int(status[1:])
    except ValueError:
        return None


def resolve(status_output: str) -> ChangeSet:
    """Turn framed name-status output into a deduplicated change set."""
    changes = (parse_record(record) for record in split_records(status_output))
    return frozenset(change for change in changes if change is not None)


def resolve_all(outputs: Iterable[str]) -> ChangeSet:
    """Union of several comparisons, e.g. staged and branch output."""
    result: set = set()
    for output in outputs:
        result.update(resolve(output))
    return frozenset(result)
