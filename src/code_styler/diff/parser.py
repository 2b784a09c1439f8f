"""Streaming parser for framed unified diff text.

Every input line is terminated by ``@delimiter@`` so that the parser never
has to guess where a line ends. Parsing is best-effort: a hunk header that
does not match the expected grammar seeds both line counters with 0 instead
of aborting the rest of the diff.
"""

import re
from typing import List, Optional, Tuple

from ..changes.resolver import split_records
from ..logging_config import get_logger
from .models import DiffLine, DiffLineKind, FileDiff

logger = get_logger(__name__)

FILE_HEADER_PREFIX = "diff --git"
HUNK_HEADER_PREFIX = "@@"

# Counts are optional: git writes "@@ -3 +3 @@" for one-line hunks.
_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,\d+)? \+(\d+)(?:,\d+)? @@")
_GIT_HEADER_RE = re.compile(r"^diff --git a/(?P<old>.+?) b/(?P<new>.+?)\s*$")

# Escapes git uses in C-style quoted paths; octal \NNN carries raw bytes.
_C_ESCAPES = {"a": 7, "b": 8, "t": 9, "n": 10, "v": 11, "f": 12, "r": 13, '"': 34, "\\": 92}
_OCTAL = frozenset("01234567")
_NULL_PATH = "/dev/null"


def parse_hunk_header(line: str) -> Tuple[int, int]:
    """Return (old_start, new_start) of a hunk header, (0, 0) when malformed."""
    match = _HUNK_RE.match(line)
    if match is None:
        logger.warning("Malformed hunk header, numbering from 0: %r", line)
        return 0, 0
    return int(match.group(1)), int(match.group(2))


def unquote_path(text: str) -> str:
    """Decode a path git wrote as a C-style quoted string.

    Unquoted text is returned unchanged.
    """
    if len(text) < 2 or not (text.startswith('"') and text.endswith('"')):
        return text
    body = text[1:-1]
    decoded = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\" or i + 1 == len(body):
            decoded.extend(char.encode("utf-8"))
            i += 1
            continue
        escaped = body[i + 1]
        octal = body[i + 1 : i + 4]
        if len(octal) == 3 and set(octal) <= _OCTAL:
            decoded.append(int(octal, 8) & 0xFF)
            i += 4
        elif escaped in _C_ESCAPES:
            decoded.append(_C_ESCAPES[escaped])
            i += 2
        else:
            decoded.extend(escaped.encode("utf-8"))
            i += 2
    return decoded.decode("utf-8", errors="replace")


def _split_quoted(text: str) -> Tuple[str, str]:
    """Split a leading quoted token off ``text``: (token, remainder)."""
    i = 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == '"':
            return text[: i + 1], text[i + 1 :].lstrip(" ")
        i += 1
    return text, ""


def _strip_prefix(path: str, prefix: str) -> str:
    return path[len(prefix) :] if path.startswith(prefix) else path


def parse_file_header(line: str) -> Tuple[str, str]:
    """Extract (old_path, new_path) from a ``diff --git`` line.

    The ``a/`` and ``b/`` prefixes are stripped and quoted paths decoded.
    When both sides name the same file the header is split in the middle,
    so paths containing `` b/`` stay whole. Headers without prefixes
    (``--no-prefix`` output) fall back to the last two tokens.
    """
    rest = line[len(FILE_HEADER_PREFIX) :].strip(" \t\r")

    if rest.startswith('"'):
        old_token, new_token = _split_quoted(rest)
        return (
            _strip_prefix(unquote_path(old_token), "a/"),
            _strip_prefix(unquote_path(new_token), "b/"),
        )
    if rest.endswith('"') and ' "' in rest:
        old_token, _, new_token = rest.rpartition(' "')
        return _strip_prefix(old_token, "a/"), _strip_prefix(unquote_path(f'"{new_token}'), "b/")

    # "a/<p> b/<p>": the separating space sits exactly in the middle.
    half, odd = divmod(len(rest) - 1, 2)
    if not odd and rest[half : half + 1] == " ":
        old_token, new_token = rest[:half], rest[half + 1 :]
        if old_token.startswith("a/") and new_token.startswith("b/") and old_token[2:] == new_token[2:]:
            return old_token[2:], new_token[2:]

    match = _GIT_HEADER_RE.match(line.rstrip())
    if match is not None:
        return match.group("old"), match.group("new")
    tokens = line.split()
    old_path = tokens[-2] if len(tokens) >= 4 else ""
    new_path = tokens[-1] if len(tokens) >= 4 else ""
    return old_path, new_path


def parse_marker_path(line: str, prefix: str) -> Optional[str]:
    """Path of a ``--- a/<path>`` or ``+++ b/<path>`` line, None for /dev/null.

    git ends the name with a tab when it contains a space; that tab is dropped.
    """
    name = line[4:]
    if name.endswith("\t"):
        name = name[:-1]
    name = unquote_path(name)
    if name == _NULL_PATH:
        return None
    return _strip_prefix(name, prefix)


class _FileAccumulator:
    """Lines and counters of the file section currently being parsed."""

    def __init__(self, old_path: Optional[str] = None, new_path: Optional[str] = None):
        self.old_path = old_path
        self.new_path = new_path
        self.lines: List[DiffLine] = []
        self.original_line: Optional[int] = None
        self.new_line: Optional[int] = None
        # Extended header lines before the first hunk may name the paths exactly.
        self.in_header = bool(old_path or new_path)

    def build(self) -> Optional[FileDiff]:
        if not self.old_path or not self.new_path:
            return None
        return FileDiff(old_path=self.old_path, new_path=self.new_path, lines=tuple(self.lines))

    def _take_header_path(self, line: str) -> None:
        if line.startswith("--- "):
            self.old_path = parse_marker_path(line, "a/") or self.old_path
        elif line.startswith("+++ "):
            self.new_path = parse_marker_path(line, "b/") or self.new_path
        elif line.startswith("rename from "):
            self.old_path = unquote_path(line[len("rename from ") :])
        elif line.startswith("rename to "):
            self.new_path = unquote_path(line[len("rename to ") :])

    def add(self, line: str) -> None:
        if self.in_header:
            self._take_header_path(line)
        if line.startswith(HUNK_HEADER_PREFIX):
            self.in_header = False
            self.original_line, self.new_line = parse_hunk_header(line)
            self.lines.append(DiffLine(DiffLineKind.METADATA, line))
        elif line.startswith("+"):
            self.lines.append(DiffLine(DiffLineKind.ADDED, line, new_line=self.new_line))
            if self.new_line is not None:
                self.new_line += 1
        elif line.startswith("-"):
            self.lines.append(DiffLine(DiffLineKind.REMOVED, line, original_line=self.original_line))
            if self.original_line is not None:
                self.original_line += 1
        else:
            self.lines.append(
                DiffLine(
                    DiffLineKind.UNCHANGED,
                    line,
                    original_line=self.original_line,
                    new_line=self.new_line,
                )
            )
            if self.original_line is not None:
                self.original_line += 1
            if self.new_line is not None:
                self.new_line += 1


def parse(diff_text: str) -> List[FileDiff]:
    """Parse framed diff text for one or more files into FileDiff records."""
    file_diffs: List[FileDiff] = []
    current = _FileAccumulator()

    for line in split_records(diff_text):
        if line.startswith(FILE_HEADER_PREFIX):
            flushed = current.build()
            if flushed is not None:
                file_diffs.append(flushed)
            current = _FileAccumulator(*parse_file_header(line))
        else:
            current.add(line)

    flushed = current.build()
    if flushed is not None:
        file_diffs.append(flushed)

    logger.debug("Parsed diff for %d file(s)", len(file_diffs))
    return file_diffs
