"""Per-line diff model built from unified diff output."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class DiffLineKind(str, Enum):
    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"
    UNCHANGED = "unchanged"
    METADATA = "metadata"


@dataclass(frozen=True)
class DiffLine:
    kind: DiffLineKind
    content: str
    original_line: Optional[int] = None
    new_line: Optional[int] = None

    def touches(self, line: int) -> bool:
        """True when either side of this line carries ``line``."""
        return self.original_line == line or self.new_line == line


@dataclass(frozen=True)
class FileDiff:
    """Diff of one file. ``lines`` keep the hunk order of the source diff."""

    old_path: str
    new_path: str
    lines: Tuple[DiffLine, ...] = ()

    def line_at(self, line: int) -> Optional[DiffLine]:
        """First diff line whose new-side number is ``line``."""
        for diff_line in self.lines:
            if diff_line.new_line == line:
                return diff_line
        return None

    def kind_at(self, line: int, default: DiffLineKind = DiffLineKind.UNCHANGED) -> DiffLineKind:
        diff_line = self.line_at(line)
        return diff_line.kind if diff_line is not None else default

    @property
    def body(self) -> str:
        """Diff body reconstructed from the line contents."""
        return "\n".join(diff_line.content for diff_line in self.lines)


DiffModel = List[FileDiff]
