"""GitHub Actions formatter: ``::error`` / ``::warning`` annotations."""

from typing import Sequence

from ..findings.models import FileFinding, Finding, LineFinding
from .base import BaseFormatter


def _escape_data(text: str) -> str:
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(text: str) -> str:
    # Property values additionally end at ':' and ','.
    return _escape_data(text).replace(":", "%3A").replace(",", "%2C")


class GithubFormatter(BaseFormatter):
    def render(self, findings: Sequence[Finding]) -> None:
        print(self.format(findings))

    def format(self, findings: Sequence[Finding]) -> str:
        lines: list[str] = []
        for f in findings:
            properties = []
            if isinstance(f, (LineFinding, FileFinding)):
                properties.append(f"file={_escape_property(f.path)}")
            if isinstance(f, LineFinding):
                properties.append(f"line={_escape_property(str(f.line))}")
            properties.append(f"title={_escape_property(f.source.title)}")
            lines.append(f"::{f.severity.value} {','.join(properties)}::{_escape_data(f.text)}")
        return "\n".join(lines)
