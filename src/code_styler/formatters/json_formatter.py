"""JSON formatter: the same tagged encoding used for transport."""

import json
from typing import Sequence

from ..findings.models import Finding, MergeRequestFinding
from ..findings.transport import finding_to_record
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render findings as a JSON array of tagged records."""

    def render(self, findings: Sequence[Finding]) -> None:
        print(self.format(findings))

    def format(self, findings: Sequence[Finding]) -> str:
        data = []
        for finding in findings:
            record = finding_to_record(finding)
            if record is None and isinstance(finding, MergeRequestFinding):
                record = {
                    "type": "merge_request",
                    "finding": {
                        "text": finding.text,
                        "source": {
                            "title": finding.source.title,
                            "description": finding.source.description,
                        },
                        "severity": finding.severity.value,
                    },
                }
            if record is not None:
                record["id"] = finding.identity
                data.append(record)
        return json.dumps(data, indent=2, ensure_ascii=False)
