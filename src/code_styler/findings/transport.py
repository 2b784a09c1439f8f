"""Cross-process delivery of finding lists.

Findings travel as a JSON array of tagged records::

    [{"type": "line", "finding": {"path": ..., "line": ..., ...}},
     {"type": "file", "finding": {"path": ..., ...}}]

Merge-request findings have no place in a file list and are not sent.
The receiving side owns a ``FindingReceiver`` for exactly one payload;
cancellation is requested through an ``asyncio.Event`` token.
"""

from __future__ import annotations

import asyncio
import json
import time
from typing import Any, Iterable, Optional

from ..diff.models import DiffLineKind
from ..exceptions import ReceiveCancelledError, ReceiveDecodeError, SendTimeoutError
from ..logging_config import get_logger
from .models import FileFinding, Finding, FindingSource, LineFinding, Severity

logger = get_logger(__name__)

_FILE_TAG = "file"
_LINE_TAG = "line"


def _source_dict(source: FindingSource) -> dict[str, str]:
    return {"title": source.title, "description": source.description}


def finding_to_record(finding: Finding) -> Optional[dict[str, Any]]:
    """Tagged record for a finding, or None for merge-request findings."""
    if isinstance(finding, LineFinding):
        return {
            "type": _LINE_TAG,
            "finding": {
                "path": finding.path,
                "line": finding.line,
                "change_kind": finding.change_kind.value,
                "text": finding.text,
                "source": _source_dict(finding.source),
                "severity": finding.severity.value,
            },
        }
    if isinstance(finding, FileFinding):
        return {
            "type": _FILE_TAG,
            "finding": {
                "path": finding.path,
                "text": finding.text,
                "source": _source_dict(finding.source),
                "severity": finding.severity.value,
            },
        }
    return None


def record_to_finding(record: Any) -> Finding:
    """Rebuild the exact finding variant from a tagged record.

    Raises:
        ReceiveDecodeError: If the record is not a known tagged finding
    """
    try:
        tag = record["type"]
        body = record["finding"]
        source = FindingSource(title=body["source"]["title"], description=body["source"]["description"])
        severity = Severity(body["severity"])
        if tag == _LINE_TAG:
            return LineFinding(
                path=body["path"],
                line=body["line"],
                change_kind=DiffLineKind(body["change_kind"]),
                text=body["text"],
                source=source,
                severity=severity,
            )
        if tag == _FILE_TAG:
            return FileFinding(path=body["path"], text=body["text"], source=source, severity=severity)
    except (KeyError, TypeError, ValueError) as e:
        raise ReceiveDecodeError(f"malformed finding record: {e!r}") from e
    raise ReceiveDecodeError(f"unknown finding type: {tag!r}")


def encode_findings(findings: Iterable[Finding]) -> bytes:
    records = [record for record in map(finding_to_record, findings) if record is not None]
    return json.dumps(records, ensure_ascii=False).encode("utf-8")


def decode_findings(payload: bytes) -> list[Finding]:
    """Decode a transported payload.

    Raises:
        ReceiveDecodeError: If the payload is not a JSON list of tagged findings
    """
    try:
        records = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ReceiveDecodeError(str(e), payload_size=len(payload)) from e
    if not isinstance(records, list):
        raise ReceiveDecodeError("payload is not a list", payload_size=len(payload))
    return [record_to_finding(record) for record in records]


async def send_findings(
    findings: Iterable[Finding],
    host: str,
    port: int,
    timeout_seconds: float = 10.0,
    retry_interval: float = 1.0,
) -> None:
    """Deliver findings to a receiver, retrying until one is listening.

    Raises:
        SendTimeoutError: If no receiver accepted the connection in time
    """
    payload = encode_findings(findings)
    deadline = time.monotonic() + timeout_seconds
    address = f"{host}:{port}"

    while True:
        logger.debug("Trying to send findings to %s", address)
        try:
            _reader, writer = await asyncio.open_connection(host, port)
        except OSError as e:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise SendTimeoutError(address, timeout_seconds) from e
            await asyncio.sleep(min(retry_interval, remaining))
            continue
        try:
            writer.write(payload)
            await writer.drain()
            if writer.can_write_eof():
                writer.write_eof()
        finally:
            writer.close()
            await writer.wait_closed()
        logger.info("Sent %d byte(s) of findings to %s", len(payload), address)
        return


class FindingReceiver:
    """Listens for a single transported finding list.

    Usage::

        receiver = FindingReceiver("127.0.0.1", 0)
        port = await receiver.start()
        findings = await receiver.receive(cancel_token)
    """

    def __init__(self, host: str, port: int):
        self.host = host
        self.port = port
        self._server: Optional[asyncio.AbstractServer] = None
        self._result: Optional[asyncio.Future] = None

    async def start(self) -> int:
        """Bind the listening socket. Returns the bound port."""
        if self._server is not None:
            return self.port
        self._result = asyncio.get_running_loop().create_future()
        self._server = await asyncio.start_server(self._handle, self.host, self.port)
        sockets = self._server.sockets or ()
        if sockets:
            self.port = sockets[0].getsockname()[1]
        logger.info("Waiting for findings on %s:%d", self.host, self.port)
        return self.port

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            payload = await reader.read()
        finally:
            writer.close()
        result = self._result
        if result is None or result.done():
            return
        try:
            result.set_result(decode_findings(payload))
        except ReceiveDecodeError as e:
            result.set_exception(e)

    async def receive(self, cancel_token: Optional[asyncio.Event] = None) -> list[Finding]:
        """Wait for one payload.

        Raises:
            ReceiveDecodeError: If the payload cannot be decoded
            ReceiveCancelledError: If ``cancel_token`` is set first
        """
        await self.start()
        result = self._result
        assert result is not None

        waiters: set = {result}
        cancel_waiter = None
        if cancel_token is not None:
            cancel_waiter = asyncio.ensure_future(cancel_token.wait())
            waiters.add(cancel_waiter)

        try:
            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
            if result.done():
                findings = result.result()
                logger.info("Received %d finding(s)", len(findings))
                return findings
            logger.info("Receiving findings was cancelled")
            raise ReceiveCancelledError()
        finally:
            if cancel_waiter is not None:
                cancel_waiter.cancel()
            await self.close()

    async def close(self) -> None:
        if self._result is not None and not self._result.done():
            self._result.cancel()
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
