"""Sequential text-then-attachments delivery with a single aggregate verdict."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class TextSender(Protocol):
    async def send_text(self, body: str) -> bool: ...


class AttachmentSender(Protocol):
    async def send_attachment(self, path: str) -> bool: ...


class FileExistenceChecker(Protocol):
    def exists(self, path: str) -> bool: ...


class LocalFileExistenceChecker:
    """Existence check against the local filesystem."""

    def exists(self, path: str) -> bool:
        return Path(path).is_file()


class PartOutcome(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    SKIPPED_MISSING = "skipped_missing"
    NOT_ATTEMPTED = "not_attempted"


@dataclass
class PartResult:
    """Outcome of one part (the text or a single attachment)."""

    kind: str
    target: str
    outcome: PartOutcome
    error: str | None = None

    @property
    def attempted(self) -> bool:
        return self.outcome in {PartOutcome.SENT, PartOutcome.FAILED}


@dataclass
class DeliveryResult:
    """Aggregate verdict plus the per-part breakdown."""

    ok: bool
    text: PartResult
    attachments: list[PartResult] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.ok

    @property
    def sent_attachments(self) -> list[str]:
        return [part.target for part in self.attachments if part.outcome == PartOutcome.SENT]

    @property
    def parts_attempted(self) -> int:
        return sum(part.attempted for part in [self.text, *self.attachments])


class DeliveryPipeline:
    """Send one text message followed by its attachments over one channel.

    Attachments go out strictly one at a time, in order, after the text has
    been accepted. The first failure stops the run. There are no retries here;
    retry policy belongs to the injected senders.
    """

    def __init__(
        self,
        text_sender: TextSender,
        attachment_sender: AttachmentSender,
        file_checker: FileExistenceChecker | None = None,
    ):
        self.text_sender = text_sender
        self.attachment_sender = attachment_sender
        self.file_checker = file_checker or LocalFileExistenceChecker()

    async def publish(self, text: str, attachment_paths: list[str] | None = None) -> DeliveryResult:
        paths = list(attachment_paths or [])
        surviving: list[str] = []
        skipped: list[PartResult] = []
        for path in paths:
            if self.file_checker.exists(path):
                surviving.append(path)
            else:
                logger.info("Attachment missing, skipping: path=%s", path)
                skipped.append(PartResult("attachment", path, PartOutcome.SKIPPED_MISSING))

        text_ok, text_error = await self._attempt(self.text_sender.send_text, text)
        text_result = PartResult(
            "text",
            text[:64],
            PartOutcome.SENT if text_ok else PartOutcome.FAILED,
            text_error,
        )
        if not text_ok:
            logger.warning("Text send failed; attachments not attempted: count=%s", len(surviving))
            not_attempted = [PartResult("attachment", path, PartOutcome.NOT_ATTEMPTED) for path in surviving]
            return DeliveryResult(ok=False, text=text_result, attachments=not_attempted + skipped)

        attachment_results: list[PartResult] = []
        for index, path in enumerate(surviving):
            sent, error = await self._attempt(self.attachment_sender.send_attachment, path)
            if sent:
                attachment_results.append(PartResult("attachment", path, PartOutcome.SENT))
                continue
            logger.warning("Attachment send failed: path=%s error=%s", path, error)
            attachment_results.append(PartResult("attachment", path, PartOutcome.FAILED, error))
            attachment_results.extend(
                PartResult("attachment", rest, PartOutcome.NOT_ATTEMPTED) for rest in surviving[index + 1 :]
            )
            return DeliveryResult(ok=False, text=text_result, attachments=attachment_results + skipped)

        logger.info(
            "Delivery succeeded: attachments_sent=%s attachments_skipped=%s",
            len(attachment_results),
            len(skipped),
        )
        return DeliveryResult(ok=True, text=text_result, attachments=attachment_results + skipped)

    @staticmethod
    async def _attempt(send, payload: str) -> tuple[bool, str | None]:  # noqa: ANN001
        try:
            return bool(await send(payload)), None
        except Exception as exc:  # noqa: BLE001
            return False, str(exc)
