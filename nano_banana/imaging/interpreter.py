"""Persists model output and folds text parts into a summary."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from ..providers.base import PART_IMAGE, PART_TEXT, ModelResponse
from ..session.artifacts import ArtifactTracker
from ..utils import ensure_dir, now_utc_iso


logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class ImagePayload:
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class WriteFailure:
    path: Path
    message: str


@dataclass
class InterpretedResponse:
    saved_paths: list[Path] = field(default_factory=list)
    summary_text: str = ""
    image_payloads: list[ImagePayload] = field(default_factory=list)
    write_errors: list[WriteFailure] = field(default_factory=list)

    @property
    def text_only(self) -> bool:
        return not self.image_payloads


class ResponseInterpreter:
    def __init__(self, tracker: ArtifactTracker) -> None:
        self.tracker = tracker

    def interpret(self, response: ModelResponse, output_dir: Path, prefix: str = "generated") -> InterpretedResponse:
        result = InterpretedResponse()
        summary: list[str] = []
        image_parts = [part for part in response.parts if part.kind == PART_IMAGE]
        if image_parts:
            ensure_dir(output_dir)
        for part in response.parts:
            if part.kind == PART_TEXT:
                summary.append(part.text or "")
                continue
            if part.kind != PART_IMAGE or not part.data:
                continue
            mime_type = part.mime_type or DEFAULT_OUTPUT_MIME_TYPE
            result.image_payloads.append(ImagePayload(data=part.data, mime_type=mime_type))
            path = output_dir / build_image_filename(prefix, mime_type)
            try:
                path.write_bytes(part.data)
            except OSError as exc:
                logger.error("Failed to write image %s: %s", path, exc)
                result.write_errors.append(WriteFailure(path=path, message=str(exc)))
                continue
            result.saved_paths.append(path)
            self.tracker.record(path)
        result.summary_text = "".join(summary)
        logger.info(
            "Interpreted response: %d image(s) saved, %d write error(s), %d text chars",
            len(result.saved_paths),
            len(result.write_errors),
            len(result.summary_text),
        )
        return result


def build_image_filename(prefix: str, mime_type: str | None) -> str:
    timestamp = now_utc_iso().replace(":", "-").replace(".", "-").replace("+", "_")
    suffix = uuid.uuid4().hex[:6]
    return f"{prefix}-{timestamp}-{suffix}.{extension_from_mime_type(mime_type)}"


def extension_from_mime_type(mime_type: str | None) -> str:
    if not mime_type:
        return "png"
    normalized = mime_type.strip().lower()
    if normalized.startswith("image/"):
        normalized = normalized.split("/", 1)[1]
    if normalized in {"jpeg", "jpg"}:
        return "jpg"
    if normalized == "webp":
        return "webp"
    return "png"
