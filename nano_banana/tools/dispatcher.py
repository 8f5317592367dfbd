"""Routes named tool calls to handlers and normalizes their failures."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping

from ..errors import (
    InternalFailure,
    InvalidArguments,
    MethodNotFound,
    NanoBananaError,
    NoPriorArtifact,
    NotConfigured,
    ProviderFailure,
)
from ..imaging.assembler import GenerationRequest, ImageOptions, RequestAssembler
from ..imaging.interpreter import ResponseInterpreter
from ..providers.base import ImageModelProvider, ModelResponse
from ..session.artifacts import describe_artifact
from ..session.credentials import validate_secret
from ..session.directories import resolve_output_directory
from ..session.state import SessionState
from ..utils import sanitize_payload
from . import messages
from .schemas import (
    CONFIGURATION_STATUS,
    CONFIGURE_TOKEN,
    CONTINUE_EDITING,
    EDIT_IMAGE,
    GENERATE_IMAGE,
    LAST_IMAGE_INFO,
)


logger = logging.getLogger(__name__)

PHASE_RECEIVED = "received"
PHASE_VALIDATED = "validated"
PHASE_EXECUTING = "executing"
PHASE_COMPLETED = "completed"
PHASE_FAILED = "failed"

SEGMENT_TEXT = "text"
SEGMENT_IMAGE = "image"


@dataclass
class Invocation:
    tool_name: str
    arguments: Mapping[str, Any]
    phase: str = PHASE_RECEIVED
    error_kind: str | None = None

    def advance(self, phase: str) -> None:
        logger.debug("%s: %s -> %s", self.tool_name, self.phase, phase)
        self.phase = phase

    def fail(self, kind: str) -> None:
        self.advance(PHASE_FAILED)
        self.error_kind = kind


@dataclass(frozen=True)
class ContentSegment:
    type: str
    text: str | None = None
    data: bytes | None = None
    mime_type: str | None = None

    @classmethod
    def text_segment(cls, text: str) -> ContentSegment:
        return cls(type=SEGMENT_TEXT, text=text)

    @classmethod
    def image_segment(cls, data: bytes, mime_type: str) -> ContentSegment:
        return cls(type=SEGMENT_IMAGE, data=data, mime_type=mime_type)


@dataclass
class ToolResult:
    segments: list[ContentSegment] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(segment.text or "" for segment in self.segments if segment.type == SEGMENT_TEXT)

    @property
    def images(self) -> list[ContentSegment]:
        return [segment for segment in self.segments if segment.type == SEGMENT_IMAGE]


class ToolDispatcher:
    """Runs one tool invocation to completion.

    Each call moves through received, validated, executing and then completed
    or failed. Whatever goes wrong, the caller sees a ``NanoBananaError``:
    provider exceptions become ``ProviderFailure`` and anything else that was
    not anticipated becomes ``InternalFailure``.
    """

    def __init__(
        self,
        state: SessionState,
        provider: ImageModelProvider,
        output_dir: Path | None = None,
        assembler: RequestAssembler | None = None,
    ) -> None:
        self.state = state
        self.provider = provider
        self.output_dir = output_dir
        self.assembler = assembler or RequestAssembler()
        self.interpreter = ResponseInterpreter(state.artifacts)
        self.last_invocation: Invocation | None = None
        self._handlers: dict[str, Callable[[Invocation], ToolResult]] = {
            CONFIGURE_TOKEN: self._configure_token,
            GENERATE_IMAGE: self._generate_image,
            EDIT_IMAGE: self._edit_image,
            CONTINUE_EDITING: self._continue_editing,
            CONFIGURATION_STATUS: self._configuration_status,
            LAST_IMAGE_INFO: self._last_image_info,
        }

    def output_directory(self) -> Path:
        return self.output_dir or resolve_output_directory()

    def dispatch(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResult:
        invocation = Invocation(tool_name=name, arguments=dict(arguments or {}))
        self.last_invocation = invocation
        logger.info("Tool call %s %s", name, sanitize_payload(invocation.arguments))
        handler = self._handlers.get(name)
        try:
            if handler is None:
                raise MethodNotFound(name)
            result = handler(invocation)
        except NanoBananaError as exc:
            invocation.fail(exc.kind)
            logger.warning("Tool %s failed (%s): %s", name, exc.kind, exc)
            raise
        except Exception as exc:
            invocation.fail(InternalFailure.kind)
            logger.exception("Tool %s failed unexpectedly", name)
            raise InternalFailure(f"Tool execution failed: {exc}") from exc
        invocation.advance(PHASE_COMPLETED)
        return result

    def _configure_token(self, invocation: Invocation) -> ToolResult:
        secret = validate_secret(invocation.arguments.get("apiKey"))
        invocation.advance(PHASE_VALIDATED)
        invocation.advance(PHASE_EXECUTING)
        self.state.credentials.configure(secret)
        return _text_result(messages.configured_message())

    def _generate_image(self, invocation: Invocation) -> ToolResult:
        self._require_configured()
        args = invocation.arguments
        prompt = _string_arg(args, "prompt")
        options = _image_options(args)
        invocation.advance(PHASE_VALIDATED)

        invocation.advance(PHASE_EXECUTING)
        request = self.assembler.build_generate(prompt, options)
        return self._run(request, GENERATE_IMAGE, prefix="generated")

    def _edit_image(self, invocation: Invocation) -> ToolResult:
        self._require_configured()
        args = invocation.arguments
        image_path = _string_arg(args, "imagePath")
        return self._edit(invocation, image_path, EDIT_IMAGE)

    def _continue_editing(self, invocation: Invocation) -> ToolResult:
        if self.state.artifacts.current() is None:
            raise NoPriorArtifact()
        self._require_configured()
        image_path = self.state.artifacts.verify_current()
        return self._edit(invocation, image_path, CONTINUE_EDITING)

    def _edit(self, invocation: Invocation, image_path: str | Path, tool_name: str) -> ToolResult:
        args = invocation.arguments
        prompt = _string_arg(args, "prompt")
        references = _string_list_arg(args, "referenceImages")
        options = _image_options(args)
        invocation.advance(PHASE_VALIDATED)

        invocation.advance(PHASE_EXECUTING)
        request = self.assembler.build_edit(image_path, prompt, references, options)
        return self._run(request, tool_name, prefix="edited")

    def _configuration_status(self, invocation: Invocation) -> ToolResult:
        invocation.advance(PHASE_VALIDATED)
        invocation.advance(PHASE_EXECUTING)
        return _text_result(messages.configuration_status_message(self.state.credentials.credential))

    def _last_image_info(self, invocation: Invocation) -> ToolResult:
        invocation.advance(PHASE_VALIDATED)
        invocation.advance(PHASE_EXECUTING)
        current = self.state.artifacts.current()
        info = describe_artifact(current) if current is not None else None
        return _text_result(messages.last_image_message(info))

    def _require_configured(self) -> None:
        if not self.state.credentials.is_configured():
            raise NotConfigured()

    def _run(self, request: GenerationRequest, tool_name: str, prefix: str) -> ToolResult:
        verb = "edit" if request.is_edit else "generate"
        logger.debug("Provider request: %s", request.describe())
        api_key = self.state.credentials.credential.secret or ""
        try:
            response = self.provider.generate(request, api_key)
        except Exception as exc:
            raise ProviderFailure(f"Failed to {verb} image: {exc}") from exc
        if not isinstance(response, ModelResponse):
            raise ProviderFailure(f"Failed to {verb} image: provider returned {type(response).__name__}")

        result = self.interpreter.interpret(response, self.output_directory(), prefix=prefix)
        segments = [ContentSegment.text_segment(messages.image_result_message(request, result, tool_name))]
        segments += [ContentSegment.image_segment(payload.data, payload.mime_type) for payload in result.image_payloads]
        return ToolResult(segments=segments)


def _text_result(text: str) -> ToolResult:
    return ToolResult(segments=[ContentSegment.text_segment(text)])


def _string_arg(arguments: Mapping[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidArguments(f"'{key}' is required and must be a non-empty string")
    return value


def _optional_string_arg(arguments: Mapping[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidArguments(f"'{key}' must be a string")
    return value or None


def _string_list_arg(arguments: Mapping[str, Any], key: str) -> list[str]:
    value = arguments.get(key)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise InvalidArguments(f"'{key}' must be an array of strings")
    return list(value)


def _image_options(arguments: Mapping[str, Any]) -> ImageOptions:
    return ImageOptions(
        model=_optional_string_arg(arguments, "model"),
        resolution=_optional_string_arg(arguments, "resolution"),
        aspect_ratio=_optional_string_arg(arguments, "aspectRatio"),
    )
