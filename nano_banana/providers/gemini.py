"""Gemini provider."""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Sequence

from google import genai
from google.genai import types

from ..imaging.assembler import GenerationRequest, ProTierOptions
from .base import ModelResponse, ResponsePart


logger = logging.getLogger(__name__)

RESPONSE_MODALITIES = ["TEXT", "IMAGE"]


class GeminiProvider:
    name = "gemini"

    def __init__(self, client_factory: Any = None) -> None:
        self._client_factory = client_factory or (lambda api_key: genai.Client(api_key=api_key))
        self._clients: dict[str, Any] = {}

    def generate(self, request: GenerationRequest, api_key: str) -> ModelResponse:
        if not api_key:
            raise RuntimeError("GEMINI_API_KEY not configured.")
        client = self._client_for(api_key)
        contents = build_contents(request)
        config = build_content_config(request)
        logger.info(
            "Gemini generate_content model=%s images=%d",
            request.model.name,
            len(request.images),
        )
        response = client.models.generate_content(
            model=request.model.name,
            contents=contents,
            config=config,
        )
        parts = extract_response_parts(getattr(response, "candidates", None) or [])
        if not parts:
            raise RuntimeError(_empty_response_reason(response))
        return ModelResponse(parts=tuple(parts))

    def _client_for(self, api_key: str) -> Any:
        client = self._clients.get(api_key)
        if client is None:
            self._clients.clear()
            client = self._client_factory(api_key)
            self._clients[api_key] = client
        return client


def build_content_config(request: GenerationRequest) -> types.GenerateContentConfig:
    config_kwargs: dict[str, Any] = {"response_modalities": list(RESPONSE_MODALITIES)}
    options = request.tier_options
    if isinstance(options, ProTierOptions):
        image_config: dict[str, Any] = {}
        if options.aspect_ratio:
            image_config["aspect_ratio"] = options.aspect_ratio
        if options.resolution:
            image_config["image_size"] = options.resolution
        if image_config:
            config_kwargs["image_config"] = types.ImageConfig(**image_config)
    return types.GenerateContentConfig(**config_kwargs)


def build_contents(request: GenerationRequest) -> str | list[types.Content]:
    if not request.images:
        return request.prompt
    parts: list[types.Part] = [
        types.Part(inline_data=types.Blob(data=image.data, mime_type=image.mime_type))
        for image in request.images
    ]
    parts.append(types.Part(text=request.prompt))
    return [types.Content(role="user", parts=parts)]


def extract_response_parts(candidates: Sequence[Any]) -> list[ResponsePart]:
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    raw_parts = getattr(content, "parts", None) or []
    parts: list[ResponsePart] = []
    for part in raw_parts:
        if getattr(part, "thought", None):
            continue
        text = getattr(part, "text", None)
        if text:
            parts.append(ResponsePart.text_part(text))
        inline_data = getattr(part, "inline_data", None)
        data = getattr(inline_data, "data", None) if inline_data else None
        if not data:
            continue
        if isinstance(data, str):
            try:
                data = base64.b64decode(data, validate=True)
            except binascii.Error:
                logger.warning("Skipping image part with undecodable payload")
                continue
        parts.append(ResponsePart.image_part(bytes(data), getattr(inline_data, "mime_type", None)))
    return parts


def _empty_response_reason(response: Any) -> str:
    feedback = getattr(response, "prompt_feedback", None)
    block_reason = getattr(feedback, "block_reason", None) if feedback else None
    if block_reason:
        return f"Gemini blocked the prompt ({block_reason})."
    candidates = getattr(response, "candidates", None) or []
    if candidates:
        finish_reason = getattr(candidates[0], "finish_reason", None)
        if finish_reason:
            return f"Gemini returned no content (finish reason: {finish_reason})."
    return "Gemini returned no content."
