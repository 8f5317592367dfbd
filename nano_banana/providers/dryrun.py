"""Dry-run image provider (offline)."""

from __future__ import annotations

import hashlib
import io

from PIL import Image, ImageDraw, ImageFont

from ..imaging.assembler import GenerationRequest, ProTierOptions
from .base import ModelResponse, ResponsePart


_BASE_EDGE = {"1K": 1024, "2K": 2048, "4K": 4096}
_RATIOS = {
    "1:1": (1, 1),
    "4:3": (4, 3),
    "3:4": (3, 4),
    "16:9": (16, 9),
    "9:16": (9, 16),
}
_DEFAULT_EDGE = 1024


class DryRunProvider:
    """Renders placeholder PNGs locally so the tools work without an API key round-trip."""

    name = "dryrun"

    def __init__(self, preview_edge: int | None = None) -> None:
        self._preview_edge = preview_edge

    def generate(self, request: GenerationRequest, api_key: str) -> ModelResponse:
        image = self._base_image(request)
        draw = ImageDraw.Draw(image)
        font = ImageFont.load_default()
        label = "dryrun edit" if request.is_edit else "dryrun"
        draw.text((20, 20), f"{label}\n{request.prompt[:60]}", fill=(255, 255, 255), font=font)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        summary = f"Dry run of {request.model.name} with {len(request.images)} input image(s)."
        return ModelResponse(
            parts=(
                ResponsePart.text_part(summary),
                ResponsePart.image_part(buffer.getvalue(), "image/png"),
            )
        )

    def _base_image(self, request: GenerationRequest) -> Image.Image:
        if request.primary_image is not None:
            try:
                with Image.open(io.BytesIO(request.primary_image.data)) as source:
                    return source.convert("RGB")
            except OSError:
                pass
        width, height = self._resolve_size(request)
        return Image.new("RGB", (width, height), _color_from_prompt(request.prompt))

    def _resolve_size(self, request: GenerationRequest) -> tuple[int, int]:
        edge = self._preview_edge or _DEFAULT_EDGE
        ratio = (1, 1)
        options = request.tier_options
        if isinstance(options, ProTierOptions):
            if options.resolution and not self._preview_edge:
                edge = _BASE_EDGE.get(options.resolution, _DEFAULT_EDGE)
            if options.aspect_ratio:
                ratio = _RATIOS.get(options.aspect_ratio, ratio)
        return _fit_ratio(edge, ratio)


def _fit_ratio(edge: int, ratio: tuple[int, int]) -> tuple[int, int]:
    rw, rh = ratio
    if rw >= rh:
        return edge, max(1, edge * rh // rw)
    return max(1, edge * rw // rh), edge


def _color_from_prompt(prompt: str) -> tuple[int, int, int]:
    digest = hashlib.sha256(prompt.encode("utf-8")).digest()
    return digest[0], digest[1], digest[2]
