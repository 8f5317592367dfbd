"""Turns tool arguments into provider-ready generation requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, Union

from ..errors import InvalidArguments
from ..models.registry import ModelRegistry, ModelSpec, validate_aspect_ratio, validate_resolution


logger = logging.getLogger(__name__)

DEFAULT_INPUT_MIME_TYPE = "image/jpeg"

# Bad paths surface as ValueError (embedded NUL) or RuntimeError (unknown ~user) as well as OSError.
UNREADABLE_PATH_ERRORS = (OSError, ValueError, RuntimeError)

ROLE_PRIMARY = "primary"
ROLE_REFERENCE = "reference"


@dataclass(frozen=True)
class ImageOptions:
    """Options exactly as the caller supplied them."""

    model: str | None = None
    resolution: str | None = None
    aspect_ratio: str | None = None


@dataclass(frozen=True)
class FastTierOptions:
    tier = "fast"


@dataclass(frozen=True)
class ProTierOptions:
    tier = "pro"
    resolution: str | None = None
    aspect_ratio: str | None = None


TierOptions = Union[FastTierOptions, ProTierOptions]


@dataclass(frozen=True)
class InlineImage:
    path: Path
    data: bytes
    mime_type: str
    role: str = ROLE_REFERENCE


@dataclass(frozen=True)
class SkippedReference:
    path: Path
    reason: str


@dataclass(frozen=True)
class IgnoredOption:
    name: str
    value: str
    reason: str


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    model: ModelSpec
    tier_options: TierOptions
    primary_image: InlineImage | None = None
    reference_images: tuple[InlineImage, ...] = ()
    skipped_references: tuple[SkippedReference, ...] = ()
    ignored_options: tuple[IgnoredOption, ...] = ()

    @property
    def is_edit(self) -> bool:
        return self.primary_image is not None

    @property
    def images(self) -> tuple[InlineImage, ...]:
        if self.primary_image is None:
            return self.reference_images
        return (self.primary_image,) + self.reference_images

    def describe(self) -> dict[str, object]:
        return {
            "model": self.model.name,
            "tier": self.tier_options.tier,
            "prompt_chars": len(self.prompt),
            "primary_image": str(self.primary_image.path) if self.primary_image else None,
            "reference_images": [str(image.path) for image in self.reference_images],
            "skipped_references": [str(skip.path) for skip in self.skipped_references],
            "ignored_options": [option.name for option in self.ignored_options],
        }


def mime_type_for_path(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix == ".png":
        return "image/png"
    if suffix in {".jpg", ".jpeg"}:
        return "image/jpeg"
    if suffix == ".webp":
        return "image/webp"
    return DEFAULT_INPUT_MIME_TYPE


def read_inline_image(value: str | Path, role: str) -> InlineImage:
    path = Path(value).expanduser()
    data = path.read_bytes()
    return InlineImage(path=path, data=data, mime_type=mime_type_for_path(path), role=role)


class RequestAssembler:
    def __init__(self, registry: ModelRegistry | None = None, default_model: str | None = None) -> None:
        self.registry = registry or ModelRegistry()
        self.default_model = default_model

    def build_generate(self, prompt: str, options: ImageOptions) -> GenerationRequest:
        model, tier_options, ignored = self._resolve_options(options)
        return GenerationRequest(
            prompt=_require_prompt(prompt),
            model=model,
            tier_options=tier_options,
            ignored_options=ignored,
        )

    def build_edit(
        self,
        primary_image_path: str | Path,
        prompt: str,
        reference_image_paths: Sequence[str | Path] | None,
        options: ImageOptions,
    ) -> GenerationRequest:
        prompt = _require_prompt(prompt)
        model, tier_options, ignored = self._resolve_options(options)
        try:
            primary = read_inline_image(primary_image_path, ROLE_PRIMARY)
        except UNREADABLE_PATH_ERRORS as exc:
            raise InvalidArguments(f"Failed to read image {primary_image_path}: {exc}") from exc

        references: list[InlineImage] = []
        skipped: list[SkippedReference] = []
        for ref_path in reference_image_paths or ():
            try:
                references.append(read_inline_image(ref_path, ROLE_REFERENCE))
            except UNREADABLE_PATH_ERRORS as exc:
                logger.info("Skipping unreadable reference image %s: %s", ref_path, exc)
                skipped.append(SkippedReference(path=Path(ref_path), reason=str(exc)))

        return GenerationRequest(
            prompt=prompt,
            model=model,
            tier_options=tier_options,
            primary_image=primary,
            reference_images=tuple(references),
            skipped_references=tuple(skipped),
            ignored_options=ignored,
        )

    def _resolve_options(self, options: ImageOptions) -> tuple[ModelSpec, TierOptions, tuple[IgnoredOption, ...]]:
        if self.default_model:
            model = self.registry.get(options.model, default=self.default_model)
        else:
            model = self.registry.get(options.model)
        resolution = validate_resolution(options.resolution)
        aspect_ratio = validate_aspect_ratio(options.aspect_ratio)
        if model.supports_quality_options:
            return model, ProTierOptions(resolution=resolution, aspect_ratio=aspect_ratio), ()

        ignored: list[IgnoredOption] = []
        reason = f"not supported by {model.name}"
        if resolution is not None:
            ignored.append(IgnoredOption(name="resolution", value=resolution, reason=reason))
        if aspect_ratio is not None:
            ignored.append(IgnoredOption(name="aspectRatio", value=aspect_ratio, reason=reason))
        if ignored:
            logger.debug("Dropping %s for %s", [option.name for option in ignored], model.name)
        return model, FastTierOptions(), tuple(ignored)


def _require_prompt(prompt: str) -> str:
    if not isinstance(prompt, str) or not prompt.strip():
        raise InvalidArguments("A non-empty prompt is required")
    return prompt
