"""Model registry for nano-banana."""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InvalidArguments


TIER_FAST = "fast"
TIER_PRO = "pro"

FLASH_MODEL = "gemini-2.5-flash-image-preview"
PRO_MODEL = "gemini-3-pro-image-preview"
DEFAULT_MODEL = FLASH_MODEL

RESOLUTIONS: tuple[str, ...] = ("1K", "2K", "4K")
ASPECT_RATIOS: tuple[str, ...] = ("1:1", "4:3", "3:4", "16:9", "9:16")


@dataclass(frozen=True)
class ModelSpec:
    name: str
    tier: str
    display_name: str
    summary: str | None = None

    @property
    def supports_quality_options(self) -> bool:
        return self.tier == TIER_PRO


_MODELS: dict[str, ModelSpec] = {
    FLASH_MODEL: ModelSpec(
        name=FLASH_MODEL,
        tier=TIER_FAST,
        display_name="Gemini 2.5 Flash Image",
    ),
    PRO_MODEL: ModelSpec(
        name=PRO_MODEL,
        tier=TIER_PRO,
        display_name="Gemini 3 Pro Image",
        summary="Professional quality with advanced reasoning",
    ),
}


class ModelRegistry:
    def __init__(self, models: dict[str, ModelSpec] | None = None) -> None:
        self._models = dict(models or _MODELS)

    def get(self, name: str | None, default: str = DEFAULT_MODEL) -> ModelSpec:
        key = name or default
        spec = self._models.get(key)
        if spec is None:
            raise InvalidArguments(f"Unsupported model: {key}. Expected one of: {', '.join(self._models)}")
        return spec


def validate_resolution(value: str | None) -> str | None:
    if value is None:
        return None
    if value not in RESOLUTIONS:
        raise InvalidArguments(f"Unsupported resolution: {value}. Expected one of: {', '.join(RESOLUTIONS)}")
    return value


def validate_aspect_ratio(value: str | None) -> str | None:
    if value is None:
        return None
    if value not in ASPECT_RATIOS:
        raise InvalidArguments(f"Unsupported aspect ratio: {value}. Expected one of: {', '.join(ASPECT_RATIOS)}")
    return value
