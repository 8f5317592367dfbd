"""Tool names, descriptions and JSON input schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..models.registry import ASPECT_RATIOS, FLASH_MODEL, PRO_MODEL, RESOLUTIONS


CONFIGURE_TOKEN = "configure_gemini_token"
GENERATE_IMAGE = "generate_image"
EDIT_IMAGE = "edit_image"
CONTINUE_EDITING = "continue_editing"
CONFIGURATION_STATUS = "get_configuration_status"
LAST_IMAGE_INFO = "get_last_image_info"


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_schema: dict[str, Any] = field(default_factory=dict)


def _model_property(description: str) -> dict[str, Any]:
    return {"type": "string", "enum": [FLASH_MODEL, PRO_MODEL], "description": description}


def _resolution_property(description: str) -> dict[str, Any]:
    return {"type": "string", "enum": list(RESOLUTIONS), "description": description}


def _aspect_ratio_property(description: str) -> dict[str, Any]:
    return {"type": "string", "enum": list(ASPECT_RATIOS), "description": description}


def _reference_images_property(description: str) -> dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}, "description": description}


_NO_ARGUMENTS: dict[str, Any] = {"type": "object", "properties": {}, "additionalProperties": False}


TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name=CONFIGURE_TOKEN,
        description=(
            "Configure the Gemini API key used for image generation and save it to a local config "
            "file (.nano-banana-config.json). Use this only when GEMINI_API_KEY is not set in the "
            "environment; environment variables take priority. Keys are created at "
            "https://aistudio.google.com/apikey."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "apiKey": {
                    "type": "string",
                    "description": "Gemini API key from Google AI Studio (usually starts with 'AIza').",
                },
            },
            "required": ["apiKey"],
        },
    ),
    ToolSpec(
        name=GENERATE_IMAGE,
        description=(
            "Generate a NEW image from a text prompt. Use only for new images, not for modifying an "
            "existing one. Describe subject, style, composition, lighting, colors and details. "
            "The flash model is fast and good for drafts; the pro model gives higher quality and "
            "accepts resolution and aspect ratio. Images are saved as PNG under ./generated_imgs "
            "(macOS/Linux) or Documents/nano-banana-images (Windows)."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "prompt": {"type": "string", "description": "Detailed description of the image to create."},
                "model": _model_property("Model to use. Defaults to the flash model."),
                "resolution": _resolution_property("Image resolution (pro model only)."),
                "aspectRatio": _aspect_ratio_property("Aspect ratio (pro model only)."),
            },
            "required": ["prompt"],
        },
    ),
    ToolSpec(
        name=EDIT_IMAGE,
        description=(
            "Edit a SPECIFIC existing image file, optionally guided by reference images. State the "
            "change, what to preserve, and how each reference should be used. Inputs may be PNG, "
            "JPEG or WebP. Unreadable reference images are skipped."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "imagePath": {"type": "string", "description": "Absolute path of the image to edit."},
                "prompt": {"type": "string", "description": "Edit instructions."},
                "referenceImages": _reference_images_property(
                    "Optional reference image paths for style, elements or composition."
                ),
                "model": _model_property("Model to use. Defaults to the flash model."),
                "resolution": _resolution_property("Output resolution (pro model only)."),
                "aspectRatio": _aspect_ratio_property("Output aspect ratio (pro model only)."),
            },
            "required": ["imagePath", "prompt"],
        },
    ),
    ToolSpec(
        name=CONFIGURATION_STATUS,
        description=(
            "Report whether the Gemini API key is configured, where it came from (environment "
            "variable or config file) and how to configure it if missing."
        ),
        input_schema=dict(_NO_ARGUMENTS),
    ),
    ToolSpec(
        name=CONTINUE_EDITING,
        description=(
            "Continue editing the LAST image generated or edited in this session without giving its "
            "path. Only the most recent image is remembered and the reference is lost when the "
            "server restarts. Use get_last_image_info to see which image will be edited."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "prompt": {"type": "string", "description": "The change to make to the last image."},
                "referenceImages": _reference_images_property("Optional reference images for this iteration."),
                "model": _model_property("Model to use. Defaults to the flash model."),
                "resolution": _resolution_property("Output resolution (pro model only)."),
                "aspectRatio": _aspect_ratio_property("Output aspect ratio (pro model only)."),
            },
            "required": ["prompt"],
        },
    ),
    ToolSpec(
        name=LAST_IMAGE_INFO,
        description=(
            "Show the path, size, modification time and dimensions of the last generated or edited "
            "image in this session, and whether the file still exists."
        ),
        input_schema=dict(_NO_ARGUMENTS),
    ),
)

TOOL_NAMES: tuple[str, ...] = tuple(spec.name for spec in TOOL_SPECS)
