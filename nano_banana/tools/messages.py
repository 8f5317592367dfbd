"""Human-readable status text for tool results."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from ..imaging.assembler import GenerationRequest, ProTierOptions
from ..imaging.interpreter import InterpretedResponse
from ..session.artifacts import ArtifactInfo
from ..session.credentials import (
    API_KEY_ENV,
    CONFIG_FILENAME,
    SOURCE_ENVIRONMENT,
    SOURCE_PERSISTED_CONFIG,
    Credential,
)


def _bullets(paths: Sequence[Path | str]) -> str:
    return "\n".join(f"- {path}" for path in paths)


def configured_message() -> str:
    return "Gemini API token configured successfully. You can now use nano-banana image generation features."


def image_result_message(
    request: GenerationRequest,
    result: InterpretedResponse,
    tool_name: str,
) -> str:
    if request.is_edit:
        lines = [
            f"Image edited with nano-banana ({request.model.display_name}).",
            "",
            f"Original: {request.primary_image.path}",
            f'Edit prompt: "{request.prompt}"',
        ]
    else:
        lines = [
            f"Image generated with nano-banana ({request.model.display_name}).",
            "",
            f'Prompt: "{request.prompt}"',
        ]

    options = request.tier_options
    if isinstance(options, ProTierOptions):
        if request.model.summary:
            lines.append(f"Model: {request.model.summary}")
        if options.resolution:
            lines.append(f"Resolution: {options.resolution}")
        if options.aspect_ratio:
            lines.append(f"Aspect Ratio: {options.aspect_ratio}")
    if request.ignored_options:
        ignored = ", ".join(f"{option.name}={option.value}" for option in request.ignored_options)
        lines.append(f"Ignored options ({request.model.name} does not support them): {ignored}")

    if request.reference_images:
        lines += ["", "Reference images used:", _bullets([image.path for image in request.reference_images])]
    if request.skipped_references:
        lines += [
            "",
            "Reference images skipped (could not be read):",
            _bullets([f"{skip.path} ({skip.reason})" for skip in request.skipped_references]),
        ]

    if result.summary_text:
        lines += ["", f"Description: {result.summary_text}"]

    if result.saved_paths:
        heading = "Edited image saved to:" if request.is_edit else "Image saved to:"
        lines += [
            "",
            heading,
            _bullets(result.saved_paths),
            "",
            f"To view the image, open the file above or expand the {tool_name} call details.",
            "To keep modifying it, use continue_editing.",
            "To check the tracked image, use get_last_image_info.",
        ]
    elif not result.write_errors:
        noun = "edited image" if request.is_edit else "image"
        lines += [
            "",
            f"Note: No {noun} was generated. The model returned only text.",
            "Tip: Try running the command again; the first call sometimes needs to warm up the model.",
        ]

    if result.write_errors:
        lines += [
            "",
            "Some images could not be saved:",
            _bullets([f"{failure.path}: {failure.message}" for failure in result.write_errors]),
        ]
    return "\n".join(lines)


def configuration_status_message(credential: Credential) -> str:
    if credential.configured:
        lines = ["Gemini API token is configured and ready to use."]
        if credential.source == SOURCE_ENVIRONMENT:
            lines += [
                f"Source: Environment variable ({API_KEY_ENV})",
                "This is the most secure configuration method.",
            ]
        elif credential.source == SOURCE_PERSISTED_CONFIG:
            lines += [
                f"Source: Local configuration file ({CONFIG_FILENAME})",
                "Consider using environment variables for better security.",
            ]
        return "\n".join(lines)
    return "\n".join(
        [
            "Gemini API token is not configured.",
            "",
            "Configuration options (in priority order):",
            f"1. MCP client environment variables: \"env\": {{ \"{API_KEY_ENV}\": \"your-api-key-here\" }}",
            f"2. System environment variable: {API_KEY_ENV}",
            "3. The configure_gemini_token tool",
        ]
    )


def last_image_message(info: ArtifactInfo | None) -> str:
    if info is None:
        return (
            "No previous image found.\n\n"
            "Please generate or edit an image first, then this command will show information about your last image."
        )
    if not info.exists:
        return (
            "Last Image Information:\n\n"
            f"Path: {info.path}\n"
            "Status: File not found\n\n"
            "The image file may have been moved or deleted. Please generate a new image."
        )
    lines = [
        "Last Image Information:",
        "",
        f"Path: {info.path}",
        f"File Size: {info.size_kb} KB",
    ]
    if info.modified_at is not None:
        lines.append(f"Last Modified: {info.modified_at.strftime('%Y-%m-%d %H:%M:%S')}")
    if info.width and info.height:
        lines.append(f"Dimensions: {info.width}x{info.height}")
    lines += ["", "Use continue_editing to make further changes to this image."]
    return "\n".join(lines)
