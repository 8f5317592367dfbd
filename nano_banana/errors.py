"""Error kinds surfaced to tool callers.

Every failure that leaves the dispatcher is one of these. ``kind`` is the
stable name callers can branch on; the message is meant for humans.
"""

from __future__ import annotations

from pathlib import Path


class NanoBananaError(Exception):
    kind = "InternalFailure"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidCredential(NanoBananaError):
    kind = "InvalidCredential"


class NotConfigured(NanoBananaError):
    kind = "NotConfigured"

    def __init__(self, message: str = "Gemini API token not configured. Use configure_gemini_token first.") -> None:
        super().__init__(message)


class NoPriorArtifact(NanoBananaError):
    kind = "NoPriorArtifact"

    def __init__(
        self,
        message: str = (
            "No previous image found. Please generate or edit an image first, "
            "then use continue_editing for subsequent edits."
        ),
    ) -> None:
        super().__init__(message)


class StaleArtifact(NanoBananaError):
    kind = "StaleArtifact"

    def __init__(self, path: Path) -> None:
        super().__init__(f"Last image file not found at: {path}. Please generate a new image first.")
        self.path = path


class ProviderFailure(NanoBananaError):
    kind = "ProviderFailure"


class InternalFailure(NanoBananaError):
    kind = "InternalFailure"


class InvalidArguments(NanoBananaError):
    kind = "InvalidArguments"


class MethodNotFound(NanoBananaError):
    kind = "MethodNotFound"

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name
