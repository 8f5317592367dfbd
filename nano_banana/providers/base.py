"""Provider base classes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol

from ..imaging.assembler import GenerationRequest


PART_TEXT = "text"
PART_IMAGE = "image"


@dataclass(frozen=True)
class ResponsePart:
    kind: str
    text: str | None = None
    data: bytes | None = None
    mime_type: str | None = None

    @classmethod
    def text_part(cls, text: str) -> ResponsePart:
        return cls(kind=PART_TEXT, text=text)

    @classmethod
    def image_part(cls, data: bytes, mime_type: str | None = None) -> ResponsePart:
        return cls(kind=PART_IMAGE, data=data, mime_type=mime_type)


@dataclass(frozen=True)
class ModelResponse:
    parts: tuple[ResponsePart, ...] = ()

    @property
    def image_count(self) -> int:
        return sum(1 for part in self.parts if part.kind == PART_IMAGE)


class ImageModelProvider(Protocol):
    name: str

    def generate(self, request: GenerationRequest, api_key: str) -> ModelResponse:
        ...


class ProviderRegistry:
    def __init__(self, providers: Iterable[ImageModelProvider]) -> None:
        self._providers = {provider.name: provider for provider in providers}

    def get(self, name: str) -> ImageModelProvider | None:
        return self._providers.get(name)

    def list(self) -> list[str]:
        return sorted(self._providers.keys())
