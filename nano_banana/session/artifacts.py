"""Tracking of the most recently produced image."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from PIL import Image

from ..errors import NoPriorArtifact, StaleArtifact


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactInfo:
    path: Path
    exists: bool
    size_bytes: int | None = None
    modified_at: datetime | None = None
    width: int | None = None
    height: int | None = None

    @property
    def size_kb(self) -> int | None:
        if self.size_bytes is None:
            return None
        return round(self.size_bytes / 1024)


class ArtifactTracker:
    """Remembers the last image path for this process only.

    The recorded path is not trusted later on: ``verify_current`` checks the
    filesystem every time it is called.
    """

    def __init__(self) -> None:
        self._current: Path | None = None

    def record(self, path: Path) -> None:
        self._current = Path(path)
        logger.debug("Session artifact is now %s", self._current)

    def current(self) -> Path | None:
        return self._current

    def verify_current(self) -> Path:
        if self._current is None:
            raise NoPriorArtifact()
        if not self._current.is_file():
            raise StaleArtifact(self._current)
        return self._current


def describe_artifact(path: Path) -> ArtifactInfo:
    try:
        stat = path.stat()
    except FileNotFoundError:
        return ArtifactInfo(path=path, exists=False)
    width, height = _read_dimensions(path)
    return ArtifactInfo(
        path=path,
        exists=True,
        size_bytes=stat.st_size,
        modified_at=datetime.fromtimestamp(stat.st_mtime),
        width=width,
        height=height,
    )


def _read_dimensions(path: Path) -> tuple[int | None, int | None]:
    try:
        with Image.open(path) as image:
            return image.size
    except OSError:
        return None, None
