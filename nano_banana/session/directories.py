"""Output directory selection for generated images."""

from __future__ import annotations

import sys
from pathlib import Path, PurePosixPath


WINDOWS_PLATFORMS = {"win32"}
DOCUMENTS_DIRNAME = "Documents"
IMAGES_DIRNAME = "nano-banana-images"
WORKDIR_IMAGES_DIRNAME = "generated_imgs"

# Shared, usually read-only locations a server may be launched from.
PROTECTED_PREFIXES: tuple[str, ...] = ("/usr", "/opt", "/var")


def resolve_output_directory(
    platform: str | None = None,
    cwd: Path | str | None = None,
    home: Path | str | None = None,
) -> Path:
    platform = platform or sys.platform
    home_dir = Path(home) if home is not None else Path.home()
    if platform in WINDOWS_PLATFORMS:
        return home_dir / DOCUMENTS_DIRNAME / IMAGES_DIRNAME
    work_dir = Path(cwd) if cwd is not None else Path.cwd()
    if is_protected_path(work_dir):
        return home_dir / IMAGES_DIRNAME
    return work_dir / WORKDIR_IMAGES_DIRNAME


def is_protected_path(path: Path | str) -> bool:
    candidate = PurePosixPath(str(path))
    for prefix in PROTECTED_PREFIXES:
        root = PurePosixPath(prefix)
        if candidate == root or root in candidate.parents:
            return True
    return False
