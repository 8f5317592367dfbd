"""Environment-driven runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .utils import getenv_flag


DEFAULT_MODEL_ENV = "NANO_BANANA_DEFAULT_MODEL"
OUTPUT_DIR_ENV = "NANO_BANANA_OUTPUT_DIR"
LOG_LEVEL_ENV = "NANO_BANANA_LOG_LEVEL"
DRYRUN_ENV = "NANO_BANANA_DRYRUN"


@dataclass(frozen=True)
class Settings:
    default_model: str | None = None
    output_dir: Path | None = None
    log_level: str = "INFO"
    dry_run: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        output_dir = (env.get(OUTPUT_DIR_ENV) or "").strip()
        return cls(
            default_model=(env.get(DEFAULT_MODEL_ENV) or "").strip() or None,
            output_dir=Path(output_dir).expanduser() if output_dir else None,
            log_level=(env.get(LOG_LEVEL_ENV) or "INFO").strip().upper(),
            dry_run=getenv_flag(DRYRUN_ENV, False, environ=env),
        )
