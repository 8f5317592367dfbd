"""Gemini API credential resolution and persistence."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from ..errors import InvalidCredential
from ..utils import read_json, write_json


logger = logging.getLogger(__name__)

API_KEY_ENV = "GEMINI_API_KEY"
CONFIG_FILENAME = ".nano-banana-config.json"
CONFIG_KEY = "geminiApiKey"
MIN_SECRET_LENGTH = 1

SOURCE_ENVIRONMENT = "environment"
SOURCE_PERSISTED_CONFIG = "persisted-config"
SOURCE_NOT_CONFIGURED = "not-configured"


@dataclass(frozen=True)
class Credential:
    secret: str | None = field(default=None, repr=False)
    source: str = SOURCE_NOT_CONFIGURED

    @property
    def configured(self) -> bool:
        return self.secret is not None and self.source != SOURCE_NOT_CONFIGURED


NOT_CONFIGURED = Credential()


def default_config_path() -> Path:
    return Path.cwd() / CONFIG_FILENAME


def validate_secret(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidCredential("Invalid API key: Gemini API key must be a string")
    if len(value) < MIN_SECRET_LENGTH:
        raise InvalidCredential("Invalid API key: Gemini API key is required")
    return value


class CredentialResolver:
    """Holds the one active credential.

    Sources are tried in order: the ``GEMINI_API_KEY`` environment variable,
    then the persisted config file. A missing or malformed config file is the
    normal first-run state and resolves to "not configured" without raising.
    """

    def __init__(
        self,
        config_path: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.config_path = config_path or default_config_path()
        self._environ = os.environ if environ is None else environ
        self._credential = NOT_CONFIGURED

    @property
    def credential(self) -> Credential:
        return self._credential

    def resolve(self) -> Credential:
        self._credential = self._from_environment() or self._from_config_file() or NOT_CONFIGURED
        logger.info("Gemini credential source: %s", self._credential.source)
        return self._credential

    def configure(self, secret: Any) -> Credential:
        validated = validate_secret(secret)
        write_json(self.config_path, {CONFIG_KEY: validated})
        self._credential = Credential(secret=validated, source=SOURCE_PERSISTED_CONFIG)
        logger.info("Gemini credential persisted to %s", self.config_path)
        return self._credential

    def is_configured(self) -> bool:
        return self._credential.configured

    def _from_environment(self) -> Credential | None:
        raw = self._environ.get(API_KEY_ENV)
        if raw is None:
            return None
        try:
            return Credential(secret=validate_secret(raw), source=SOURCE_ENVIRONMENT)
        except InvalidCredential:
            logger.warning("Ignoring invalid %s value from the environment", API_KEY_ENV)
            return None

    def _from_config_file(self) -> Credential | None:
        payload = read_json(self.config_path, None)
        if not isinstance(payload, dict):
            return None
        try:
            secret = validate_secret(payload.get(CONFIG_KEY))
        except InvalidCredential:
            logger.debug("Config file %s has no usable %s", self.config_path, CONFIG_KEY)
            return None
        return Credential(secret=secret, source=SOURCE_PERSISTED_CONFIG)
