"""Credential record parsing and persistence for hytale-downloader."""

from __future__ import annotations

import json
import logging
import os
import time
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from constants import (
    CREDENTIALS_ENV_VAR,
    CREDENTIALS_FILE_MODE,
    CREDENTIALS_FILENAME,
    DEFAULT_BRANCH,
)
from errors import ConfigurationError

logger = logging.getLogger(__name__)


class CredentialRecord(BaseModel):
    """Access/refresh token bundle consumed by hytale-downloader"""

    model_config = ConfigDict(extra="ignore")

    access_token: str = ""
    refresh_token: Optional[str] = None
    expires_at: int = 0
    branch: str = DEFAULT_BRANCH

    @field_validator("access_token", mode="before")
    @classmethod
    def _coerce_access_token(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("refresh_token", mode="before")
    @classmethod
    def _coerce_refresh_token(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("expires_at", mode="before")
    @classmethod
    def _coerce_expires_at(cls, value: Any) -> Any:
        if value is None:
            return 0
        if isinstance(value, float):
            return int(value)
        return value

    @field_validator("branch", mode="before")
    @classmethod
    def _default_branch(cls, value: Any) -> Any:
        return DEFAULT_BRANCH if value is None else value

    @classmethod
    def from_blob(cls, blob: str) -> "CredentialRecord":
        """Parse the JSON credential blob

        Raises:
            ConfigurationError: If the blob is not a JSON object with usable fields
        """
        try:
            data = json.loads(blob)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{CREDENTIALS_ENV_VAR} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"{CREDENTIALS_ENV_VAR} must be a JSON object")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"{CREDENTIALS_ENV_VAR} has invalid fields: {e}") from e

    def to_blob(self) -> str:
        return json.dumps(self.model_dump(), indent=2)


def load_credentials_blob(environ: Optional[Mapping[str, str]] = None) -> str:
    """Read the required credential blob from the environment

    Raises:
        ConfigurationError: If the variable is unset or empty
    """
    env = os.environ if environ is None else environ
    blob = env.get(CREDENTIALS_ENV_VAR, "")
    if not blob.strip():
        raise ConfigurationError(
            f"{CREDENTIALS_ENV_VAR} is required but not set. "
            f"Please provide the full contents of {CREDENTIALS_FILENAME}"
        )
    return blob


def write_credentials(blob: str, work_dir: Path) -> Path:
    """Write the credential blob where hytale-downloader expects it (mode 600)"""
    path = Path(work_dir) / CREDENTIALS_FILENAME
    # Created owner-only; a pre-existing file is narrowed before any token is written
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CREDENTIALS_FILE_MODE)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        os.chmod(path, CREDENTIALS_FILE_MODE)
        f.write(blob + "\n")
    logger.debug(f"Wrote credentials to {path}")
    return path


def format_expiry(timestamp: int) -> str:
    """Human-readable local time for an epoch timestamp"""
    try:
        return time.strftime("%a %b %d %H:%M:%S %Z %Y", time.localtime(timestamp))
    except (OverflowError, OSError, ValueError):
        return str(timestamp)
