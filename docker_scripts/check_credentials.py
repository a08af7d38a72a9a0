#!/usr/bin/env python3
"""
Check that the downloader credential file is present and unexpired.
Exit code 0 = valid, 1 = missing/invalid/expired
"""

import os
import sys
import time
from pathlib import Path
from typing import Optional, TypedDict

from constants import CREDENTIALS_FILENAME
from credentials import CredentialRecord
from errors import ConfigurationError


class CredentialStatus(TypedDict):
    has_credentials: bool
    is_expired: bool


def get_status(work_dir: Path, now: Optional[float] = None) -> CredentialStatus:
    path = Path(work_dir) / CREDENTIALS_FILENAME
    try:
        record = CredentialRecord.from_blob(path.read_text(encoding="utf-8"))
    except (OSError, ConfigurationError):
        return CredentialStatus(has_credentials=False, is_expired=True)

    current = time.time() if now is None else now
    return CredentialStatus(
        has_credentials=bool(record.access_token),
        is_expired=record.expires_at <= current,
    )


def main() -> None:
    work_dir = Path(os.getenv("SERVER_DIR") or ".")
    status = get_status(work_dir)

    not_valid = not status["has_credentials"] or status["is_expired"]
    sys.exit(int(not_valid))


if __name__ == "__main__":
    main()
