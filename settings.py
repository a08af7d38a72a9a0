"""Runtime settings for the bootstrap, resolved through ConfigLoader."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from config_loader import ConfigLoader

DEFAULT_SERVER_NAME = "Hytale Server - (Dealer Node)"
DEFAULT_MAX_PLAYERS = 10
DEFAULT_AUTH_MODE = "authenticated"
DEFAULT_OAUTH_TIMEOUT = 30.0


@dataclass(frozen=True)
class BootstrapSettings:
    work_dir: Path = Path(".")
    server_name: str = DEFAULT_SERVER_NAME
    max_players: int = DEFAULT_MAX_PLAYERS
    auth_mode: str = DEFAULT_AUTH_MODE
    skip_update_check: bool = False
    patchline: str = ""
    java_bin: str = "java"
    oauth_timeout: float = DEFAULT_OAUTH_TIMEOUT
    log_level: str = "info"
    dry_run: bool = False


def load_settings(loader: Optional[ConfigLoader] = None) -> BootstrapSettings:
    """Build BootstrapSettings from env vars, the config file and defaults"""
    config = loader or ConfigLoader()
    return BootstrapSettings(
        work_dir=Path(config.get("SERVER_DIR", "server.dir", ".")),
        server_name=config.get("SERVER_NAME", "server.name", DEFAULT_SERVER_NAME),
        max_players=config.get("MAX_PLAYERS", "server.max_players", DEFAULT_MAX_PLAYERS),
        auth_mode=config.get("AUTH_MODE", "server.auth_mode", DEFAULT_AUTH_MODE),
        skip_update_check=config.get("SKIP_UPDATE_CHECK", "downloader.skip_update_check", False),
        patchline=config.get("HYTALE_PATCHLINE", "downloader.patchline", ""),
        java_bin=config.get("JAVA_BIN", "launch.java_bin", "java"),
        oauth_timeout=config.get("OAUTH_TIMEOUT", "oauth.timeout", DEFAULT_OAUTH_TIMEOUT),
        log_level=config.get("LOG_LEVEL", "logging.level", "info"),
        dry_run=config.get("HYTALE_DRY_RUN", "launch.dry_run", False),
    )
