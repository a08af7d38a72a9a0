"""
Fixed names, endpoints and launch flags used by the bootstrap.

These values mirror the layout produced by hytale-downloader and the
recommended container defaults for the server JVM.
"""

from typing import List, Tuple

# OAuth2 token endpoint used to refresh downloader credentials
OAUTH_TOKEN_URL = "https://oauth.accounts.hytale.com/oauth2/token"
CLIENT_ID = "hytale-downloader"
TOKEN_REFRESH_BUFFER_SECONDS = 300
DEFAULT_EXPIRES_IN = 3600
DEFAULT_BRANCH = "release"
NULL_SENTINEL = "null"

CREDENTIALS_ENV_VAR = "HYTALE_CREDENTIALS_JSON"
CREDENTIALS_FILENAME = ".hytale-downloader-credentials.json"
CREDENTIALS_FILE_MODE = 0o600

# Checked in order; the Windows build wins when both are present
DOWNLOADER_CANDIDATES: Tuple[str, ...] = ("hytale-downloader.exe", "hytale-downloader")
DOWNLOAD_ARCHIVE = "server-files.zip"
NESTED_SERVER_DIR = "Server"

SERVER_JAR = "HytaleServer.jar"
ASSETS_ARCHIVE = "Assets.zip"
ASSETS_DIR = "Assets"

BIND_ADDRESS = "0.0.0.0:5520"

JVM_FLAGS: List[str] = [
    # Container-aware heap sizing
    "-XX:+UseContainerSupport",
    "-XX:MaxRAMPercentage=90.0",
    "-XX:InitialRAMPercentage=50.0",
    # GC tuning
    "-XX:+UseG1GC",
    "-XX:MaxGCPauseMillis=50",
    "-XX:+UseStringDeduplication",
]
