"""Server file download and update via the external hytale-downloader CLI."""

from __future__ import annotations

import logging
import os
import shutil
import stat
import subprocess
import zipfile
from pathlib import Path
from typing import List, Optional

from constants import (
    ASSETS_ARCHIVE,
    ASSETS_DIR,
    DOWNLOAD_ARCHIVE,
    DOWNLOADER_CANDIDATES,
    NESTED_SERVER_DIR,
    SERVER_JAR,
)
from errors import DownloadError, DownloaderNotFoundError, MissingArtifactError

logger = logging.getLogger(__name__)


def find_downloader(work_dir: Path) -> Path:
    """Locate the downloader binary, preferring the Windows build

    Raises:
        DownloaderNotFoundError: If no candidate exists
    """
    for name in DOWNLOADER_CANDIDATES:
        candidate = Path(work_dir) / name
        if candidate.is_file():
            logger.info(f"Using downloader: {candidate}")
            return candidate
    raise DownloaderNotFoundError("hytale-downloader not found")


def _ensure_executable(path: Path) -> None:
    if os.name == "nt" or path.suffix == ".exe":
        return
    mode = path.stat().st_mode
    if not mode & stat.S_IXUSR:
        try:
            os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as e:
            logger.warning(f"Could not mark {path} executable: {e}")


def _downloader_command(downloader: Path, *args: str, patchline: str = "") -> List[str]:
    cmd = [str(downloader.resolve()), *args]
    if patchline:
        cmd += ["-patchline", patchline]
    return cmd


def _merge_move(src: Path, dst: Path) -> None:
    """Move src onto dst, merging directories and overwriting files"""
    if src.is_dir() and not src.is_symlink() and dst.is_dir():
        for child in list(src.iterdir()):
            _merge_move(child, dst / child.name)
        src.rmdir()
        return
    if dst.is_dir() and not dst.is_symlink():
        shutil.rmtree(dst)
    elif dst.exists() or dst.is_symlink():
        dst.unlink()
    shutil.move(str(src), str(dst))


def flatten_nested_server_dir(work_dir: Path) -> bool:
    """Hoist Server/* into work_dir when the archive nests the server files

    Returns:
        True if the nested directory was found and flattened
    """
    nested = Path(work_dir) / NESTED_SERVER_DIR
    if not (nested.is_dir() and (nested / SERVER_JAR).is_file()):
        return False

    logger.info(f"Detected '{NESTED_SERVER_DIR}' subdirectory, moving files to root...")
    for entry in list(nested.iterdir()):
        _merge_move(entry, Path(work_dir) / entry.name)
    nested.rmdir()
    return True


def extract_archive(archive: Path, work_dir: Path) -> None:
    """Unzip archive into work_dir, delete it, and flatten a nested Server/ dir"""
    logger.info("Unzipping server files...")
    try:
        with zipfile.ZipFile(archive) as zf:
            for info in zf.infolist():
                extracted = zf.extract(info, work_dir)
                # Unix permission bits live in the high word of external_attr
                mode = (info.external_attr >> 16) & 0o777
                if mode and not info.is_dir():
                    os.chmod(extracted, mode)
    except zipfile.BadZipFile as e:
        raise DownloadError(f"Downloaded archive is not a valid zip file: {e}") from e
    archive.unlink()
    flatten_nested_server_dir(work_dir)


def download_server_files(downloader: Path, work_dir: Path, patchline: str = "") -> None:
    """Download and unpack a fresh copy of the server files

    Raises:
        DownloadError: If the downloader fails or produces no archive
    """
    logger.info("Downloading server files...")
    cmd = _downloader_command(downloader, "-download-path", DOWNLOAD_ARCHIVE, patchline=patchline)
    try:
        result = subprocess.run(cmd, cwd=work_dir, check=False)
    except OSError as e:
        raise DownloadError(f"Failed to run downloader: {e}") from e
    if result.returncode != 0:
        raise DownloadError(f"Downloader exited with status {result.returncode}")

    archive = Path(work_dir) / DOWNLOAD_ARCHIVE
    if not archive.is_file():
        raise DownloadError("Failed to download server files")

    extract_archive(archive, work_dir)
    logger.info("Server files downloaded and extracted successfully")


def check_for_update(downloader: Path, work_dir: Path, patchline: str = "") -> bool:
    """Ask the downloader to check for updates; failures are only logged

    Returns:
        True if the check ran and exited cleanly
    """
    logger.info("Checking for updates...")
    cmd = _downloader_command(downloader, "-check-update", patchline=patchline)
    try:
        result = subprocess.run(cmd, cwd=work_dir, check=False)
    except OSError as e:
        logger.warning(f"Update check could not run: {e}")
        return False
    if result.returncode != 0:
        logger.warning(f"Update check failed with status {result.returncode}, continuing with existing files")
        return False
    return True


def find_assets(work_dir: Path) -> Optional[str]:
    """Return the assets path relative to work_dir, or None if absent"""
    if (Path(work_dir) / ASSETS_ARCHIVE).is_file():
        return ASSETS_ARCHIVE
    if (Path(work_dir) / ASSETS_DIR).is_dir():
        return ASSETS_DIR
    logger.warning("Assets not found - server may not start correctly")
    return None


def prepare_server_files(
    work_dir: Path,
    skip_update_check: bool = False,
    patchline: str = "",
) -> Optional[str]:
    """Make sure the server jar is present and report the assets path

    Args:
        work_dir: Server directory holding the downloader and server files
        skip_update_check: Skip the update check when files already exist
        patchline: Optional downloader patchline

    Returns:
        The assets path for --assets, or None

    Raises:
        DownloaderNotFoundError: No downloader binary
        DownloadError: Download produced no usable archive
        MissingArtifactError: HytaleServer.jar still missing afterwards
    """
    work_dir = Path(work_dir)
    jar = work_dir / SERVER_JAR

    downloader = find_downloader(work_dir)
    _ensure_executable(downloader)

    if not jar.is_file():
        download_server_files(downloader, work_dir, patchline=patchline)
    else:
        logger.info("Server files already present")
        if not skip_update_check:
            check_for_update(downloader, work_dir, patchline=patchline)

    if not jar.is_file():
        raise MissingArtifactError(f"{SERVER_JAR} not found after download")

    return find_assets(work_dir)
