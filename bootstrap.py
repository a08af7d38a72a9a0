"""Sequential startup pipeline: validate, refresh, write, download, launch."""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Iterable, Mapping, Optional

from rich.console import Console

from cli.display import display_launch_summary
from credentials import CredentialRecord, load_credentials_blob, write_credentials
from downloader import prepare_server_files
from launcher import LaunchCommand, build_launch_command, exec_server
from oauth import OAuthManager
from settings import BootstrapSettings

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    VALIDATING = "validating"
    REFRESHING = "refreshing"
    WRITING = "writing"
    DOWNLOADING = "downloading"
    LAUNCHING = "launching"


class Bootstrapper:
    """Runs each startup stage once, in order, and hands off to the server

    Any BootstrapError raised by a stage stops the run; nothing written by
    earlier stages is rolled back.
    """

    def __init__(
        self,
        settings: BootstrapSettings,
        console: Optional[Console] = None,
        oauth: Optional[OAuthManager] = None,
        environ: Optional[Mapping[str, str]] = None,
        extra_args: Iterable[str] = (),
    ):
        self.settings = settings
        self.console = console or Console()
        self.oauth = oauth or OAuthManager(timeout=settings.oauth_timeout)
        self.environ = os.environ if environ is None else environ
        self.extra_args = list(extra_args)
        self.stage: Optional[Stage] = None

    def _enter(self, stage: Stage) -> None:
        logger.debug(f"Stage: {self.stage.value if self.stage else 'start'} -> {stage.value}")
        self.stage = stage

    def run(self) -> LaunchCommand:
        """Run the pipeline. Only returns in dry-run mode."""
        self._enter(Stage.VALIDATING)
        blob = load_credentials_blob(self.environ)
        record = CredentialRecord.from_blob(blob)

        self._enter(Stage.REFRESHING)
        logger.info("Configuring authentication...")
        blob = self.oauth.ensure_fresh_blob(blob, record=record)

        self._enter(Stage.WRITING)
        write_credentials(blob, self.settings.work_dir)
        logger.info("Credentials configured")

        self._enter(Stage.DOWNLOADING)
        assets_path = prepare_server_files(
            self.settings.work_dir,
            skip_update_check=self.settings.skip_update_check,
            patchline=self.settings.patchline,
        )

        self._enter(Stage.LAUNCHING)
        command = build_launch_command(
            auth_mode=self.settings.auth_mode,
            assets_path=assets_path,
            extra_args=self.extra_args,
            java_bin=self.settings.java_bin,
        )
        display_launch_summary(self.console, self.settings, command)

        if self.settings.dry_run:
            self.console.print("Dry run: not starting the server")
            return command
        exec_server(command, self.settings.work_dir)
