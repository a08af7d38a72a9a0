"""Java command assembly and the final hand-off to the game server."""

from __future__ import annotations

import logging
import os
import shlex
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, NoReturn, Optional

from constants import BIND_ADDRESS, JVM_FLAGS, SERVER_JAR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaunchCommand:
    java_bin: str
    jvm_flags: List[str] = field(default_factory=list)
    jar: str = SERVER_JAR
    server_args: List[str] = field(default_factory=list)

    @property
    def argv(self) -> List[str]:
        return [self.java_bin, *self.jvm_flags, "-jar", self.jar, *self.server_args]

    def display(self) -> str:
        return shlex.join(self.argv)


class LaunchCommandBuilder:
    """Collects JVM and server flags as discrete arguments, in order"""

    def __init__(self, java_bin: str = "java", jar: str = SERVER_JAR):
        self._java_bin = java_bin
        self._jar = jar
        self._jvm_flags: List[str] = []
        self._server_args: List[str] = []

    def jvm_flag(self, flag: str) -> "LaunchCommandBuilder":
        self._jvm_flags.append(flag)
        return self

    def jvm_flags(self, flags: Iterable[str]) -> "LaunchCommandBuilder":
        self._jvm_flags.extend(flags)
        return self

    def option(self, name: str, value: Optional[str] = None) -> "LaunchCommandBuilder":
        """Add a server flag, with its value as a separate argument"""
        self._server_args.append(name)
        if value is not None:
            self._server_args.append(str(value))
        return self

    def extra_args(self, args: Iterable[str]) -> "LaunchCommandBuilder":
        self._server_args.extend(args)
        return self

    def build(self) -> LaunchCommand:
        return LaunchCommand(
            java_bin=self._java_bin,
            jvm_flags=list(self._jvm_flags),
            jar=self._jar,
            server_args=list(self._server_args),
        )


def build_launch_command(
    auth_mode: str,
    assets_path: Optional[str] = None,
    extra_args: Iterable[str] = (),
    java_bin: str = "java",
) -> LaunchCommand:
    """Assemble the standard server launch command"""
    builder = (
        LaunchCommandBuilder(java_bin=java_bin)
        .jvm_flags(JVM_FLAGS)
        .option("--bind", BIND_ADDRESS)
        .option("--auth-mode", auth_mode)
        .option("--disable-sentry")
    )
    if assets_path:
        builder.option("--assets", assets_path)
    return builder.extra_args(extra_args).build()


def exec_server(command: LaunchCommand, work_dir: Path = Path(".")) -> NoReturn:
    """Replace the current process with the game server. Never returns."""
    logger.info(f"Executing: {command.display()}")
    sys.stdout.flush()
    sys.stderr.flush()
    for handler in logging.getLogger().handlers:
        handler.flush()
    os.chdir(work_dir)
    os.execvp(command.java_bin, command.argv)
