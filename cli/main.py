"""Container entrypoint: bootstrap the Hytale server and exec it"""

import dataclasses
import logging
import sys
from typing import List, Optional

from rich.console import Console

from bootstrap import Bootstrapper
from cli.display import display_error, display_header
from errors import BootstrapError
from settings import load_settings

DRY_RUN_FLAG = "--dry-run"


def _log_level(name: str) -> int:
    if name.strip().isdigit():
        return int(name)
    level = getattr(logging, name.strip().upper(), logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def main(argv: Optional[List[str]] = None) -> None:
    """Run the bootstrap. Arguments are passed through to the server,
    except a leading --dry-run which is consumed here."""
    args = list(sys.argv[1:] if argv is None else argv)

    settings = load_settings()
    if args and args[0] == DRY_RUN_FLAG:
        args = args[1:]
        settings = dataclasses.replace(settings, dry_run=True)

    logging.basicConfig(
        level=_log_level(settings.log_level),
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    console = Console()
    display_header(console)

    try:
        Bootstrapper(settings, console=console, extra_args=args).run()
    except BootstrapError as e:
        display_error(console, str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
