"""Process gateway - runs external tools and reports their failures.

Every VBoxManage and docker-machine invocation goes through here, so that a
failure always surfaces as a CommandError carrying the command and its exit
status.
"""

import logging
import subprocess

from ..errors import CommandError

logger = logging.getLogger(__name__)


class ProcessGateway:
    """Run commands synchronously, either capturing or streaming output."""

    def run(self, args: list[str]) -> list[str]:
        """Run a command and return its standard output as lines.

        Raises:
            CommandError: If the command cannot be started or exits non-zero
        """
        logger.debug(f"Running: {' '.join(args)}")
        try:
            result = subprocess.run(args, capture_output=True, text=True)
        except OSError as e:
            raise CommandError(args, None, str(e)) from e

        if result.returncode != 0:
            details = (result.stderr or "").strip() or (result.stdout or "").strip()
            raise CommandError(args, result.returncode, details)
        return result.stdout.splitlines()

    def stream(self, args: list[str]) -> None:
        """Run a command with output going straight to the terminal.

        Raises:
            CommandError: If the command cannot be started or exits non-zero
        """
        logger.debug(f"Running (streamed): {' '.join(args)}")
        try:
            returncode = subprocess.call(args)
        except OSError as e:
            raise CommandError(args, None, str(e)) from e

        if returncode != 0:
            raise CommandError(args, returncode)
