"""Exception hierarchy for vbox-cluster."""

from __future__ import annotations


class ClusterError(Exception):
    """Base exception for vbox-cluster errors."""


class ConfigError(ClusterError):
    """Invalid cluster file or settings."""


class CommandError(ClusterError):
    """An external command failed or could not be started.

    Attributes:
        command: The argument vector that was run
        returncode: Exit status, or None if the program never started
        output: Captured stderr (or stdout when stderr was empty)
    """

    def __init__(self, command: list[str], returncode: int | None, output: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        cmd = " ".join(self.command)
        if returncode is None:
            message = f"Could not run command: {cmd}"
        else:
            message = f"Command failed (exit {returncode}): {cmd}"
        if output:
            message = f"{message}\n{output}"
        super().__init__(message)


class HaltCancelled(ClusterError):
    """Waiting for a guest to shut down was cancelled."""

    def __init__(self, guest: str) -> None:
        super().__init__(f"Cancelled while waiting for {guest} to shut down")
        self.guest = guest


class PrerequisitesMissing(ClusterError):
    """Required external tools are missing."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing prerequisites: {', '.join(missing)}")
