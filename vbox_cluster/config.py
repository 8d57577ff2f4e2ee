"""Runtime settings, read once from the environment and passed around."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigError

DEFAULT_MANAGE = "VBoxManage"
DEFAULT_MACHINE = "docker-machine"
DEFAULT_RESPITE = 15
DEFAULT_POLL_INTERVAL = 1.0


@dataclass(frozen=True)
class Settings:
    """Paths to external tools and timing knobs.

    Attributes:
        manage: VBoxManage binary
        machine: docker-machine binary
        respite: Default number of polls to wait for a graceful shutdown
        poll_interval: Seconds between two polls while waiting
    """

    manage: str = DEFAULT_MANAGE
    machine: str = DEFAULT_MACHINE
    respite: int = DEFAULT_RESPITE
    poll_interval: float = DEFAULT_POLL_INTERVAL

    def __post_init__(self) -> None:
        if self.respite < 0:
            raise ConfigError(f"respite must be >= 0, got {self.respite}")
        if self.poll_interval < 0:
            raise ConfigError(f"poll interval must be >= 0, got {self.poll_interval}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from VBOX_CLUSTER_* environment variables."""
        env = os.environ if environ is None else environ
        try:
            respite = int(env.get("VBOX_CLUSTER_RESPITE", DEFAULT_RESPITE))
            poll_interval = float(env.get("VBOX_CLUSTER_POLL", DEFAULT_POLL_INTERVAL))
        except ValueError as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e

        return cls(
            manage=env.get("VBOX_CLUSTER_MANAGE", DEFAULT_MANAGE),
            machine=env.get("VBOX_CLUSTER_MACHINE", DEFAULT_MACHINE),
            respite=respite,
            poll_interval=poll_interval,
        )
