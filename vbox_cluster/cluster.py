"""Cluster definitions - YAML files describing a set of machines.

A cluster file maps short machine names to their attributes::

    core:
      master: true
      memory: 2048
      ports: ["8080:80", "53:53/udp"]
      shares: [/srv/data]
    worker:
      cpu: 2

Guests are named after the file: ``web.yml`` above yields ``web-core`` and
``web-worker``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import yaml
from pydantic import ValidationError

from .domain.machine import MachineSpec
from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Target:
    """A machine definition together with its guest name."""

    guest: str
    machine: MachineSpec


class ClusterSnapshot:
    """Read-only view of the machines of one cluster.

    Attributes:
        prefix: Guest name prefix, usually the cluster file stem
        machines: Machine definitions, in file order
    """

    def __init__(self, prefix: str, machines: list[MachineSpec]) -> None:
        self.prefix = prefix
        self.machines = tuple(machines)

    def guest_name(self, machine: MachineSpec) -> str:
        """Name of the guest backing a machine."""
        if not self.prefix:
            return machine.name
        return f"{self.prefix}-{machine.name}"

    def resolve(self, name: str) -> Optional[Target]:
        """Find a machine by short name or guest name."""
        for machine in self.machines:
            guest = self.guest_name(machine)
            if name in (machine.name, guest):
                return Target(guest=guest, machine=machine)
        return None

    def names(self) -> list[str]:
        """Short names of all machines."""
        return [m.name for m in self.machines]

    def __iter__(self) -> Iterator[Target]:
        for machine in self.machines:
            yield Target(guest=self.guest_name(machine), machine=machine)

    def __len__(self) -> int:
        return len(self.machines)


def parse_cluster(data, prefix: str) -> ClusterSnapshot:
    """Build a snapshot from already-loaded YAML data.

    Raises:
        ConfigError: If the structure or a machine definition is invalid
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Cluster definition must be a mapping of machine names")

    machines = []
    for name, attrs in data.items():
        if attrs is None:
            attrs = {}
        if not isinstance(attrs, dict):
            raise ConfigError(f"Machine {name}: attributes must be a mapping")
        try:
            machines.append(MachineSpec(**{**attrs, "name": str(name)}))
        except ValidationError as e:
            raise ConfigError(f"Machine {name}: {e}") from e

    return ClusterSnapshot(prefix=prefix, machines=machines)


def load_cluster(path: Path) -> ClusterSnapshot:
    """Load a cluster file.

    Raises:
        ConfigError: If the file is missing, not YAML, or invalid
    """
    if not path.exists():
        raise ConfigError(f"Cluster file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e

    snapshot = parse_cluster(data, prefix=path.stem)
    logger.debug(f"Loaded {len(snapshot)} machine(s) from {path}")
    return snapshot
