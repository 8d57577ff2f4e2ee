"""Shared folders and NAT port forwards.

Both operations are idempotent: an already shared host directory or an identical
forwarding rule is left alone.
"""

import logging
import os
import uuid
from typing import Iterable, Optional, Union

from ..config import Settings
from ..domain.guest import ForwardRule
from .gateway import ProcessGateway
from .info import GuestInspector
from .lifecycle import LifecycleController
from .probe import StateProbe

logger = logging.getLogger(__name__)


def share_name(host_path: str) -> str:
    """Unique share name derived from the last component of a path."""
    tail = os.path.basename(os.path.normpath(host_path)) or "share"
    return f"{tail}-{uuid.uuid4().hex[:8]}"


class ResourceProvisioner:
    """Attaches host directories and port forwards to guests."""

    def __init__(
        self,
        gateway: ProcessGateway,
        inspector: GuestInspector,
        probe: StateProbe,
        lifecycle: LifecycleController,
        settings: Settings,
    ) -> None:
        self.gateway = gateway
        self.inspector = inspector
        self.probe = probe
        self.lifecycle = lifecycle
        self.settings = settings

    def share(self, guest: str, host_path: str) -> Optional[str]:
        """Name of the share exporting host_path to guest, or None."""
        for descriptor in self.inspector.info(guest).shared_folders():
            if descriptor.host_path == host_path:
                return descriptor.name
        return None

    def add_share(
        self, guest: str, host_path: str, respite: Optional[int] = None
    ) -> Optional[str]:
        """Export a host directory to a guest, once.

        VirtualBox refuses new shared folders on live guests, so a running
        guest is halted first and left stopped.

        Args:
            guest: Guest name or identifier
            host_path: Directory on the host
            respite: Halt budget for a running guest; defaults to the settings value

        Returns:
            The share name, or None if host_path is not a directory
        """
        if not os.path.isdir(host_path):
            logger.warning(f"{host_path} is not a host directory!")
            return None

        name = self.share(guest, host_path)
        if name:
            logger.debug(f"{host_path} already shared with {guest} as {name}")
            return name

        if self.probe.running(guest) is not None:
            self.lifecycle.halt(guest, respite)

        name = share_name(host_path)
        logger.info(f"Sharing {host_path} with {guest} as {name}")
        self.gateway.run([
            self.settings.manage, "sharedfolder", "add", guest,
            "--name", name,
            "--hostpath", host_path,
            "--automount",
        ])
        return name

    def forward(
        self, guest: str, rules: Iterable[Union[ForwardRule, tuple[int, int, str]]]
    ) -> list[ForwardRule]:
        """Forward host ports to a guest through its first NAT adapter.

        Rules with a protocol other than tcp or udp are skipped, and so are
        rules the guest already has verbatim. A guest rule with the same name
        but another mapping is deleted and replaced. Within one call the first
        rule for a name wins.

        Args:
            guest: Guest name or identifier
            rules: ForwardRules, or (host_port, guest_port, protocol) triples

        Returns:
            The rules that were added
        """
        candidates = [r if isinstance(r, ForwardRule) else ForwardRule(*r) for r in rules]
        rules = []
        for rule in candidates:
            if rule.supported:
                rules.append(rule)
            else:
                logger.debug(f"Cannot forward {rule.protocol} port {rule.host_port}, skipping")
        if not rules:
            return []

        specs = self.inspector.info(guest).forwarding_rules()
        existing = {spec.split(",", 1)[0]: spec for spec in specs}
        running = self.probe.running(guest) is not None
        if running:
            natpf = [self.settings.manage, "controlvm", guest, "natpf1"]
        else:
            natpf = [self.settings.manage, "modifyvm", guest, "--natpf1"]

        added = []
        seen = set()
        for rule in rules:
            if rule.name in seen:
                logger.debug(f"Forwarding {rule.name} given twice for {guest}, keeping the first")
                continue
            seen.add(rule.name)

            current = existing.get(rule.name)
            if current == rule.spec:
                logger.debug(f"Forwarding {rule.name} already on {guest}")
                continue
            if current is not None:
                logger.info(f"Replacing forwarding {current} on {guest}")
                self.gateway.run([*natpf, "delete", rule.name])

            logger.debug(
                f"Forwarding host port {rule.host_port} onto guest {rule.guest_port} for {rule.protocol}"
            )
            self.gateway.run([*natpf, rule.spec])
            added.append(rule)
        return added
