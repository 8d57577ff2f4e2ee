"""Guest power-state transitions.

Halting is a small state machine: press the ACPI power button, wait for the
guest to go away, and pull the plug if it is still running once the respite
is used up::

    RUNNING -> WAITING_GRACEFUL -> STOPPED
                                -> FORCED_OFF

Creation, start and removal go through docker-machine so that certificates
and machine metadata stay in sync with VirtualBox.
"""

import logging
import threading
import time
from enum import Enum
from typing import Optional

from ..config import Settings
from ..domain.machine import MachineSpec
from ..errors import CommandError, HaltCancelled
from .gateway import ProcessGateway
from .probe import StateProbe

logger = logging.getLogger(__name__)


class HaltState(Enum):
    """States of a halt."""
    RUNNING = "running"
    WAITING_GRACEFUL = "waiting_graceful"
    STOPPED = "stopped"
    FORCED_OFF = "forced_off"


class LifecycleController:
    """Starts, stops, creates and removes guests."""

    def __init__(self, gateway: ProcessGateway, probe: StateProbe, settings: Settings) -> None:
        self.gateway = gateway
        self.probe = probe
        self.settings = settings

    def _manage(self, *args: str) -> list[str]:
        return self.gateway.run([self.settings.manage, *args])

    def _machine(self, *args: str) -> None:
        self.gateway.stream([self.settings.machine, *args])

    def halt(
        self,
        guest: str,
        respite: Optional[int] = None,
        cancel: Optional[threading.Event] = None,
    ) -> HaltState:
        """Shut a guest down gracefully, forcing it off after the respite.

        Blocks while waiting: the running state is polled, then one poll
        interval slept, until the guest is gone or ``respite`` intervals have
        passed. A final poll decides between STOPPED and FORCED_OFF.

        Args:
            guest: Guest name or identifier
            respite: Poll intervals to wait; defaults to the settings value
            cancel: Event that aborts the wait when set, waking a pending sleep

        Returns:
            HaltState.STOPPED or HaltState.FORCED_OFF

        Raises:
            HaltCancelled: If cancel was set before the guest stopped
        """
        if respite is None:
            respite = self.settings.respite

        logger.debug(f"Halting {guest}, respite {respite}")
        try:
            self._manage("controlvm", guest, "acpipowerbutton")
        except CommandError as e:
            # Already off guests refuse the power button; the poll below sorts it out.
            logger.debug(f"Power button for {guest} refused: {e}")

        state = HaltState.WAITING_GRACEFUL
        logger.info(f"Waiting for {guest} to shutdown...")
        countdown = respite
        while True:
            if self.probe.running(guest) is None:
                state = HaltState.STOPPED
                break
            if cancel is not None and cancel.is_set():
                raise HaltCancelled(guest)
            if countdown <= 0:
                break
            if cancel is None:
                time.sleep(self.settings.poll_interval)
            else:
                cancel.wait(self.settings.poll_interval)
            countdown -= 1

        if state is HaltState.WAITING_GRACEFUL:
            logger.info(f"Forcing powering off for {guest}")
            self.poweroff(guest)
            state = HaltState.FORCED_OFF

        logger.debug(f"Halt of {guest} ended in state {state.value}")
        return state

    def poweroff(self, guest: str) -> None:
        """Power a guest off immediately."""
        self._manage("controlvm", guest, "poweroff")

    def start(self, guest: str) -> None:
        """Start an existing guest."""
        logger.info(f"Starting {guest}")
        self._machine("start", guest)

    def create(self, guest: str, machine: MachineSpec, token: Optional[str] = None) -> None:
        """Create a guest from its machine definition.

        Args:
            guest: Name to give the new guest
            machine: Hardware and role of the guest
            token: Swarm discovery token; the guest joins no swarm when empty
        """
        args = [
            "create", "--driver", "virtualbox",
            "--virtualbox-cpu-count", str(machine.cpu),
            "--virtualbox-memory", str(machine.memory),
            "--virtualbox-disk-size", str(machine.size),
        ]
        if token:
            args += ["--swarm", "--swarm-discovery", f"token://{token}"]
            if machine.master:
                args.append("--swarm-master")
        args.append(guest)

        logger.info(f"Creating {guest}")
        self._machine(*args)

    def destroy(self, guest: str) -> None:
        """Remove a guest and its disks."""
        logger.info(f"Removing {guest}")
        self._machine("rm", "-y", guest)
