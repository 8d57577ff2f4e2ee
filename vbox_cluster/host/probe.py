"""Power-state detection from VirtualBox guest listings."""

import logging
import re
from typing import Optional

from ..config import Settings
from ..domain.guest import GuestHandle
from .gateway import ProcessGateway

logger = logging.getLogger(__name__)

_LISTING_LINE = re.compile(r'^"(.*)" \{([^}]*)\}$')


def parse_listing(lines: list[str]) -> list[GuestHandle]:
    """Parse ``VBoxManage list`` output: one quoted name and {uuid} per line.

    Names are printed as is between the quotes, so they may contain quotes
    themselves. Lines of any other shape are ignored.
    """
    handles = []
    for line in lines:
        match = _LISTING_LINE.match(line.strip())
        if match:
            handles.append(GuestHandle(name=match.group(1), identifier=match.group(2)))
        else:
            logger.debug(f"Ignoring listing line {line!r}")
    return handles


class StateProbe:
    """Answers whether guests exist and whether they are running."""

    def __init__(self, gateway: ProcessGateway, settings: Settings) -> None:
        self.gateway = gateway
        self.settings = settings

    def _list(self, what: str) -> list[GuestHandle]:
        return parse_listing(self.gateway.run([self.settings.manage, "list", what]))

    def running(self, guest: str) -> Optional[str]:
        """Identifier of the guest if it is running, None otherwise.

        Args:
            guest: Guest name or identifier
        """
        logger.debug(f"Detecting running state of {guest}")
        for handle in self._list("runningvms"):
            if handle.matches(guest):
                logger.debug(f"{guest} is running, id: {handle.identifier}")
                return handle.identifier
        return None

    def guests(self) -> list[GuestHandle]:
        """All guests registered with VirtualBox, running or not."""
        return self._list("vms")

    def exists(self, guest: str) -> bool:
        """Check whether a guest with this name or identifier is registered."""
        return any(handle.matches(guest) for handle in self.guests())
