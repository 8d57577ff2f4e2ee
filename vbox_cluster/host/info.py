"""Guest description parsing.

``VBoxManage showvminfo --machinereadable`` prints one ``KEY=VALUE`` per line.
Some keys carry an index in parentheses (``Forwarding(0)``, ``Forwarding(1)``);
those are collected into a single list under the bare key.
"""

import logging
import re
from typing import Iterable, Union

from ..config import Settings
from ..domain.guest import ShareDescriptor
from .gateway import ProcessGateway

logger = logging.getLogger(__name__)

_INDEXED_KEY = re.compile(r"^(.*)\(\d+\)$")
_SHARE_PATH_KEY = re.compile(r"^SharedFolderPathMachineMapping(\d+)$")
_ESCAPED = re.compile(r'\\(["\\])')

InfoValue = Union[str, list[str]]


def unquote(value: str) -> str:
    """Strip one pair of enclosing double quotes and undo backslash escapes.

    Quoted values escape embedded quotes and backslashes as \\" and \\\\.
    """
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return _ESCAPED.sub(r"\1", value[1:-1])
    return value


class GuestInfo(dict):
    """Parsed guest description: key -> string, or list of strings for indexed keys."""

    def text(self, key: str, default: str = "") -> str:
        """Scalar value for key with surrounding quotes removed."""
        value = self.get(key)
        if not isinstance(value, str):
            return default
        return unquote(value)

    def values_of(self, key: str) -> list[str]:
        """Unquoted values for an indexed key; empty if absent."""
        value = self.get(key, [])
        if isinstance(value, str):
            value = [value]
        return [unquote(v) for v in value]

    def shared_folders(self) -> list[ShareDescriptor]:
        """Machine-level shared folders, in index order."""
        shares = []
        for key in self:
            match = _SHARE_PATH_KEY.match(key)
            if not match:
                continue
            name = self.text(f"SharedFolderNameMachineMapping{match.group(1)}")
            if name:
                shares.append(ShareDescriptor(name=name, host_path=self.text(key)))
        return shares

    def forwarding_rules(self) -> list[str]:
        """NAT port-forwarding rules on any adapter, as natpf specs.

        A spec reads "name,protocol,host ip,host port,guest ip,guest port".
        """
        return [v for v in self.values_of("Forwarding") if v]


def parse_info(lines: Iterable[str]) -> GuestInfo:
    """Parse machine-readable guest output into a GuestInfo."""
    info = GuestInfo()
    for line in lines:
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        value = value.strip()

        match = _INDEXED_KEY.match(key)
        if match:
            base = match.group(1)
            existing = info.get(base)
            if not isinstance(existing, list):
                existing = info[base] = []
            existing.append(value)
        else:
            info[key] = value
    return info


class GuestInspector:
    """Fetches fresh guest descriptions from VirtualBox."""

    def __init__(self, gateway: ProcessGateway, settings: Settings) -> None:
        self.gateway = gateway
        self.settings = settings

    def info(self, guest: str) -> GuestInfo:
        """Describe a guest as it is right now. Nothing is cached."""
        logger.info(f"Getting info for guest {guest}")
        lines = self.gateway.run(
            [self.settings.manage, "showvminfo", guest, "--machinereadable", "--details"]
        )
        return parse_info(lines)
