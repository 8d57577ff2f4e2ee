"""Guest value objects - handles, shared folders and NAT forwarding rules."""

from dataclasses import dataclass

PROTOCOLS = ("tcp", "udp")


@dataclass(frozen=True)
class GuestHandle:
    """A registered guest; name and identifier both address it."""

    name: str
    identifier: str

    def matches(self, ref: str) -> bool:
        """True if ref is this guest's name or identifier."""
        return ref == self.name or ref == self.identifier


@dataclass(frozen=True)
class ShareDescriptor:
    """A host directory exported to a guest under a share name."""

    name: str
    host_path: str
    automount: bool = True


@dataclass(frozen=True)
class ForwardRule:
    """A NAT port-forward from a host port to a guest port.

    Attributes:
        host_port: Port on the host
        guest_port: Port inside the guest
        protocol: "tcp" or "udp" (lowercased on construction)
    """

    host_port: int
    guest_port: int
    protocol: str = "tcp"

    def __post_init__(self) -> None:
        object.__setattr__(self, "protocol", self.protocol.lower())

    @property
    def supported(self) -> bool:
        """Whether VirtualBox NAT can forward this protocol."""
        return self.protocol in PROTOCOLS

    @property
    def name(self) -> str:
        """Rule name as registered with the NAT engine."""
        return f"{self.protocol}-{self.host_port}"

    @property
    def spec(self) -> str:
        """Rule specification for natpf1, host and guest IPs left empty."""
        return f"{self.name},{self.protocol},,{self.host_port},,{self.guest_port}"
