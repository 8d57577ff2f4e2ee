"""Machine definitions as found in a cluster file."""

from pydantic import BaseModel, field_validator

from .guest import ForwardRule


def parse_port(text: str) -> ForwardRule:
    """Parse "HOST[:GUEST][/PROTO]" into a ForwardRule.

    Raises:
        ValueError: If ports are not integers or the protocol is unsupported
    """
    ports, _, protocol = text.partition("/")
    host, _, guest = ports.partition(":")
    try:
        host_port = int(host)
        guest_port = int(guest) if guest else host_port
    except ValueError:
        raise ValueError(f"invalid port mapping: {text!r}") from None

    rule = ForwardRule(host_port=host_port, guest_port=guest_port, protocol=protocol or "tcp")
    if not rule.supported:
        raise ValueError(f"unsupported protocol in port mapping: {text!r}")
    return rule


class MachineSpec(BaseModel):
    """One guest of the cluster."""
    name: str
    cpu: int = 1
    memory: int = 1024      # MiB
    size: int = 20000       # disk, MB
    master: bool = False
    ports: list[str] = []
    shares: list[str] = []

    @field_validator("ports", mode="before")
    @classmethod
    def _ports_as_text(cls, value):
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValueError("ports must be a list")
        return [str(v) for v in value]

    @field_validator("ports")
    @classmethod
    def _ports_parse(cls, value: list[str]) -> list[str]:
        for port in value:
            parse_port(port)
        return value

    @field_validator("shares", mode="before")
    @classmethod
    def _shares_default(cls, value):
        return [] if value is None else value

    def forward_rules(self) -> list[ForwardRule]:
        """Port mappings of this machine as forwarding rules."""
        return [parse_port(p) for p in self.ports]
