"""Operation plans - what to do, to which machines, in which order."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Mapping


class Operation(Enum):
    """Lifecycle operations a plan can apply to a machine."""
    STOP = "stop"     # Graceful halt, forced off after the respite
    KILL = "kill"     # Immediate power off
    RM = "rm"         # Destroy
    UP = "up"         # Create if absent, else start
    START = "start"   # Start an existing machine


DEFAULT_OPERATIONS = (Operation.UP,)


@dataclass(frozen=True)
class OperationPlan:
    """Ordered operations applied, in order, to each of an ordered list of targets.

    Attributes:
        targets: Machine names, in the order they are processed
        operations: Operations run on every target, in this order
        options: Extra parameters ("token", "respite")
    """

    targets: tuple[str, ...]
    operations: tuple[Operation, ...] = DEFAULT_OPERATIONS
    options: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        targets: Iterable[str],
        operations: Iterable[Operation] = (),
        options: Mapping[str, Any] | None = None,
    ) -> "OperationPlan":
        """Create a plan, defaulting to a single UP when no operation is given."""
        ops = tuple(operations) or DEFAULT_OPERATIONS
        return cls(targets=tuple(targets), operations=ops, options=dict(options or {}))
