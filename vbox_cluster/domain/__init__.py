"""Domain model - machines, guests and operation plans."""

from .guest import ForwardRule, GuestHandle, ShareDescriptor
from .machine import MachineSpec, parse_port
from .plan import Operation, OperationPlan

__all__ = [
    "ForwardRule",
    "GuestHandle",
    "ShareDescriptor",
    "MachineSpec",
    "parse_port",
    "Operation",
    "OperationPlan",
]
