"""Host-side access to VirtualBox and docker-machine."""

from vbox_cluster.host.gateway import ProcessGateway
from vbox_cluster.host.info import GuestInfo, GuestInspector, parse_info
from vbox_cluster.host.lifecycle import HaltState, LifecycleController
from vbox_cluster.host.probe import StateProbe
from vbox_cluster.host.provisioner import ResourceProvisioner

__all__ = [
    "ProcessGateway",
    "GuestInfo",
    "GuestInspector",
    "parse_info",
    "HaltState",
    "LifecycleController",
    "StateProbe",
    "ResourceProvisioner",
]
