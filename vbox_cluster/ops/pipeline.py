"""Bulk operations - apply an ordered list of operations to named machines.

Targets are processed one after the other, and every operation of a target
completes before the next target starts. A failing command is recorded and the
run carries on with whatever is left.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional

from ..cluster import ClusterSnapshot, Target
from ..config import Settings
from ..domain.plan import DEFAULT_OPERATIONS, Operation, OperationPlan
from ..errors import CommandError
from ..host.gateway import ProcessGateway
from ..host.info import GuestInspector
from ..host.lifecycle import LifecycleController
from ..host.probe import StateProbe
from ..host.provisioner import ResourceProvisioner

logger = logging.getLogger(__name__)


@dataclass
class Failure:
    """An operation that failed on a target."""

    target: str
    operation: Operation
    error: CommandError


@dataclass
class PipelineReport:
    """What happened during one run of the pipeline.

    Attributes:
        done: (guest, operation) pairs that completed, in execution order
        skipped: Names that did not resolve to a machine
        failures: Operations that raised a CommandError
    """

    done: list[tuple[str, Operation]] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failures: list[Failure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class BulkOperationPipeline:
    """Runs operation plans against the machines of a cluster."""

    def __init__(
        self,
        probe: StateProbe,
        lifecycle: LifecycleController,
        provisioner: ResourceProvisioner,
    ) -> None:
        self.probe = probe
        self.lifecycle = lifecycle
        self.provisioner = provisioner
        self.handlers: dict[Operation, Callable[[Target, Mapping[str, Any]], None]] = {
            Operation.STOP: self._stop,
            Operation.KILL: self._kill,
            Operation.RM: self._rm,
            Operation.UP: self._up,
            Operation.START: self._start,
        }

    @classmethod
    def from_settings(
        cls, settings: Settings, gateway: Optional[ProcessGateway] = None
    ) -> "BulkOperationPipeline":
        """Wire a pipeline and its collaborators around one gateway."""
        gateway = gateway or ProcessGateway()
        probe = StateProbe(gateway, settings)
        inspector = GuestInspector(gateway, settings)
        lifecycle = LifecycleController(gateway, probe, settings)
        provisioner = ResourceProvisioner(gateway, inspector, probe, lifecycle, settings)
        return cls(probe, lifecycle, provisioner)

    def apply(
        self,
        names: Iterable[str],
        operations: Iterable[Operation],
        options: Mapping[str, Any],
        snapshot: ClusterSnapshot,
    ) -> PipelineReport:
        """Apply operations, in order, to each named machine, in order.

        Names that the snapshot does not know are skipped. An empty list of
        operations means a single UP.
        """
        operations = tuple(operations) or DEFAULT_OPERATIONS
        report = PipelineReport()

        for name in names:
            target = snapshot.resolve(name)
            if target is None:
                logger.debug(f"No machine named {name}, skipping")
                report.skipped.append(name)
                continue

            for operation in operations:
                logger.debug(f"{operation.name} {target.guest}")
                try:
                    self.handlers[operation](target, options)
                except CommandError as e:
                    logger.error(f"{operation.name} failed on {target.guest}: {e}")
                    report.failures.append(Failure(target.guest, operation, e))
                else:
                    report.done.append((target.guest, operation))

        return report

    def run(self, plan: OperationPlan, snapshot: ClusterSnapshot) -> PipelineReport:
        """Apply a prepared plan."""
        return self.apply(plan.targets, plan.operations, plan.options, snapshot)

    def _stop(self, target: Target, options: Mapping[str, Any]) -> None:
        self.lifecycle.halt(target.guest, options.get("respite"))

    def _kill(self, target: Target, options: Mapping[str, Any]) -> None:
        self.lifecycle.poweroff(target.guest)

    def _rm(self, target: Target, options: Mapping[str, Any]) -> None:
        self.lifecycle.destroy(target.guest)

    def _start(self, target: Target, options: Mapping[str, Any]) -> None:
        self.lifecycle.start(target.guest)

    def _up(self, target: Target, options: Mapping[str, Any]) -> None:
        # Existence is checked live so that RM followed by UP recreates.
        if self.probe.exists(target.guest):
            self.lifecycle.start(target.guest)
            return

        self.lifecycle.create(target.guest, target.machine, options.get("token"))
        self._provision(target, options)

    def _provision(self, target: Target, options: Mapping[str, Any]) -> None:
        """Add port forwards and shares to a fresh guest, leaving it running."""
        self.provisioner.forward(target.guest, target.machine.forward_rules())
        for path in target.machine.shares:
            self.provisioner.add_share(target.guest, path, options.get("respite"))
        if self.probe.running(target.guest) is None:
            self.lifecycle.start(target.guest)
