"""Shared test fixtures."""

import pytest

from vbox_cluster.cluster import parse_cluster
from vbox_cluster.config import Settings
from vbox_cluster.errors import CommandError
from vbox_cluster.host.info import GuestInspector
from vbox_cluster.host.lifecycle import LifecycleController
from vbox_cluster.host.probe import StateProbe
from vbox_cluster.host.provisioner import ResourceProvisioner
from vbox_cluster.ops.pipeline import BulkOperationPipeline


class FakeGateway:
    """Records commands and answers them from a script instead of running them.

    Responses are keyed on the arguments after the binary. A response is either
    a list of lines or a callable returning one, so that successive queries can
    see a changing world.
    """

    def __init__(self):
        self.calls = []
        self.responses = {}
        self.failures = []

    def on(self, *args, lines=None):
        self.responses[args] = lines if lines is not None else []

    def fail(self, *prefix, returncode=1):
        self.failures.append((prefix, returncode))

    def _record(self, args):
        self.calls.append(list(args))
        rest = tuple(args[1:])
        for prefix, returncode in self.failures:
            if rest[:len(prefix)] == prefix:
                raise CommandError(list(args), returncode, "scripted failure")
        return rest

    def run(self, args):
        rest = self._record(args)
        response = self.responses.get(rest, [])
        if callable(response):
            return response()
        return list(response)

    def stream(self, args):
        self._record(args)

    def commands(self, *prefix):
        """Recorded commands (without the binary) starting with prefix."""
        return [c[1:] for c in self.calls if tuple(c[1:len(prefix) + 1]) == prefix]


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def settings():
    return Settings(manage="VBoxManage", machine="docker-machine", respite=3, poll_interval=0)


@pytest.fixture
def sleep(mocker):
    """Patch out the wait between two running-state polls."""
    return mocker.patch("vbox_cluster.host.lifecycle.time.sleep")


@pytest.fixture
def probe(gateway, settings):
    return StateProbe(gateway, settings)


@pytest.fixture
def inspector(gateway, settings):
    return GuestInspector(gateway, settings)


@pytest.fixture
def lifecycle(gateway, probe, settings):
    return LifecycleController(gateway, probe, settings)


@pytest.fixture
def provisioner(gateway, inspector, probe, lifecycle, settings):
    return ResourceProvisioner(gateway, inspector, probe, lifecycle, settings)


@pytest.fixture
def pipeline(gateway, settings):
    return BulkOperationPipeline.from_settings(settings, gateway)


@pytest.fixture
def snapshot():
    """A two-machine cluster named "dev"."""
    return parse_cluster(
        {
            "web1": {"master": True, "ports": ["8080:80"]},
            "db": {"memory": 2048},
        },
        prefix="dev",
    )


def running_listing(*guests):
    """Lines of ``VBoxManage list runningvms`` for (name, uuid) pairs."""
    return [f'"{name}" {{{ident}}}' for name, ident in guests]
