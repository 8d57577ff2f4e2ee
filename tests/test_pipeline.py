"""Tests for the bulk operation pipeline."""

from conftest import running_listing
from vbox_cluster.cluster import parse_cluster
from vbox_cluster.domain.plan import Operation, OperationPlan

STOP, KILL, RM, UP, START = (
    Operation.STOP, Operation.KILL, Operation.RM, Operation.UP, Operation.START,
)


def index_of(gateway, *parts):
    """Position of the first recorded command containing all parts, in order."""
    for i, call in enumerate(gateway.calls):
        if all(p in call for p in parts):
            return i
    raise AssertionError(f"no command with {parts}: {gateway.calls}")


class TestApply:
    """Tests for BulkOperationPipeline.apply."""

    def test_operations_in_order_and_unknown_names_skipped(self, gateway, pipeline, snapshot):
        gateway.on("list", "runningvms", lines=[])
        gateway.on("list", "vms", lines=[])

        report = pipeline.apply(["web1", "web2"], [STOP, RM, UP], {}, snapshot)

        assert report.done == [("dev-web1", STOP), ("dev-web1", RM), ("dev-web1", UP)]
        assert report.skipped == ["web2"]
        assert report.ok
        assert (
            index_of(gateway, "acpipowerbutton")
            < index_of(gateway, "rm", "-y")
            < index_of(gateway, "create")
        )
        assert not any("web2" in " ".join(c) for c in gateway.calls)

    def test_empty_operations_mean_up(self, gateway, pipeline, snapshot):
        gateway.on("list", "vms", lines=running_listing(("dev-db", "id-2")))

        report = pipeline.apply(["db"], [], {}, snapshot)

        assert report.done == [("dev-db", UP)]
        assert gateway.commands("start") == [["start", "dev-db"]]
        assert gateway.commands("create") == []

    def test_up_creates_and_provisions_missing_guest(self, gateway, pipeline, snapshot):
        gateway.on("list", "vms", lines=[])
        gateway.on("list", "runningvms", lines=[])

        pipeline.apply(["web1"], [UP], {"token": "t0k"}, snapshot)

        create = gateway.commands("create")[0]
        assert "token://t0k" in create
        assert "--swarm-master" in create
        assert gateway.commands("modifyvm") == [
            ["modifyvm", "dev-web1", "--natpf1", "tcp-8080,tcp,,8080,,80"]
        ]
        assert index_of(gateway, "create") < index_of(gateway, "modifyvm") < index_of(gateway, "start")

    def test_up_shares_then_restarts(self, gateway, pipeline, tmp_path):
        snapshot = parse_cluster({"box": {"shares": [str(tmp_path)]}}, prefix="dev")
        gateway.on("list", "vms", lines=[])
        gateway.on("list", "runningvms", lines=[])

        pipeline.apply(["box"], [UP], {}, snapshot)

        assert index_of(gateway, "create") < index_of(gateway, "sharedfolder") < index_of(gateway, "start")

    def test_rm_then_up_recreates(self, gateway, pipeline, snapshot):
        """Existence is checked when UP runs, not taken from before RM."""
        vms = iter([[]])
        gateway.on("list", "vms", lines=lambda: next(vms))

        pipeline.apply(["db"], [RM, UP], {}, snapshot)

        assert len(gateway.commands("create")) == 1

    def test_respite_option(self, gateway, pipeline, snapshot, sleep):
        gateway.on("list", "runningvms", lines=running_listing(("dev-db", "id-2")))

        pipeline.apply(["db"], [STOP], {"respite": 0}, snapshot)

        sleep.assert_not_called()
        assert gateway.commands("controlvm", "dev-db", "poweroff") == [
            ["controlvm", "dev-db", "poweroff"]
        ]

    def test_respite_option_reaches_share_halt(self, gateway, pipeline, tmp_path, sleep):
        """A freshly created, running guest is halted for its shares within the given respite."""
        snapshot = parse_cluster({"box": {"shares": [str(tmp_path)]}}, prefix="dev")
        gateway.on("list", "vms", lines=[])
        gateway.on("list", "runningvms", lines=running_listing(("dev-box", "id-3")))

        pipeline.apply(["box"], [UP], {"respite": 0}, snapshot)

        sleep.assert_not_called()
        assert gateway.commands("controlvm", "dev-box", "poweroff") == [
            ["controlvm", "dev-box", "poweroff"]
        ]
        assert index_of(gateway, "poweroff") < index_of(gateway, "sharedfolder")

    def test_kill_and_start(self, gateway, pipeline, snapshot):
        pipeline.apply(["db"], [KILL, START], {}, snapshot)

        assert gateway.calls == [
            ["VBoxManage", "controlvm", "dev-db", "poweroff"],
            ["docker-machine", "start", "dev-db"],
        ]

    def test_targets_run_one_after_the_other(self, gateway, pipeline, snapshot):
        pipeline.apply(["db", "web1"], [KILL, START], {}, snapshot)

        assert gateway.calls == [
            ["VBoxManage", "controlvm", "dev-db", "poweroff"],
            ["docker-machine", "start", "dev-db"],
            ["VBoxManage", "controlvm", "dev-web1", "poweroff"],
            ["docker-machine", "start", "dev-web1"],
        ]

    def test_resolves_guest_names(self, gateway, pipeline, snapshot):
        report = pipeline.apply(["dev-db"], [KILL], {}, snapshot)
        assert report.done == [("dev-db", KILL)]

    def test_failure_does_not_stop_the_run(self, gateway, pipeline, snapshot):
        gateway.fail("rm", "-y", "dev-web1")

        report = pipeline.apply(["web1", "db"], [RM, START], {}, snapshot)

        assert not report.ok
        assert [(f.target, f.operation) for f in report.failures] == [("dev-web1", RM)]
        assert report.failures[0].error.returncode == 1
        assert report.done == [("dev-web1", START), ("dev-db", RM), ("dev-db", START)]

    def test_nothing_resolves(self, gateway, pipeline, snapshot):
        report = pipeline.apply(["x", "y"], [UP], {}, snapshot)

        assert report.skipped == ["x", "y"]
        assert gateway.calls == []


class TestDispatch:
    """Tests for the operation dispatch table."""

    def test_every_operation_has_a_handler(self, pipeline):
        assert set(pipeline.handlers) == set(Operation)

    def test_run_plan(self, gateway, pipeline, snapshot):
        plan = OperationPlan.build(["db"], [KILL])

        report = pipeline.run(plan, snapshot)

        assert report.done == [("dev-db", KILL)]


class TestOperationPlan:
    """Tests for OperationPlan.build."""

    def test_defaults_to_up(self):
        assert OperationPlan.build(["a"]).operations == (UP,)

    def test_keeps_order_and_repeats(self):
        plan = OperationPlan.build(["b", "a"], [STOP, KILL, RM, UP, STOP])
        assert plan.targets == ("b", "a")
        assert plan.operations == (STOP, KILL, RM, UP, STOP)

    def test_options_copied(self):
        options = {"token": "x"}
        plan = OperationPlan.build(["a"], options=options)
        options["token"] = "y"
        assert plan.options == {"token": "x"}
