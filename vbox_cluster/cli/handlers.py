"""Command handlers for vbox-cluster CLI."""

from typing import Any, Iterable

from ..cluster import ClusterSnapshot
from ..domain.plan import Operation
from ..errors import ClusterError
from ..ops import BulkOperationPipeline
from ..output import log_step, log_success, log_warning, print_table


COMMANDS = {}


def command(name, aliases=()):
    """Register a command handler."""
    def decorator(fn):
        COMMANDS[name] = fn
        for alias in aliases:
            COMMANDS[alias] = fn
        return fn
    return decorator


def _apply(args, pipeline: BulkOperationPipeline, snapshot: ClusterSnapshot,
           operations: Iterable[Operation], **options: Any) -> None:
    """Run operations over the requested machines and report the outcome."""
    names = args.names or snapshot.names()
    operations = list(operations)
    options = {k: v for k, v in options.items() if v is not None}

    log_step(f"{', '.join(op.value for op in operations)}: {', '.join(names)}")
    report = pipeline.apply(names, operations, options, snapshot)

    for name in report.skipped:
        log_warning(f"No machine named {name} in cluster {snapshot.prefix}")
    if report.failures:
        lines = [f"{f.operation.value} {f.target}: {f.error}" for f in report.failures]
        raise ClusterError("\n".join(lines))

    guests = sorted({guest for guest, _ in report.done})
    if guests:
        log_success(", ".join(guests))


@command("up")
def cmd_up(args, pipeline, snapshot):
    _apply(args, pipeline, snapshot, [Operation.UP], token=args.token)


@command("start")
def cmd_start(args, pipeline, snapshot):
    _apply(args, pipeline, snapshot, [Operation.START])


@command("halt", aliases=["stop"])
def cmd_halt(args, pipeline, snapshot):
    _apply(args, pipeline, snapshot, [Operation.STOP], respite=args.respite)


@command("kill")
def cmd_kill(args, pipeline, snapshot):
    _apply(args, pipeline, snapshot, [Operation.KILL])


@command("rm", aliases=["destroy"])
def cmd_rm(args, pipeline, snapshot):
    _apply(args, pipeline, snapshot, [Operation.RM])


@command("restart")
def cmd_restart(args, pipeline, snapshot):
    _apply(args, pipeline, snapshot, [Operation.STOP, Operation.START], respite=args.respite)


@command("ps", aliases=["ls"])
def cmd_ps(args, pipeline, snapshot):
    registered = pipeline.probe.guests()
    rows = []
    for target in snapshot:
        if not any(h.matches(target.guest) for h in registered):
            state = "absent"
        elif pipeline.probe.running(target.guest) is not None:
            state = "running"
        else:
            state = "stopped"
        rows.append([target.machine.name, target.guest, state])
    print_table(["NAME", "GUEST", "STATE"], rows)


@command("info")
def cmd_info(args, pipeline, snapshot):
    target = snapshot.resolve(args.name)
    if target is None:
        raise ClusterError(f"No machine named {args.name} in cluster {snapshot.prefix}")

    info = pipeline.provisioner.inspector.info(target.guest)
    for key, value in info.items():
        if isinstance(value, list):
            for i, item in enumerate(value):
                print(f"{key}({i})={item}")
        else:
            print(f"{key}={value}")
