"""Argument parsing for vbox-cluster CLI."""

import argparse
from typing import Optional, Sequence

from .. import __version__


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    p = argparse.ArgumentParser(prog="vbox-cluster", description="VirtualBox guests as container hosts")
    p.add_argument("--version", action="version", version=f"vbox-cluster {__version__}")
    p.add_argument("-f", "--file", default="cluster.yml", metavar="FILE", help="Cluster definition (default: cluster.yml)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log hypervisor commands")

    sub = p.add_subparsers(dest="command", metavar="<command>")

    for cmd_name, aliases, help_text in [
        ("up", [], "Create missing machines, start existing ones"),
        ("start", [], "Start machines"),
        ("halt", ["stop"], "Shut machines down, forcing them off if needed"),
        ("kill", [], "Power machines off immediately"),
        ("rm", ["destroy"], "Remove machines"),
        ("restart", [], "Halt then start machines"),
    ]:
        add = sub.add_parser(cmd_name, help=help_text, aliases=aliases)
        add.add_argument("names", nargs="*", metavar="NAME", help="Machines (default: all)")
        if cmd_name == "up":
            add.add_argument("--token", help="Swarm discovery token for new machines")
        if cmd_name in ("halt", "restart"):
            add.add_argument("--respite", type=int, metavar="SECS", help="Grace period before forcing off")

    sub.add_parser("ps", help="List machines and their state", aliases=["ls"])

    add = sub.add_parser("info", help="Show the VirtualBox description of a machine")
    add.add_argument("name", help="Machine name")

    args = p.parse_args(argv)
    args.parser = p
    return args
