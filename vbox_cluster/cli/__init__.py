"""Command-line interface for vbox-cluster."""

import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from ..cluster import load_cluster
from ..config import Settings
from ..errors import ClusterError, PrerequisitesMissing
from ..ops import BulkOperationPipeline, check_dependencies, format_install_instructions
from ..output import die

from .args import parse_args
from .handlers import COMMANDS


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    if not args.command:
        args.parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handler = COMMANDS[args.command]
    try:
        settings = Settings.from_env()
        missing = check_dependencies(settings)
        if missing:
            raise PrerequisitesMissing(missing)

        snapshot = load_cluster(Path(args.file))
        pipeline = BulkOperationPipeline.from_settings(settings)
        handler(args, pipeline, snapshot)

    except PrerequisitesMissing as e:
        print(format_install_instructions(e.missing))
        sys.exit(1)
    except ClusterError as e:
        die(str(e))
