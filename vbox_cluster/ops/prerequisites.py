"""Prerequisite detection for vbox-cluster."""

import shutil
import sys

from ..config import Settings


def check_dependencies(settings: Settings) -> list[str]:
    """Return list of missing tools (empty if all present)."""
    missing = []
    if not shutil.which(settings.manage):
        missing.append("VirtualBox")
    if not shutil.which(settings.machine):
        missing.append("docker-machine")
    return missing


def format_install_instructions(missing: list[str]) -> str:
    """Generate installation instructions for missing tools."""
    lines = ["Missing prerequisites:"]
    for dep in missing:
        lines.append(f"  - {dep}")
    lines.append("")
    lines.append("Install with:")
    lines.append("")

    if sys.platform == "darwin":
        lines.append("  macOS:")
        lines.append("    brew install --cask virtualbox")
        lines.append("    brew install docker-machine")
    else:
        lines.append("  Ubuntu/Debian:")
        lines.append("    sudo apt install virtualbox")
        lines.append("")
        lines.append("  docker-machine:")
        lines.append("    https://github.com/docker/machine/releases")
    lines.append("")
    lines.append("Or point VBOX_CLUSTER_MANAGE / VBOX_CLUSTER_MACHINE at existing binaries.")

    return "\n".join(lines)
