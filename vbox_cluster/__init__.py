"""vbox-cluster - VirtualBox guests as container hosts."""

__version__ = "0.1.0"
