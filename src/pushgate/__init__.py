"""pushgate: a git pre-receive hook that rejects forbidden file names."""

__version__ = "0.1.0"
