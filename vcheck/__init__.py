"""Release decision checks for multi-package workspace repositories."""

__version__ = "0.1.0"
