"""Access-control and lifecycle backend for collaborative documents."""

__version__ = "0.1.0"
