"""Launch a command and report its wall time and resource usage."""

__version__ = "1.0.0"
