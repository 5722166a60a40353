"""Resolution and invocation bridge for the BeadBoard command-line tools."""

__version__ = "0.3.0"
