"""Collect Linux system figures from /proc, share snapshots over gRPC and show them as tables."""

__version__ = "0.1.0"