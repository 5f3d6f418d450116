"""Kubernetes operator managing AWS RDS database instances."""

__version__ = "0.1.0"
