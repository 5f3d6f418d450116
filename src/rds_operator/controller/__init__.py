"""Lifecycle reconciler for RDSInstance records."""
