"""Builders for provider clients and instance parameters."""
