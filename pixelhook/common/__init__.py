"""Shared helpers used across Pixelhook modules."""
