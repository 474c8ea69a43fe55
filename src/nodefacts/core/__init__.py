"""Measurement data model, diff and filter operations."""
