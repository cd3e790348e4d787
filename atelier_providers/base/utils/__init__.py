"""Shared helpers for message handling, attachment encoding and response cleanup."""
