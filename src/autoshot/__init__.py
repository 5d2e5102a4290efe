"""Generates screenshot tests for Compose preview functions from a resolved symbol dump."""

__version__ = "0.1.0"
