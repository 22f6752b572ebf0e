"""Logging and runtime settings."""
