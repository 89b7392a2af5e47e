"""Shared errors, constants, models and logging helpers."""
