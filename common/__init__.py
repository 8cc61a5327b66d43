"""Shared display and URL helpers."""
