"""Shared utilities: logging and text rendering."""
