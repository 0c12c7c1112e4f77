"""Bundled quiz content."""
