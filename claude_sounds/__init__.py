"""Themed sound packs wired to Claude Code lifecycle hooks."""

__version__ = "1.0.0"
