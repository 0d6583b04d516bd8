"""Nightfall - night action resolution for werewolf-style games."""

__version__ = "0.1.0"
