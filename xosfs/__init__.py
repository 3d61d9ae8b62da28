"""Disk image tools for the XFS file system and XSM machine building blocks."""

__version__ = "2.0.0"