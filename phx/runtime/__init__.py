"""Runtime installation."""

from .installer import Installer

__all__ = ["Installer"]
