"""Version activation: resolving and switching the active PHP."""

from .activator import Activator
from .resolver import ActivationResolver, Resolution

__all__ = ["Activator", "ActivationResolver", "Resolution"]
