"""Expose record models."""

from .control import ControlMap
from .package import Comparator, Dependency, Package, VersionConstraint

__all__ = [
    "Comparator",
    "ControlMap",
    "Dependency",
    "Package",
    "VersionConstraint",
]
