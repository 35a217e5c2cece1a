"""Core domain layer - entities, interfaces, services and exceptions."""

from partsync.core import entities, exceptions, interfaces

__all__ = ["entities", "interfaces", "exceptions"]
