"""Hooks wiring the collaboration runtime to document persistence."""

from .hooks import CollaborationHooks

__all__ = ["CollaborationHooks"]
