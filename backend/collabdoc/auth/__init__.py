"""Caller identity and modification secret handling."""
