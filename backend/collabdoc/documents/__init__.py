"""Document lifecycle management."""
