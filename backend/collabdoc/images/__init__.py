"""Image lifecycle management."""
