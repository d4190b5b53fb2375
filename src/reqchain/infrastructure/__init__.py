"""Infrastructure adapters for reqchain."""
