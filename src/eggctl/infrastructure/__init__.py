"""Infrastructure layer: reading input documents from disk."""
