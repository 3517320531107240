"""Chain-specific clients."""
