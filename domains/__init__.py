"""Domain modules for LifeFlow."""
