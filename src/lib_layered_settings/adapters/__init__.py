"""Source adapters consulted during resolution."""
