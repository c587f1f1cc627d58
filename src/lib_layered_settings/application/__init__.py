"""Application layer: coercion rules, adapter ports, and the resolution policy."""
