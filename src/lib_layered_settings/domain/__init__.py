"""Domain layer: value kinds, destinations, the setting builder, and errors."""
