"""YAML document path adapter."""
