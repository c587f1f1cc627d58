"""Long command-line flag adapter."""
