"""REST API for the shift board."""
