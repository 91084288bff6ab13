"""REST API for pathwise."""
