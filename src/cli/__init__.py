"""Command-line interface for pathwise."""
