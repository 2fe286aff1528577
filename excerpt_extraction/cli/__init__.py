"""Command-line interface for batch excerpt extraction."""
