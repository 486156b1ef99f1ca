"""Command-line interface for ServiceAgent."""
