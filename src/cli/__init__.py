"""Command-line interface for the review scheduler."""
