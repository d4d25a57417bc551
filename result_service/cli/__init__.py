"""Command line interface for result-service."""
