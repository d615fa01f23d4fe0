"""Command line interface for davpy."""
