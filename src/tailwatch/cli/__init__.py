"""Command line interface for tailwatch."""
