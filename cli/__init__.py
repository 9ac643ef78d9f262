"""Command line entrypoints for grove."""
