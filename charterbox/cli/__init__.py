"""Command line tools for CharterBox."""
