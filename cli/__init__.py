"""Command line tools for SGDNet."""
