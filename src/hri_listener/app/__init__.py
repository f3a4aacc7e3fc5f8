"""Command-line tools for the HRI listener."""
