"""Command-line entry points — OAuth setup and terminal viewers."""
