"""Command-line interface for scholardedupe."""
