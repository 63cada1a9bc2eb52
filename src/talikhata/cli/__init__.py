"""Command-line interface for talikhata."""
