"""Command-line interface for mtpx."""
