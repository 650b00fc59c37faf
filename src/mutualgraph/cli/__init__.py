"""Command line interface for mutualgraph."""
