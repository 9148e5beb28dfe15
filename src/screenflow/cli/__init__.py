"""Command line interface for screenflow."""
