"""Command line interface for substituter."""
