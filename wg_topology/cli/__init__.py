"""Command line interface for wg-topology."""
